"""Global calorie factors: loading defaults and editing them."""

import logging
from dataclasses import dataclass, field, replace

import httpx
from pydantic import ValidationError

from lazycarbs.adapters.api_models import CalorieFactorsPayload
from lazycarbs.adapters.lazycarbs_api import LazyCarbsApi
from lazycarbs.domain.errors import (
    DefaultsUnavailable,
    InvalidValue,
    NoCredential,
    SaveFailed,
    Unauthorized,
)
from lazycarbs.domain.models import (
    FALLBACK_CALORIE_FACTORS,
    CalorieFactors,
    CalorieField,
)
from lazycarbs.services.credentials import CredentialGate
from lazycarbs.services.remote import (
    error_message,
    is_not_found,
    is_positive_number,
    is_unauthorized,
    parse_number,
    status_code_from_exception,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedDefaults:
    """Calorie factors plus whether they came from the built-in fallback."""

    factors: CalorieFactors
    used_fallback: bool


async def fetch_calorie_defaults(api: LazyCarbsApi) -> LoadedDefaults:
    """Fetch stored calorie factors, falling back when none are stored yet."""
    try:
        payload = await api.get_calorie_factors()
    except httpx.HTTPError as exc:
        if is_not_found(exc):
            _logger.info("No calorie factors stored yet; using fallback defaults")
            return LoadedDefaults(factors=FALLBACK_CALORIE_FACTORS, used_fallback=True)
        raise DefaultsUnavailable(
            error_message(exc), status_code_from_exception(exc)
        ) from exc
    except ValueError as exc:
        raise DefaultsUnavailable(f"Malformed calorie factors response: {exc}") from exc
    try:
        factors = CalorieFactorsPayload.model_validate(payload).to_domain()
    except ValidationError as exc:
        raise DefaultsUnavailable(f"Malformed calorie factors: {exc}") from exc
    return LoadedDefaults(factors=factors, used_fallback=False)


def with_field(
    factors: CalorieFactors, calorie_field: CalorieField, value: float
) -> CalorieFactors:
    """Return a copy of ``factors`` with one field replaced."""
    return replace(factors, **{calorie_field.value: value})


@dataclass
class CalorieFactorEditor:
    """Edits the two global calorie factors stored on the server."""

    api: LazyCarbsApi
    gate: CredentialGate
    baseline: CalorieFactors | None = None
    working: CalorieFactors = field(default=FALLBACK_CALORIE_FACTORS)
    used_fallback: bool = False

    async def load(self) -> CalorieFactors:
        """Load the stored factors into both baseline and working values."""
        loaded = await fetch_calorie_defaults(self.api)
        self.used_fallback = loaded.used_fallback
        self.baseline = None if loaded.used_fallback else loaded.factors
        self.working = loaded.factors
        return loaded.factors

    def set_field(self, calorie_field: CalorieField, raw_text: str) -> None:
        self.working = with_field(self.working, calorie_field, parse_number(raw_text))

    def is_dirty(self) -> bool:
        return self.working != self.baseline

    async def save(self) -> CalorieFactors:
        """Persist the working factors; requires a valid API key."""
        if not self.gate.is_valid():
            self.gate.request_prompt()
            raise NoCredential("A valid API key is required to save calorie factors")
        factors = self.working
        if not (
            is_positive_number(factors.usual_be_calories)
            and is_positive_number(factors.insulin_type_calorie_covering)
        ):
            raise InvalidValue("Both calorie factors must be positive numbers")

        payload = CalorieFactorsPayload.from_domain(factors).model_dump(by_alias=True)
        try:
            await self.api.put_calorie_factors(payload, self.gate.attach())
        except httpx.HTTPError as exc:
            if is_unauthorized(exc):
                self.gate.invalidate()
                raise Unauthorized(
                    "API key rejected while saving calorie factors"
                ) from exc
            message = error_message(exc)
            _logger.warning("Saving calorie factors failed: %s", message)
            raise SaveFailed(message, status_code_from_exception(exc)) from exc
        self.baseline = factors
        self.used_fallback = False
        _logger.info("Saved calorie factors")
        return factors
