"""Editing of per-hour bolus factors against the server baseline."""

import logging
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from lazycarbs.adapters.api_models import HourlyBolusFactorPayload
from lazycarbs.adapters.lazycarbs_api import LazyCarbsApi
from lazycarbs.domain.errors import (
    FactorsUnavailable,
    InvalidValue,
    NoCredential,
    NoPendingEdit,
    SaveFailed,
    Unauthorized,
)
from lazycarbs.domain.models import FIRST_HOUR, LAST_HOUR, HourlyFactor
from lazycarbs.services.credentials import CredentialGate
from lazycarbs.services.remote import (
    error_message,
    is_positive_number,
    is_unauthorized,
    parse_number,
    status_code_from_exception,
)

_logger = logging.getLogger(__name__)


@dataclass
class HourlyFactorEditor:
    """Keeps server-confirmed factors apart from the user's unsaved edits.

    ``baseline`` holds the last fetched or saved value per hour and
    ``pending`` holds what the user typed since then. Both are only changed
    through this class.
    """

    api: LazyCarbsApi
    gate: CredentialGate
    baseline: dict[int, float] = field(default_factory=dict)
    pending: dict[int, float] = field(default_factory=dict)

    async def load(self) -> list[HourlyFactor]:
        """Fetch all hourly factors and replace the baseline."""
        try:
            payload = await self.api.get_hourly_factors()
        except httpx.HTTPError as exc:
            raise FactorsUnavailable(
                error_message(exc), status_code_from_exception(exc)
            ) from exc
        except ValueError as exc:
            raise FactorsUnavailable(
                f"Malformed bolus factors response: {exc}"
            ) from exc
        if not isinstance(payload, list):
            raise FactorsUnavailable(
                "Malformed bolus factors response: expected a list"
            )
        try:
            parsed = [HourlyBolusFactorPayload.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise FactorsUnavailable(f"Malformed bolus factors: {exc}") from exc
        factors = sorted(
            (item.to_domain() for item in parsed), key=lambda factor: factor.hour
        )
        self.baseline = {factor.hour: factor.bolus_factor for factor in factors}
        self.pending = {}
        return factors

    def factors(self) -> list[HourlyFactor]:
        """Return the baseline as records ordered by hour."""
        return [
            HourlyFactor(hour=hour, bolus_factor=value)
            for hour, value in sorted(self.baseline.items())
        ]

    def set_edit(self, hour: int, raw_text: str) -> None:
        """Record user input for an hour; empty input reverts to the baseline."""
        if raw_text == "":
            self.pending.pop(hour, None)
            return
        self.pending[hour] = parse_number(raw_text)

    def clear_edit(self, hour: int) -> None:
        self.pending.pop(hour, None)

    def is_dirty(self, hour: int) -> bool:
        return hour in self.pending

    def value_to_save(self, hour: int) -> float | None:
        """Return the pending value, or None when there is nothing to save."""
        return self.pending.get(hour)

    def baseline_value(self, hour: int) -> float | None:
        return self.baseline.get(hour)

    def display_value(self, hour: int) -> float | None:
        if hour in self.pending:
            return self.pending[hour]
        return self.baseline.get(hour)

    async def save(self, hour: int) -> HourlyFactor:
        """Save the pending edit for one hour."""
        if not self.gate.is_valid():
            self.gate.request_prompt()
            raise NoCredential("A valid API key is required to save bolus factors")
        value = self.value_to_save(hour)
        if value is None:
            raise NoPendingEdit(f"No edited bolus factor for hour {hour}")
        if not is_positive_number(value):
            raise InvalidValue(
                f"Invalid bolus factor for hour {hour}: must be a positive number"
            )
        return await self.commit(hour, value)

    async def commit(self, hour: int, value: float) -> HourlyFactor:
        """Write one hour's factor and reconcile local state on success."""
        if not FIRST_HOUR <= hour <= LAST_HOUR:
            raise InvalidValue(f"Hour {hour} is outside {FIRST_HOUR}..{LAST_HOUR}")
        payload = HourlyBolusFactorPayload(hour=hour, bolus_factor=value).model_dump(
            by_alias=True
        )
        try:
            await self.api.put_hourly_factor(hour, payload, self.gate.attach())
        except httpx.HTTPError as exc:
            if is_unauthorized(exc):
                self.gate.invalidate()
                raise Unauthorized(
                    f"API key rejected while saving hour {hour}"
                ) from exc
            message = error_message(exc)
            _logger.warning("Saving bolus factor for hour %s failed: %s", hour, message)
            raise SaveFailed(message, status_code_from_exception(exc)) from exc
        self.baseline[hour] = value
        self.pending.pop(hour, None)
        _logger.info("Saved bolus factor %.2f for hour %s", value, hour)
        return HourlyFactor(hour=hour, bolus_factor=value)
