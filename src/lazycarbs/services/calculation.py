"""Two-phase bolus calculation: load calorie defaults, then submit."""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

import httpx

from lazycarbs.adapters.api_models import CalculationRequestPayload
from lazycarbs.adapters.lazycarbs_api import LazyCarbsApi
from lazycarbs.domain.errors import (
    CalculationFailed,
    DefaultsUnavailable,
    InvalidInput,
    PersistenceNeedsCredential,
    PipelineNotReady,
    Unauthorized,
)
from lazycarbs.domain.models import (
    FALLBACK_CALORIE_FACTORS,
    CalculationRequest,
    CalculationResult,
    CalorieFactors,
    CalorieField,
)
from lazycarbs.services.calorie_factors import fetch_calorie_defaults, with_field
from lazycarbs.services.credentials import CredentialGate
from lazycarbs.services.remote import (
    is_positive_number,
    is_unauthorized,
    parse_number,
    status_code_from_exception,
    status_message,
)

_logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    """States of the calculation pipeline."""

    LOADING_DEFAULTS = "LOADING_DEFAULTS"
    READY = "READY"
    SUBMITTING = "SUBMITTING"
    DEFAULTS_UNAVAILABLE = "DEFAULTS_UNAVAILABLE"


@dataclass
class CalculationPipeline:
    """Loads calorie defaults, then submits calculations against them.

    A missing set of stored defaults is not an error: the pipeline seeds its
    working values with the fallback factors. Persisting a result needs a
    valid API key, running a plain calculation does not.
    """

    api: LazyCarbsApi
    gate: CredentialGate
    state: PipelineState = PipelineState.LOADING_DEFAULTS
    working: CalorieFactors = field(default=FALLBACK_CALORIE_FACTORS)
    used_fallback: bool = False
    error: str | None = None
    last_result: CalculationResult | None = None

    async def load(self) -> CalorieFactors:
        """Fetch calorie defaults; call again to retry after a failure."""
        self.state = PipelineState.LOADING_DEFAULTS
        self.error = None
        try:
            loaded = await fetch_calorie_defaults(self.api)
        except DefaultsUnavailable as exc:
            self.state = PipelineState.DEFAULTS_UNAVAILABLE
            self.error = exc.message
            _logger.warning("Calorie defaults unavailable: %s", exc.message)
            raise
        self.working = loaded.factors
        self.used_fallback = loaded.used_fallback
        self.state = PipelineState.READY
        return loaded.factors

    def set_working_value(self, calorie_field: CalorieField, raw_text: str) -> None:
        self.working = with_field(self.working, calorie_field, parse_number(raw_text))

    async def submit(self, request: CalculationRequest) -> CalculationResult:
        """Validate and submit a calculation, returning the server result."""
        if self.state is not PipelineState.READY:
            raise PipelineNotReady(f"Cannot submit while {self.state.value}")
        payload = self._build_payload(request)

        if request.persist and not self.gate.is_valid():
            self.gate.request_prompt()
            raise PersistenceNeedsCredential(
                "A valid API key is required to store calculations"
            )
        headers = self.gate.attach() if request.persist else {}

        self.state = PipelineState.SUBMITTING
        try:
            data = await self.api.calculate(
                payload.model_dump(by_alias=True), headers
            )
        except httpx.HTTPError as exc:
            if is_unauthorized(exc):
                self.gate.invalidate()
                raise Unauthorized(
                    "API key rejected while storing calculation"
                ) from exc
            message = status_message(exc)
            _logger.warning("Calculation failed: %s", message)
            raise CalculationFailed(message, status_code_from_exception(exc)) from exc
        except ValueError as exc:
            _logger.warning("Calculation returned a malformed response: %s", exc)
            raise CalculationFailed(f"Malformed calculation response: {exc}") from exc
        finally:
            self.state = PipelineState.READY
        if not isinstance(data, dict):
            raise CalculationFailed(
                "Malformed calculation response: expected an object"
            )

        self.last_result = CalculationResult(payload=data)
        _logger.info(
            "Calculation finished (persist=%s): %s",
            request.persist,
            self.last_result.status_message,
        )
        return self.last_result

    def _build_payload(self, request: CalculationRequest) -> CalculationRequestPayload:
        usual_be_calories = _override(
            request.usual_be_calories, self.working.usual_be_calories
        )
        covering = _override(
            request.insulin_type_calorie_covering,
            self.working.insulin_type_calorie_covering,
        )
        numbers = {
            "mealCarbs": request.meal_carbs,
            "mealCalories": request.meal_calories,
            "currentHour": request.current_hour,
            "currentMinute": request.current_minute,
            "movementFactor": request.movement_factor,
        }
        for name, value in numbers.items():
            if not _is_finite(value):
                raise InvalidInput(f"Please fill in all fields correctly: {name}")
        if not is_positive_number(usual_be_calories):
            raise InvalidInput("usualBeCalories must be a positive number")
        if not is_positive_number(covering):
            raise InvalidInput("insulinTypeCalorieCovering must be a positive number")
        if not _in_clock_range(request.current_hour, 23):
            raise InvalidInput("currentHour must be a whole number between 0 and 23")
        if not _in_clock_range(request.current_minute, 59):
            raise InvalidInput("currentMinute must be a whole number between 0 and 59")

        return CalculationRequestPayload(
            meal_carbs=request.meal_carbs,
            meal_calories=request.meal_calories,
            usual_be_calories=usual_be_calories,
            insulin_type_calorie_covering=covering,
            current_hour=int(request.current_hour),
            current_minute=int(request.current_minute),
            movement_factor=request.movement_factor,
            enable_database_storage=request.persist,
        )


def _override(value: float | None, fallback: float) -> float:
    return fallback if value is None else value


def _is_finite(value: object) -> bool:
    return isinstance(value, int | float) and math.isfinite(value)


def _in_clock_range(value: float, upper: int) -> bool:
    return float(value).is_integer() and 0 <= value <= upper
