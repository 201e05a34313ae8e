"""Domain models for the LazyCarbs client."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

FIRST_HOUR = 0
LAST_HOUR = 23


class CalorieField(str, Enum):
    """Named global calorie parameters."""

    USUAL_BE_CALORIES = "usual_be_calories"
    INSULIN_TYPE_CALORIE_COVERING = "insulin_type_calorie_covering"


@dataclass(frozen=True)
class HourlyFactor:
    """Bolus factor stored for one hour of the day."""

    hour: int
    bolus_factor: float


@dataclass(frozen=True)
class CalorieFactors:
    """Global calorie factors used by the bolus calculation."""

    usual_be_calories: float
    insulin_type_calorie_covering: float


# Used when the server has no calorie factors stored yet.
FALLBACK_CALORIE_FACTORS = CalorieFactors(
    usual_be_calories=105.0,
    insulin_type_calorie_covering=200.0,
)


@dataclass(frozen=True)
class RangeRequest:
    """Write one factor value across a closed range of hours."""

    from_hour: int
    to_hour: int
    value: float

    @property
    def hours(self) -> range:
        """Hours covered by the request in ascending order."""
        return range(self.from_hour, self.to_hour + 1)


@dataclass(frozen=True)
class RangeApplyResult:
    """Outcome of a fully applied range request."""

    request: RangeRequest
    committed_hours: list[int]


@dataclass(frozen=True)
class CalculationRequest:
    """Input for a remote bolus calculation.

    The calorie factors are optional overrides; when omitted, the pipeline's
    working values are used.
    """

    meal_carbs: float
    meal_calories: float
    current_hour: int
    current_minute: int
    movement_factor: float
    persist: bool = False
    usual_be_calories: float | None = None
    insulin_type_calorie_covering: float | None = None


@dataclass(frozen=True)
class CalculationResult:
    """Calculation outcome exactly as returned by the server."""

    payload: Mapping[str, object] = field(default_factory=dict)

    def __getitem__(self, key: str) -> object:
        return self.payload[key]

    @property
    def status_message(self) -> str | None:
        return _optional_str(self.payload.get("statusMessage"))

    @property
    def db_status(self) -> str | None:
        return _optional_str(self.payload.get("dbStatus"))

    @property
    def selected_method_name(self) -> str | None:
        return _optional_str(self.payload.get("selectedMethodName"))

    @property
    def method_explanation(self) -> str | None:
        return _optional_str(self.payload.get("methodExplanation"))

    @property
    def final_correct_bolus(self) -> float | None:
        value = self.payload.get("finalCorrectBolus")
        if isinstance(value, int | float):
            return float(value)
        return None


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
