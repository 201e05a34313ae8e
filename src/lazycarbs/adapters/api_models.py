"""Pydantic models for LazyCarbs API payloads."""

from pydantic import BaseModel, ConfigDict, Field

from lazycarbs.domain.models import CalorieFactors, HourlyFactor


class HourlyBolusFactorPayload(BaseModel):
    """Bolus factor entry for a single hour."""

    model_config = ConfigDict(populate_by_name=True)

    hour: int = Field(ge=0, le=23)
    bolus_factor: float = Field(alias="bolusFactor")

    def to_domain(self) -> HourlyFactor:
        return HourlyFactor(hour=self.hour, bolus_factor=self.bolus_factor)


class CalorieFactorsPayload(BaseModel):
    """Global calorie factors."""

    model_config = ConfigDict(populate_by_name=True)

    usual_be_calories: float = Field(alias="usualBeCalories")
    insulin_type_calorie_covering: float = Field(alias="insulinTypeCalorieCovering")

    @classmethod
    def from_domain(cls, factors: CalorieFactors) -> "CalorieFactorsPayload":
        return cls(
            usual_be_calories=factors.usual_be_calories,
            insulin_type_calorie_covering=factors.insulin_type_calorie_covering,
        )

    def to_domain(self) -> CalorieFactors:
        return CalorieFactors(
            usual_be_calories=self.usual_be_calories,
            insulin_type_calorie_covering=self.insulin_type_calorie_covering,
        )


class CalculationRequestPayload(BaseModel):
    """Body of a calculation request."""

    model_config = ConfigDict(populate_by_name=True)

    meal_carbs: float = Field(alias="mealCarbs")
    meal_calories: float = Field(alias="mealCalories")
    usual_be_calories: float = Field(alias="usualBeCalories")
    insulin_type_calorie_covering: float = Field(alias="insulinTypeCalorieCovering")
    current_hour: int = Field(alias="currentHour")
    current_minute: int = Field(alias="currentMinute")
    movement_factor: float = Field(alias="movementFactor")
    enable_database_storage: bool = Field(alias="enableDatabaseStorage")
