from pydantic import BaseModel, Field, field_validator
from typing import Dict

DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")

# {day: {meal_type: meal_name}}
MealPlan = Dict[str, Dict[str, str]]


def normalize_day(value: str) -> str:
    day = (value or "").strip().lower()
    if day not in DAYS:
        raise ValueError(f"Invalid day: {value}")
    return day


def normalize_meal_type(value: str) -> str:
    meal_type = (value or "").strip().lower()
    if meal_type not in MEAL_TYPES:
        raise ValueError(f"Invalid meal type: {value}")
    return meal_type


class MealSlot(BaseModel):
    day: str
    meal_type: str
    meal_name: str = Field(min_length=1)

    @field_validator("day")
    @classmethod
    def check_day(cls, value: str) -> str:
        return normalize_day(value)

    @field_validator("meal_type")
    @classmethod
    def check_meal_type(cls, value: str) -> str:
        return normalize_meal_type(value)


class MealPlanSync(BaseModel):
    meal_plan: MealPlan

    @field_validator("meal_plan")
    @classmethod
    def check_plan(cls, value: MealPlan) -> MealPlan:
        plan: MealPlan = {}
        for day, meals in value.items():
            day_key = normalize_day(day)
            for meal_type, meal_name in (meals or {}).items():
                if not meal_name:
                    continue
                plan.setdefault(day_key, {})[normalize_meal_type(meal_type)] = meal_name
        return plan


class MealPlanResult(BaseModel):
    meal_plan: MealPlan
