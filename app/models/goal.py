"""Goal model definitions."""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from app.models.contribution import Contribution
from app.models.currency import Currency, parse_positive_amount


MAX_NAME_LENGTH = 100


class GoalBase(BaseModel):
    """Base goal fields."""

    name: str
    target_amount: Decimal
    currency: Currency

    model_config = {"populate_by_name": True, "alias_generator": to_camel}


class GoalCreate(GoalBase):
    """Goal creation model - validates user input."""

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Goal name is required")
        if len(value) > MAX_NAME_LENGTH:
            raise ValueError("Goal name too long")
        return value

    @field_validator("target_amount", mode="before")
    @classmethod
    def validate_target_amount(cls, value) -> Decimal:
        return parse_positive_amount(value, "Target amount must be a positive number")

    @field_validator("currency", mode="before")
    @classmethod
    def validate_currency(cls, value):
        supported = {currency.value for currency in Currency}
        if not isinstance(value, str) or value not in supported:
            raise ValueError("Currency must be INR or USD")
        return value


class Goal(GoalBase):
    """Full goal model with store-assigned fields."""

    id: int
    created_at: datetime


class GoalWithContributions(Goal):
    """Goal plus its contributions and derived progress fields."""

    contributions: list[Contribution] = []
    total_saved: Decimal
    progress_percentage: float
    remaining: Decimal
