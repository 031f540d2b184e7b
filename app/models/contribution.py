"""Contribution model definitions."""
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.currency import parse_positive_amount


class ContributionBase(BaseModel):
    """Base contribution fields."""

    goal_id: int
    amount: Decimal
    contribution_date: date = Field(alias="date")

    model_config = {"populate_by_name": True, "alias_generator": to_camel}


class ContributionCreate(ContributionBase):
    """Contribution creation model - validates user input."""

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, value) -> Decimal:
        return parse_positive_amount(
            value, "Contribution amount must be a positive number"
        )


class Contribution(ContributionBase):
    """Full contribution model with store-assigned fields."""

    id: int
    created_at: datetime
