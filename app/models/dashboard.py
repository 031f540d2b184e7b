"""Exchange rate and dashboard model definitions."""
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel

from app.models.currency import Currency


# Rates are exact Decimals internally but plain numbers on the wire
Rate = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ExchangeRate(BaseModel):
    """A freshly fetched USD to INR rate (INR per 1 USD)."""

    rate: Rate
    last_updated: str

    model_config = {"populate_by_name": True, "alias_generator": to_camel}


class DashboardData(BaseModel):
    """Totals across all goals, normalized into the reporting currency."""

    total_target: Decimal
    total_saved: Decimal
    overall_progress: float
    currency: Currency = Currency.INR
    exchange_rate: ExchangeRate

    model_config = {"populate_by_name": True, "alias_generator": to_camel}
