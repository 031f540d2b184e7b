"""Pytest configuration and fixtures."""
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.models.dashboard import ExchangeRate
from app.routers.exchange_rates import get_exchange_rate_gateway
from app.services.exchange_rate_service import (
    ExchangeRateConfigError,
    ExchangeRateUpstreamError,
)
from app.services.store import InMemoryGoalStore


class StubGateway:
    """Exchange rate gateway returning a fixed rate, or failing."""

    def __init__(self, rate: str = "83.5", error: Exception | None = None):
        self.rate = Decimal(rate)
        self.error = error
        self.calls = 0

    async def fetch_rate(self) -> ExchangeRate:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ExchangeRate(rate=self.rate, last_updated="12:00:00")


@pytest.fixture
def store():
    """Fresh in-memory store for each test."""
    return InMemoryGoalStore()


@pytest.fixture
def gateway():
    """Gateway stub with a fixed 83.5 INR/USD rate."""
    return StubGateway()


@pytest.fixture
def failing_gateway():
    """Gateway stub whose fetch always fails."""
    return StubGateway(error=ExchangeRateUpstreamError("Exchange rate API error: 503"))


@pytest.fixture
def unconfigured_gateway():
    """Gateway stub failing as if no API key were set."""
    return StubGateway(
        error=ExchangeRateConfigError("Exchange rate API key not configured")
    )


@pytest_asyncio.fixture
async def app_client(store, gateway):
    """
    Create a test client over a clean in-memory store.

    This fixture:
    - Points the database dependency at a fresh store
    - Replaces the exchange rate gateway with a stub
    - Yields an async HTTP client for testing
    """
    from app.database import database

    original_store = database.store
    database.store = store
    app.dependency_overrides[get_exchange_rate_gateway] = lambda: gateway

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    database.store = original_store
