"""Exchange rate gateway - fetches the live USD to INR rate."""
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

import httpx

from app.config import Settings
from app.models.dashboard import ExchangeRate

logger = logging.getLogger(__name__)


class ExchangeRateError(Exception):
    """Base class for rate fetch failures."""


class ExchangeRateConfigError(ExchangeRateError):
    """Raised when the provider is not configured."""


class ExchangeRateUpstreamError(ExchangeRateError):
    """Raised when the provider is unreachable or returns a bad payload."""


class ExchangeRateGateway:
    """Client for the exchangerate-api.com v6 ``latest`` endpoint."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize gateway.

        Args:
            settings: Application settings with provider URL, key and timeout
            client: Optional HTTP client; a short-lived one is created per
                fetch when omitted
        """
        self.api_url = settings.exchange_rate_api_url.rstrip("/")
        self.api_key = settings.exchange_rate_api_key
        self.timeout = settings.exchange_rate_timeout_seconds
        self.client = client

    async def _get(self, url: str) -> httpx.Response:
        if self.client is not None:
            return await self.client.get(url, timeout=self.timeout)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url)

    async def fetch_rate(self) -> ExchangeRate:
        """
        Fetch the current USD to INR rate.

        Every call is a fresh request; nothing is cached.

        Returns:
            ExchangeRate with the rate and a HH:MM:SS fetch time

        Raises:
            ExchangeRateConfigError: If no API key is configured
            ExchangeRateUpstreamError: If the request fails or the payload
                has no usable INR rate
        """
        if not self.api_key:
            raise ExchangeRateConfigError("Exchange rate API key not configured")

        url = f"{self.api_url}/{self.api_key}/latest/USD"

        try:
            response = await self._get(url)
        except httpx.TimeoutException as e:
            raise ExchangeRateUpstreamError("Exchange rate API timed out") from e
        except httpx.HTTPError as e:
            raise ExchangeRateUpstreamError(f"Exchange rate API unreachable: {e}") from e

        if response.is_error:
            raise ExchangeRateUpstreamError(
                f"Exchange rate API error: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExchangeRateUpstreamError("Exchange rate API returned invalid JSON") from e

        rate = self._parse_inr_rate(data)
        logger.info(f"Fetched USD/INR rate {rate}")

        return ExchangeRate(
            rate=rate,
            last_updated=datetime.now().strftime("%H:%M:%S"),
        )

    def _parse_inr_rate(self, data) -> Decimal:
        """
        Extract a positive INR rate from a provider payload.

        Expected shape: {"result": "success", "conversion_rates": {"INR": 83.5}}
        """
        if not isinstance(data, dict):
            raise ExchangeRateUpstreamError("Unexpected exchange rate payload")

        if data.get("result") != "success":
            error_type = data.get("error-type", "Unknown error")
            raise ExchangeRateUpstreamError(f"Exchange rate API error: {error_type}")

        rates = data.get("conversion_rates")
        if not isinstance(rates, dict) or rates.get("INR") is None:
            raise ExchangeRateUpstreamError("INR rate not found in exchange rate data")

        raw_rate = rates["INR"]
        if isinstance(raw_rate, bool):
            raise ExchangeRateUpstreamError(f"Invalid INR rate: {raw_rate!r}")

        try:
            rate = Decimal(str(raw_rate))
        except InvalidOperation as e:
            raise ExchangeRateUpstreamError(f"Invalid INR rate: {raw_rate!r}") from e

        if not rate.is_finite() or rate <= 0:
            raise ExchangeRateUpstreamError(f"Invalid INR rate: {raw_rate!r}")

        return rate
