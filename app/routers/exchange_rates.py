"""Exchange rate and dashboard endpoints."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import get_store
from app.models.dashboard import DashboardData, ExchangeRate
from app.services.dashboard_service import build_dashboard
from app.services.exchange_rate_service import ExchangeRateError, ExchangeRateGateway
from app.services.goal_service import GoalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["exchange-rate"])


def get_exchange_rate_gateway() -> ExchangeRateGateway:
    """Dependency to get an exchange rate gateway."""
    return ExchangeRateGateway(settings)


def _rate_failure(error: ExchangeRateError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"detail": "Failed to fetch exchange rate", "error": str(error)},
    )


@router.get("/exchange-rate", response_model=ExchangeRate)
async def get_exchange_rate(
    gateway: ExchangeRateGateway = Depends(get_exchange_rate_gateway),
):
    """
    Get the current USD to INR rate.

    - Fetched fresh on every call
    - Returns 500 if the provider is misconfigured or unavailable
    """
    try:
        return await gateway.fetch_rate()
    except ExchangeRateError as e:
        logger.error(f"Exchange rate fetch error: {e}")
        return _rate_failure(e)


@router.get("/dashboard", response_model=DashboardData)
async def get_dashboard(
    store=Depends(get_store),
    gateway: ExchangeRateGateway = Depends(get_exchange_rate_gateway),
):
    """
    Get totals across all goals in INR.

    - USD goals are converted at the live rate
    - Returns 500 without partial totals if the rate cannot be fetched
    """
    service = GoalService(store)
    goals = await service.list_goals()

    try:
        exchange_rate = await gateway.fetch_rate()
    except ExchangeRateError as e:
        logger.error(f"Dashboard exchange rate fetch error: {e}")
        return _rate_failure(e)

    return build_dashboard(goals, exchange_rate)
