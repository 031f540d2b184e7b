"""Dashboard aggregation across goals in different currencies."""
import logging

from app.models.currency import Currency, money_context, quantize_amount
from app.models.dashboard import DashboardData, ExchangeRate
from app.models.goal import GoalWithContributions
from app.services.currency import convert, validate_rate
from app.services.progress import ZERO, percentage_of

logger = logging.getLogger(__name__)

REPORTING_CURRENCY = Currency.INR


def build_dashboard(
    goals: list[GoalWithContributions],
    exchange_rate: ExchangeRate,
) -> DashboardData:
    """
    Sum every goal's target and saved amount in the reporting currency.

    Args:
        goals: Goals with progress already attached
        exchange_rate: Live USD to INR rate used for normalization

    Returns:
        DashboardData with INR totals and overall progress

    Raises:
        InvalidRateError: If no usable rate is supplied. There is no
            fallback rate; the whole computation fails instead.
    """
    rate = validate_rate(exchange_rate.rate if exchange_rate is not None else None)

    total_target = ZERO
    total_saved = ZERO

    with money_context():
        for goal in goals:
            total_target += convert(
                goal.target_amount, goal.currency, REPORTING_CURRENCY, rate
            )
            total_saved += convert(
                goal.total_saved, goal.currency, REPORTING_CURRENCY, rate
            )

        total_target = quantize_amount(total_target)
        total_saved = quantize_amount(total_saved)
        overall_progress = percentage_of(total_saved, total_target)

    logger.debug(
        f"Dashboard over {len(goals)} goals at rate {rate}: "
        f"{total_saved} / {total_target} {REPORTING_CURRENCY.value}"
    )

    return DashboardData(
        total_target=total_target,
        total_saved=total_saved,
        overall_progress=float(overall_progress),
        currency=REPORTING_CURRENCY,
        exchange_rate=exchange_rate,
    )
