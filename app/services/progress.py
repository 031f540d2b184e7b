"""Per-goal progress calculation."""
from dataclasses import dataclass
from decimal import Decimal

from app.models.contribution import Contribution
from app.models.currency import money_context, quantize_amount
from app.models.goal import Goal, GoalWithContributions


HUNDRED = Decimal("100")
ZERO = Decimal("0")


@dataclass(frozen=True)
class GoalProgress:
    """Derived progress figures for a single goal."""

    total_saved: Decimal
    progress_percentage: Decimal
    remaining: Decimal


def percentage_of(part: Decimal, whole: Decimal) -> Decimal:
    """
    Return ``part`` as a percentage of ``whole``, capped to [0, 100].

    A non-positive ``whole`` yields 0 rather than failing.
    """
    if whole <= 0:
        return ZERO
    return max(ZERO, min(HUNDRED, part / whole * HUNDRED))


def calculate_progress(goal: Goal, contributions: list[Contribution]) -> GoalProgress:
    """
    Calculate saved total, progress and remaining amount for a goal.

    All contributions are assumed to be in the goal's own currency.

    Args:
        goal: Goal to measure
        contributions: Every contribution recorded against the goal

    Returns:
        GoalProgress with two-place money values

    Examples:
        A 1000 INR goal with contributions of 400 and 300 gives
        total_saved 700.00, progress 70 and remaining 300.00.
    """
    target = goal.target_amount

    with money_context():
        total_saved = quantize_amount(
            sum((contribution.amount for contribution in contributions), ZERO)
        )
        return GoalProgress(
            total_saved=total_saved,
            progress_percentage=percentage_of(total_saved, target),
            remaining=quantize_amount(max(ZERO, target - total_saved)),
        )


def attach_progress(
    goal: Goal, contributions: list[Contribution]
) -> GoalWithContributions:
    """Build the derived goal view with contributions in creation order."""
    ordered = sorted(contributions, key=lambda contribution: contribution.id)
    progress = calculate_progress(goal, ordered)

    return GoalWithContributions(
        id=goal.id,
        name=goal.name,
        target_amount=goal.target_amount,
        currency=goal.currency,
        created_at=goal.created_at,
        contributions=ordered,
        total_saved=progress.total_saved,
        progress_percentage=float(progress.progress_percentage),
        remaining=progress.remaining,
    )
