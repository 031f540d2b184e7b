"""Contribution router - API endpoints for recording savings."""
from fastapi import APIRouter, Depends, status

from app.database import get_store
from app.models.contribution import Contribution, ContributionCreate
from app.services.goal_service import GoalService
from app.services.store import GoalNotFoundError
from app.utils.errors import field_errors_response


router = APIRouter(prefix="/api/contributions", tags=["contributions"])


@router.post("", response_model=Contribution, status_code=status.HTTP_201_CREATED)
async def create_contribution(
    contribution: ContributionCreate,
    store=Depends(get_store),
):
    """
    Record a contribution toward a goal.

    - Amount must be positive
    - Date must be a calendar date (YYYY-MM-DD)
    - Returns 400 with a goalId field error if the goal does not exist
    """
    service = GoalService(store)
    try:
        return await service.create_contribution(contribution)
    except GoalNotFoundError as e:
        return field_errors_response([{"field": "goalId", "message": str(e)}])
