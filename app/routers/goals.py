"""Goal router - API endpoints for savings goals."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_store
from app.models.goal import Goal, GoalCreate, GoalWithContributions
from app.services.goal_service import GoalService
from app.services.store import GoalNotFoundError


router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(goal: GoalCreate, store=Depends(get_store)):
    """
    Create a new goal.

    - Name must be 1-100 characters
    - Target amount must be positive
    - Currency must be USD or INR
    """
    service = GoalService(store)
    return await service.create_goal(goal)


@router.get("", response_model=list[GoalWithContributions])
async def list_goals(store=Depends(get_store)):
    """
    List all goals with contributions and progress.

    - Does not depend on exchange rate availability
    """
    service = GoalService(store)
    return await service.list_goals()


@router.get("/{goal_id}", response_model=GoalWithContributions)
async def get_goal(goal_id: int, store=Depends(get_store)):
    """
    Get a single goal by id.

    - Returns 400 if id is not an integer
    - Returns 404 if goal not found
    """
    service = GoalService(store)
    try:
        return await service.get_goal(goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
