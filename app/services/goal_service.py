"""Goal service - business logic for savings goals and contributions."""
import logging

from app.models.contribution import Contribution, ContributionCreate
from app.models.goal import Goal, GoalCreate, GoalWithContributions
from app.services.progress import attach_progress
from app.services.store import GoalNotFoundError, GoalStore

logger = logging.getLogger(__name__)


class GoalService:
    """Service for handling goal and contribution operations."""

    def __init__(self, store: GoalStore):
        """Initialize service with a goal store."""
        self.store = store

    async def _with_progress(self, goal: Goal) -> GoalWithContributions:
        contributions = await self.store.list_contributions(goal.id)
        return attach_progress(goal, contributions)

    async def create_goal(self, goal_create: GoalCreate) -> Goal:
        """
        Create a new goal.

        Args:
            goal_create: Validated goal creation data

        Returns:
            Created goal with assigned id and timestamp
        """
        goal = await self.store.create_goal(goal_create)
        logger.info(
            f"Created goal {goal.id} ({goal.name!r}, "
            f"{goal.target_amount} {goal.currency.value})"
        )
        return goal

    async def list_goals(self) -> list[GoalWithContributions]:
        """
        List all goals with their contributions and progress.

        Returns:
            Goals ordered by id
        """
        goals = await self.store.list_goals()
        return [await self._with_progress(goal) for goal in goals]

    async def get_goal(self, goal_id: int) -> GoalWithContributions:
        """
        Get a single goal with its contributions and progress.

        Args:
            goal_id: Goal id

        Returns:
            Goal with derived progress fields

        Raises:
            GoalNotFoundError: If goal not found
        """
        goal = await self.store.get_goal(goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)

        return await self._with_progress(goal)

    async def create_contribution(
        self, contribution_create: ContributionCreate
    ) -> Contribution:
        """
        Record a contribution toward an existing goal.

        Args:
            contribution_create: Validated contribution data

        Returns:
            Created contribution

        Raises:
            GoalNotFoundError: If the goal does not exist. Nothing is stored.
        """
        try:
            contribution = await self.store.create_contribution(contribution_create)
        except GoalNotFoundError:
            logger.warning(
                f"Rejected contribution for unknown goal {contribution_create.goal_id}"
            )
            raise

        logger.info(
            f"Recorded contribution {contribution.id} of {contribution.amount} "
            f"toward goal {contribution.goal_id}"
        )
        return contribution
