"""Goal and contribution storage backends."""
import asyncio
import itertools
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from bson import Decimal128

from app.models.contribution import Contribution, ContributionCreate
from app.models.goal import Goal, GoalCreate


class GoalNotFoundError(ValueError):
    """Raised when a referenced goal does not exist."""

    def __init__(self, goal_id: int):
        super().__init__("Goal not found")
        self.goal_id = goal_id


class IdSequence:
    """Monotonically increasing identifiers, starting at 1, never reused."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)


class GoalStore(ABC):
    """Storage interface for goals and their contributions."""

    @abstractmethod
    async def create_goal(self, goal_create: GoalCreate) -> Goal:
        """Persist a validated goal and return it with id and timestamp."""

    @abstractmethod
    async def list_goals(self) -> list[Goal]:
        """Return all goals ordered by id."""

    @abstractmethod
    async def get_goal(self, goal_id: int) -> Optional[Goal]:
        """Return a goal, or None if it does not exist."""

    @abstractmethod
    async def create_contribution(
        self, contribution_create: ContributionCreate
    ) -> Contribution:
        """
        Persist a validated contribution.

        Raises:
            GoalNotFoundError: If the referenced goal does not exist
        """

    @abstractmethod
    async def list_contributions(self, goal_id: int) -> list[Contribution]:
        """Return the contributions for a goal ordered by id."""


class InMemoryGoalStore(GoalStore):
    """Process-local store. Data is lost on restart."""

    def __init__(
        self,
        goal_ids: Optional[IdSequence] = None,
        contribution_ids: Optional[IdSequence] = None,
    ):
        self.goals: dict[int, Goal] = {}
        self.contributions: dict[int, Contribution] = {}
        self.contribution_ids_by_goal: dict[int, list[int]] = {}
        self.goal_ids = goal_ids or IdSequence()
        self.contribution_ids = contribution_ids or IdSequence()
        # Id assignment and insert happen as one step per record
        self._lock = asyncio.Lock()

    async def create_goal(self, goal_create: GoalCreate) -> Goal:
        async with self._lock:
            goal = Goal(
                id=self.goal_ids.next_id(),
                name=goal_create.name,
                target_amount=goal_create.target_amount,
                currency=goal_create.currency,
                created_at=datetime.now(timezone.utc),
            )
            self.goals[goal.id] = goal
            self.contribution_ids_by_goal[goal.id] = []
        return goal

    async def list_goals(self) -> list[Goal]:
        return [self.goals[goal_id] for goal_id in sorted(self.goals)]

    async def get_goal(self, goal_id: int) -> Optional[Goal]:
        return self.goals.get(goal_id)

    async def create_contribution(
        self, contribution_create: ContributionCreate
    ) -> Contribution:
        async with self._lock:
            if contribution_create.goal_id not in self.goals:
                raise GoalNotFoundError(contribution_create.goal_id)

            contribution = Contribution(
                id=self.contribution_ids.next_id(),
                goal_id=contribution_create.goal_id,
                amount=contribution_create.amount,
                contribution_date=contribution_create.contribution_date,
                created_at=datetime.now(timezone.utc),
            )
            self.contributions[contribution.id] = contribution
            self.contribution_ids_by_goal[contribution.goal_id].append(contribution.id)
        return contribution

    async def list_contributions(self, goal_id: int) -> list[Contribution]:
        # Ids are appended in increasing order
        return [
            self.contributions[contribution_id]
            for contribution_id in self.contribution_ids_by_goal.get(goal_id, [])
        ]


class MongoGoalStore(GoalStore):
    """
    MongoDB-backed store.

    Integer ids come from a ``counters`` collection incremented atomically,
    so concurrent creates never share an id.
    """

    def __init__(self, db):
        """Initialize store with database connection."""
        self.db = db
        self.goals = db["goals"]
        self.contributions = db["contributions"]
        self.counters = db["counters"]

    async def _next_id(self, name: str) -> int:
        counter = await self.counters.find_one_and_update(
            {"_id": name},
            {"$inc": {"value": 1}},
            upsert=True,
            return_document=True,
        )
        return counter["value"]

    def _doc_to_goal(self, doc: dict) -> Goal:
        """Convert database document to Goal model."""
        return Goal(
            id=doc["_id"],
            name=doc["name"],
            target_amount=doc["target_amount"].to_decimal(),
            currency=doc["currency"],
            created_at=doc["created_at"],
        )

    def _doc_to_contribution(self, doc: dict) -> Contribution:
        """
        Convert database document to Contribution model.

        Contribution dates are stored as midnight datetimes.
        """
        contribution_date = doc["date"]
        if isinstance(contribution_date, datetime):
            contribution_date = contribution_date.date()

        return Contribution(
            id=doc["_id"],
            goal_id=doc["goal_id"],
            amount=doc["amount"].to_decimal(),
            contribution_date=contribution_date,
            created_at=doc["created_at"],
        )

    async def create_goal(self, goal_create: GoalCreate) -> Goal:
        goal_doc = {
            "_id": await self._next_id("goals"),
            "name": goal_create.name,
            "target_amount": Decimal128(str(goal_create.target_amount)),
            "currency": goal_create.currency.value,
            "created_at": datetime.now(timezone.utc),
        }
        await self.goals.insert_one(goal_doc)
        return self._doc_to_goal(goal_doc)

    async def list_goals(self) -> list[Goal]:
        cursor = self.goals.find({}).sort("_id", 1)
        goal_docs = await cursor.to_list(length=None)
        return [self._doc_to_goal(doc) for doc in goal_docs]

    async def get_goal(self, goal_id: int) -> Optional[Goal]:
        goal_doc = await self.goals.find_one({"_id": goal_id})
        if not goal_doc:
            return None
        return self._doc_to_goal(goal_doc)

    async def create_contribution(
        self, contribution_create: ContributionCreate
    ) -> Contribution:
        goal_doc = await self.goals.find_one({"_id": contribution_create.goal_id})
        if not goal_doc:
            raise GoalNotFoundError(contribution_create.goal_id)

        contribution_doc = {
            "_id": await self._next_id("contributions"),
            "goal_id": contribution_create.goal_id,
            "amount": Decimal128(str(contribution_create.amount)),
            "date": datetime.combine(
                contribution_create.contribution_date, datetime.min.time()
            ),
            "created_at": datetime.now(timezone.utc),
        }
        await self.contributions.insert_one(contribution_doc)
        return self._doc_to_contribution(contribution_doc)

    async def list_contributions(self, goal_id: int) -> list[Contribution]:
        cursor = self.contributions.find({"goal_id": goal_id}).sort("_id", 1)
        contribution_docs = await cursor.to_list(length=None)
        return [self._doc_to_contribution(doc) for doc in contribution_docs]
