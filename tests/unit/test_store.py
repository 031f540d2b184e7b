"""Tests for goal store backends."""
import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import Decimal128

from app.models.contribution import ContributionCreate
from app.models.goal import GoalCreate


def goal_create(name: str = "Vacation", target: str = "1000", currency: str = "INR"):
    return GoalCreate(name=name, target_amount=target, currency=currency)


def contribution_create(goal_id: int = 1, amount: str = "100", on: str = "2024-03-01"):
    return ContributionCreate(goal_id=goal_id, amount=amount, date=on)


class TestIdSequence:
    """Tests for IdSequence."""

    def test_starts_at_one_and_increments(self):
        from app.services.store import IdSequence

        sequence = IdSequence()

        assert [sequence.next_id() for _ in range(3)] == [1, 2, 3]

    def test_custom_start(self):
        from app.services.store import IdSequence

        assert IdSequence(start=100).next_id() == 100


@pytest.mark.asyncio
class TestInMemoryGoalStore:
    """Tests for InMemoryGoalStore."""

    async def test_create_goal_assigns_id_and_timestamp(self):
        """Test created goals get sequential ids and a creation time."""
        from app.services.store import InMemoryGoalStore

        store = InMemoryGoalStore()

        first = await store.create_goal(goal_create("Car"))
        second = await store.create_goal(goal_create("House"))

        assert first.id == 1
        assert second.id == 2
        assert first.created_at.tzinfo is not None
        assert first.target_amount == Decimal("1000.00")

    async def test_list_goals_ordered_by_id(self):
        from app.services.store import InMemoryGoalStore

        store = InMemoryGoalStore()
        for name in ["A", "B", "C"]:
            await store.create_goal(goal_create(name))

        goals = await store.list_goals()

        assert [goal.name for goal in goals] == ["A", "B", "C"]

    async def test_get_goal_missing_returns_none(self):
        """Test not-found is signalled with None, not an empty goal."""
        from app.services.store import InMemoryGoalStore

        store = InMemoryGoalStore()

        assert await store.get_goal(42) is None

    async def test_create_contribution_for_existing_goal(self):
        from app.services.store import InMemoryGoalStore

        store = InMemoryGoalStore()
        goal = await store.create_goal(goal_create())

        contribution = await store.create_contribution(
            contribution_create(goal_id=goal.id, amount="250.5")
        )

        assert contribution.id == 1
        assert contribution.goal_id == goal.id
        assert contribution.amount == Decimal("250.50")
        assert contribution.contribution_date == date(2024, 3, 1)

    async def test_create_contribution_unknown_goal(self):
        """Test contributions to unknown goals are rejected without storing."""
        from app.services.store import GoalNotFoundError, InMemoryGoalStore

        store = InMemoryGoalStore()

        with pytest.raises(GoalNotFoundError, match="Goal not found"):
            await store.create_contribution(contribution_create(goal_id=7))

        assert store.contributions == {}
        # Rejected create must not burn an id
        goal = await store.create_goal(goal_create())
        contribution = await store.create_contribution(contribution_create(goal_id=goal.id))
        assert contribution.id == 1

    async def test_list_contributions_filters_by_goal(self):
        from app.services.store import InMemoryGoalStore

        store = InMemoryGoalStore()
        first = await store.create_goal(goal_create("First"))
        second = await store.create_goal(goal_create("Second"))
        await store.create_contribution(contribution_create(first.id, "10"))
        await store.create_contribution(contribution_create(second.id, "20"))
        await store.create_contribution(contribution_create(first.id, "30"))

        contributions = await store.list_contributions(first.id)

        assert [c.id for c in contributions] == [1, 3]
        assert await store.list_contributions(99) == []

    async def test_contributions_indexed_by_goal(self):
        """Test per-goal lookup reads only that goal's contribution ids."""
        from app.services.store import InMemoryGoalStore

        store = InMemoryGoalStore()
        first = await store.create_goal(goal_create("First"))
        second = await store.create_goal(goal_create("Second"))
        await store.create_contribution(contribution_create(second.id, "20"))
        await store.create_contribution(contribution_create(first.id, "10"))

        assert store.contribution_ids_by_goal == {first.id: [2], second.id: [1]}
        assert [c.amount for c in await store.list_contributions(first.id)] == [
            Decimal("10.00")
        ]

    async def test_concurrent_creates_get_unique_ids(self):
        """Test parallel creates never share an identifier."""
        from app.services.store import InMemoryGoalStore

        store = InMemoryGoalStore()

        goals = await asyncio.gather(
            *(store.create_goal(goal_create(f"Goal {i}")) for i in range(50))
        )

        assert sorted(goal.id for goal in goals) == list(range(1, 51))

    async def test_injected_sequences(self):
        """Test identity strategy can be supplied by the caller."""
        from app.services.store import IdSequence, InMemoryGoalStore

        store = InMemoryGoalStore(goal_ids=IdSequence(start=10))

        goal = await store.create_goal(goal_create())

        assert goal.id == 10


def mongo_db():
    mock_db = MagicMock()
    collections = {
        "goals": MagicMock(),
        "contributions": MagicMock(),
        "counters": MagicMock(),
    }
    for collection in collections.values():
        collection.find_one = AsyncMock()
        collection.insert_one = AsyncMock()
        collection.find_one_and_update = AsyncMock()
    mock_db.__getitem__.side_effect = lambda key: collections[key]
    return mock_db, collections


@pytest.mark.asyncio
class TestMongoGoalStore:
    """Tests for MongoGoalStore."""

    async def test_create_goal_uses_counter(self):
        """Test goal ids come from the atomic counters collection."""
        from app.services.store import MongoGoalStore

        mock_db, collections = mongo_db()
        collections["counters"].find_one_and_update.return_value = {"_id": "goals", "value": 5}

        store = MongoGoalStore(mock_db)
        goal = await store.create_goal(goal_create("Laptop", "1500.5", "USD"))

        assert goal.id == 5
        assert goal.name == "Laptop"
        assert goal.target_amount == Decimal("1500.50")
        assert goal.currency.value == "USD"

        call = collections["counters"].find_one_and_update.call_args
        assert call[0][0] == {"_id": "goals"}
        assert call[0][1] == {"$inc": {"value": 1}}
        assert call[1]["upsert"] is True

        inserted = collections["goals"].insert_one.call_args[0][0]
        assert inserted["_id"] == 5
        assert inserted["target_amount"] == Decimal128("1500.50")

    async def test_get_goal_found(self):
        from app.services.store import MongoGoalStore

        mock_db, collections = mongo_db()
        collections["goals"].find_one.return_value = {
            "_id": 3,
            "name": "Wedding",
            "target_amount": Decimal128("500000.00"),
            "currency": "INR",
            "created_at": datetime.now(timezone.utc),
        }

        store = MongoGoalStore(mock_db)
        goal = await store.get_goal(3)

        assert goal.id == 3
        assert goal.target_amount == Decimal("500000.00")
        collections["goals"].find_one.assert_called_once_with({"_id": 3})

    async def test_get_goal_not_found(self):
        from app.services.store import MongoGoalStore

        mock_db, collections = mongo_db()
        collections["goals"].find_one.return_value = None

        store = MongoGoalStore(mock_db)

        assert await store.get_goal(3) is None

    async def test_list_goals_sorted(self):
        from app.services.store import MongoGoalStore

        mock_db, collections = mongo_db()
        mock_cursor = MagicMock()
        mock_cursor.to_list = AsyncMock(return_value=[
            {
                "_id": 1,
                "name": "Goal 1",
                "target_amount": Decimal128("100.00"),
                "currency": "USD",
                "created_at": datetime.now(timezone.utc),
            },
        ])
        collections["goals"].find.return_value.sort.return_value = mock_cursor

        store = MongoGoalStore(mock_db)
        goals = await store.list_goals()

        assert len(goals) == 1
        assert goals[0].name == "Goal 1"
        collections["goals"].find.return_value.sort.assert_called_once_with("_id", 1)

    async def test_create_contribution_stores_date_as_datetime(self):
        from app.services.store import MongoGoalStore

        mock_db, collections = mongo_db()
        collections["goals"].find_one.return_value = {"_id": 1}
        collections["counters"].find_one_and_update.return_value = {
            "_id": "contributions",
            "value": 9,
        }

        store = MongoGoalStore(mock_db)
        contribution = await store.create_contribution(contribution_create(1, "75"))

        assert contribution.id == 9
        assert contribution.contribution_date == date(2024, 3, 1)
        inserted = collections["contributions"].insert_one.call_args[0][0]
        assert inserted["date"] == datetime(2024, 3, 1)
        assert inserted["amount"] == Decimal128("75.00")

    async def test_create_contribution_unknown_goal(self):
        """Test nothing is written when the goal is missing."""
        from app.services.store import GoalNotFoundError, MongoGoalStore

        mock_db, collections = mongo_db()
        collections["goals"].find_one.return_value = None

        store = MongoGoalStore(mock_db)

        with pytest.raises(GoalNotFoundError):
            await store.create_contribution(contribution_create(1))

        collections["counters"].find_one_and_update.assert_not_called()
        collections["contributions"].insert_one.assert_not_called()

    async def test_list_contributions_converts_docs(self):
        from app.services.store import MongoGoalStore

        mock_db, collections = mongo_db()
        mock_cursor = MagicMock()
        mock_cursor.to_list = AsyncMock(return_value=[
            {
                "_id": 1,
                "goal_id": 2,
                "amount": Decimal128("40.00"),
                "date": datetime(2024, 5, 17),
                "created_at": datetime.now(timezone.utc),
            },
        ])
        collections["contributions"].find.return_value.sort.return_value = mock_cursor

        store = MongoGoalStore(mock_db)
        contributions = await store.list_contributions(2)

        assert contributions[0].amount == Decimal("40.00")
        assert contributions[0].contribution_date == date(2024, 5, 17)
        collections["contributions"].find.assert_called_once_with({"goal_id": 2})
