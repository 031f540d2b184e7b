"""Storage wiring: in-memory by default, MongoDB via Motor when configured."""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import settings
from app.services.store import GoalStore, InMemoryGoalStore, MongoGoalStore

logger = logging.getLogger(__name__)


class Database:
    """Owns the active goal store and, for MongoDB, its connection."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None
    store: GoalStore | None = None

    async def connect(self) -> None:
        """Create the configured store."""
        if settings.storage_backend == "mongodb":
            if not settings.mongodb_url:
                raise RuntimeError("MONGODB_URL is required for the mongodb backend")
            self.client = AsyncIOMotorClient(settings.mongodb_url)
            self.db = self.client[settings.mongodb_db_name]
            self.store = MongoGoalStore(self.db)
            logger.info(f"Connected to MongoDB: {settings.mongodb_db_name}")
        else:
            self.store = InMemoryGoalStore()
            logger.info("Using in-memory goal store")

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")
        self.store = None


# Global database instance
database = Database()


async def get_store() -> GoalStore:
    """Dependency to get the active goal store."""
    if database.store is None:
        raise RuntimeError("Goal store not initialized")
    return database.store
