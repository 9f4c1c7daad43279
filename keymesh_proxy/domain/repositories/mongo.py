"""
Shared MongoDB connection for the repositories.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from keymesh_proxy.core.config import get_mongodb_database_name, get_mongodb_url
from keymesh_proxy.core.exceptions import DatabaseError
from keymesh_proxy.core.logging import get_logger

logger = get_logger(__name__)


class MongoConnection:
    """Lazily created Motor client shared by every repository."""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    def get_database(self) -> AsyncIOMotorDatabase:
        """Return the configured database, connecting on first use."""
        if self.database is None:
            database_name = get_mongodb_database_name()
            self.client = AsyncIOMotorClient(get_mongodb_url())
            self.database = self.client[database_name]
            logger.info(f"MongoDB client created for database: {database_name}")
        return self.database

    async def ping(self) -> None:
        """
        Check that MongoDB is reachable.

        Raises:
            DatabaseError: If the server does not answer
        """
        database = self.get_database()
        try:
            await database.command("ping")
        except PyMongoError as e:
            logger.error(f"Failed to reach MongoDB: {e}")
            raise DatabaseError(f"Cannot connect to MongoDB: {e}")

    def close(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None
            self.database = None
            logger.info("MongoDB connection closed")


# Global connection instance
mongo_connection = MongoConnection()
