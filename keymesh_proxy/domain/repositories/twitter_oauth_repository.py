"""
MongoDB repository for Twitter OAuth profiles.
"""

from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import DatabaseError
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.domain.models.twitter_oauth import TwitterOAuthProfile
from keymesh_proxy.domain.repositories.mongo import MongoConnection, mongo_connection

logger = get_logger(__name__)


class TwitterOAuthRepository:
    """Repository for Twitter profiles keyed by screen_name."""

    def __init__(self, connection: MongoConnection = mongo_connection):
        """Initialize the repository."""
        self._connection = connection
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def initialize(self):
        """Bind the collection and create its indexes."""
        if self.collection is not None:
            return

        database = self._connection.get_database()
        self.collection = database[settings.TWITTER_OAUTH_COLLECTION]

        try:
            await self.collection.create_index(
                [("screen_name", ASCENDING)], unique=True, name="screen_name_unique"
            )
        except PyMongoError as e:
            logger.error(f"Failed to create twitter oauth indexes: {e}")

    async def put_profile(self, profile: TwitterOAuthProfile) -> TwitterOAuthProfile:
        """
        Create or overwrite the profile stored for profile.screen_name.

        Raises:
            DatabaseError: If the write fails
        """
        await self.initialize()

        try:
            await self.collection.replace_one(
                {"screen_name": profile.screen_name},
                profile.to_document(),
                upsert=True,
            )
        except PyMongoError as e:
            logger.error(f"Failed to put twitter profile: {e}")
            raise DatabaseError(f"Failed to put twitter profile: {e}")

        return profile

    async def get_profile(self, screen_name: str) -> Optional[TwitterOAuthProfile]:
        """Get a profile by screen name, None when absent."""
        await self.initialize()

        try:
            doc = await self.collection.find_one({"screen_name": screen_name}, {"_id": 0})
        except PyMongoError as e:
            logger.error(f"Failed to get twitter profile: {e}")
            raise DatabaseError(f"Failed to get twitter profile: {e}")

        if doc:
            return TwitterOAuthProfile(**doc)

        return None

    async def batch_get_profiles(
        self, screen_names: List[str]
    ) -> Dict[str, TwitterOAuthProfile]:
        """
        Get many profiles in one round trip.

        Returns:
            Mapping of screen_name to profile; missing names are absent
        """
        if not screen_names:
            return {}

        await self.initialize()

        try:
            cursor = self.collection.find(
                {"screen_name": {"$in": list(screen_names)}}, {"_id": 0}
            )
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to batch get twitter profiles: {e}")
            raise DatabaseError(f"Failed to batch get twitter profiles: {e}")

        profiles = {}
        for doc in docs:
            profile = TwitterOAuthProfile(**doc)
            profiles[profile.screen_name] = profile

        return profiles


# Global repository instance
twitter_oauth_repository = TwitterOAuthRepository()
