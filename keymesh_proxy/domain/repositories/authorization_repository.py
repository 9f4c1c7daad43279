"""
MongoDB repository for verified social authorizations.
Each Ethereum network gets its own collection.
"""

import asyncio
import re
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import DatabaseError
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.domain.models.authorization import AuthorizationRecord
from keymesh_proxy.domain.repositories.mongo import MongoConnection, mongo_connection

logger = get_logger(__name__)


def authorization_collection_name(network_id: int) -> str:
    """Collection name of a network partition, e.g. ``authorizations_1``."""
    return f"{settings.AUTHORIZATION_COLLECTION_PREFIX}_{network_id}"


class AuthorizationRepository:
    """Repository for authorization records of one network."""

    def __init__(self, network_id: int, connection: MongoConnection = mongo_connection):
        """Initialize the repository."""
        self.network_id = network_id
        self._connection = connection
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def initialize(self):
        """Bind the network collection and create its indexes."""
        if self.collection is not None:
            return

        database = self._connection.get_database()
        self.collection = database[authorization_collection_name(self.network_id)]

        try:
            # (user_address, platform_name) is the record key
            await self.collection.create_index(
                [("user_address", ASCENDING), ("platform_name", ASCENDING)],
                unique=True,
                name="user_platform_unique",
            )
            await self.collection.create_index(
                [("username", ASCENDING)], name="username_index"
            )
            logger.info(
                f"AuthorizationRepository initialized for network {self.network_id}"
            )
        except PyMongoError as e:
            logger.error(f"Failed to create authorization indexes: {e}")
            # The app can still work without indexes

    async def put_authorization(self, record: AuthorizationRecord) -> AuthorizationRecord:
        """
        Create or overwrite the record for (user_address, platform_name).

        Raises:
            DatabaseError: If the write is not acknowledged
        """
        await self.initialize()

        document = record.model_dump(mode="python")
        document["platform_name"] = record.platform_name.value

        try:
            await self.collection.replace_one(
                {
                    "user_address": record.user_address,
                    "platform_name": record.platform_name.value,
                },
                document,
                upsert=True,
            )
        except PyMongoError as e:
            logger.error(f"Failed to put authorization: {e}")
            raise DatabaseError(f"Failed to put authorization: {e}")

        return record

    async def get_by_user_address(self, user_address: str) -> List[AuthorizationRecord]:
        """Get every platform record linked to a wallet address."""
        return await self._find({"user_address": user_address})

    async def scan_username(self, username: str) -> List[AuthorizationRecord]:
        """Get records whose username matches exactly."""
        return await self._find({"username": username})

    async def scan_username_prefix(
        self, username_prefix: str, limit: Optional[int] = None
    ) -> List[AuthorizationRecord]:
        """
        Get records whose username starts with username_prefix.

        Args:
            username_prefix: Literal prefix, regex characters are escaped
            limit: Maximum number of records, applied after filtering
        """
        query = {"username": {"$regex": f"^{re.escape(username_prefix)}"}}
        return await self._find(query, limit=limit)

    async def _find(self, query: dict, limit: Optional[int] = None) -> List[AuthorizationRecord]:
        await self.initialize()

        try:
            cursor = self.collection.find(query, {"_id": 0})
            if limit:
                cursor = cursor.limit(limit)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to query authorizations: {e}")
            raise DatabaseError(f"Failed to query authorizations: {e}")

        return [AuthorizationRecord(**doc) for doc in docs]


class AuthorizationRepositoryRegistry:
    """
    Per-network repositories, created on first use and kept for the process
    lifetime.
    """

    def __init__(self, connection: MongoConnection = mongo_connection):
        self._connection = connection
        self._repositories: Dict[int, AuthorizationRepository] = {}
        self._lock = asyncio.Lock()

    async def get(self, network_id: int) -> AuthorizationRepository:
        """Return the repository for network_id, creating it once."""
        repository = self._repositories.get(network_id)
        if repository is not None:
            return repository

        async with self._lock:
            repository = self._repositories.get(network_id)
            if repository is None:
                repository = AuthorizationRepository(network_id, self._connection)
                await repository.initialize()
                self._repositories[network_id] = repository

        return repository


# Global registry instance
authorization_registry = AuthorizationRepositoryRegistry()
