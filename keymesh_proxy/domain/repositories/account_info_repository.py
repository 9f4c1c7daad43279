"""
MongoDB repository for account contact info.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import DatabaseError
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.domain.models.account_info import AccountInfoModel
from keymesh_proxy.domain.repositories.mongo import MongoConnection, mongo_connection

logger = get_logger(__name__)


class AccountInfoRepository:
    """Repository for account info keyed by (email, user_address)."""

    def __init__(self, connection: MongoConnection = mongo_connection):
        self._connection = connection
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def initialize(self):
        if self.collection is not None:
            return

        database = self._connection.get_database()
        self.collection = database[settings.ACCOUNT_COLLECTION]

        try:
            await self.collection.create_index(
                [("email", ASCENDING), ("user_address", ASCENDING)],
                unique=True,
                name="email_address_unique",
            )
        except PyMongoError as e:
            logger.error(f"Failed to create account info indexes: {e}")

    async def put_account_info(self, info: AccountInfoModel) -> AccountInfoModel:
        """
        Create or overwrite account info.

        Raises:
            DatabaseError: If the write fails
        """
        await self.initialize()

        try:
            await self.collection.replace_one(
                {"email": info.email, "user_address": info.user_address},
                info.model_dump(),
                upsert=True,
            )
        except PyMongoError as e:
            logger.error(f"Failed to put account info: {e}")
            raise DatabaseError(f"Failed to put account info: {e}")

        return info


# Global repository instance
account_info_repository = AccountInfoRepository()
