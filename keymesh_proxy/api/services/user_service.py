"""
User Service Layer.
Looks up verified identities and merges the stored OAuth profiles onto them.
"""

import asyncio
import hashlib
from typing import List

from keymesh_proxy.api.dto.oauth_dto import TwitterOAuthInfoDTO
from keymesh_proxy.api.dto.user_dto import UserInfoDTO
from keymesh_proxy.core.exceptions import ValidationError
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.domain.models.authorization import AuthorizationRecord, PlatformName
from keymesh_proxy.domain.repositories.authorization_repository import (
    AuthorizationRepositoryRegistry,
    authorization_registry,
)
from keymesh_proxy.domain.repositories.twitter_oauth_repository import (
    TwitterOAuthRepository,
    twitter_oauth_repository,
)

logger = get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100


class UserService:
    """Service class for user lookups."""

    def __init__(
        self,
        registry: AuthorizationRepositoryRegistry = authorization_registry,
        twitter_repository: TwitterOAuthRepository = twitter_oauth_repository,
    ):
        self.registry = registry
        self.twitter_repository = twitter_repository

    async def get_users_by_user_address(
        self, network_id: int, user_address: str
    ) -> List[UserInfoDTO]:
        """Get every verified identity of a wallet."""
        if not user_address:
            raise ValidationError("userAddress must be set")

        repository = await self.registry.get(network_id)
        records = await repository.get_by_user_address(user_address)
        return await self._to_user_infos(records)

    async def get_users_by_username(
        self, network_id: int, username: str
    ) -> List[UserInfoDTO]:
        """Get every wallet verified for an exact username."""
        if not username:
            raise ValidationError("username must be set")

        repository = await self.registry.get(network_id)
        records = await repository.scan_username(username)
        return await self._to_user_infos(records)

    async def search_users_by_username_prefix(
        self, network_id: int, username_prefix: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> List[UserInfoDTO]:
        """
        Search identities whose username starts with username_prefix.

        Args:
            network_id: Ethereum network partition
            username_prefix: Non-empty username prefix
            limit: Maximum number of results, between 1 and MAX_SEARCH_LIMIT
        """
        if not username_prefix:
            raise ValidationError("usernamePrefix must be set")
        if limit < 1 or limit > MAX_SEARCH_LIMIT:
            raise ValidationError(
                f"limit must be between 1 and {MAX_SEARCH_LIMIT}", {"limit": limit}
            )

        repository = await self.registry.get(network_id)
        records = await repository.scan_username_prefix(username_prefix, limit=limit)
        return await self._to_user_infos(records)

    async def _to_user_infos(self, records: List[AuthorizationRecord]) -> List[UserInfoDTO]:
        users = [UserInfoDTO.from_record(record) for record in records]
        await self._fill_oauth_info(users)
        return users

    async def _fill_oauth_info(self, users: List[UserInfoDTO]) -> None:
        """
        Run one filler per platform concurrently and wait for all of them.

        Raises:
            The first error raised by a filler
        """
        fillers = [self._fill_twitter_oauth_info]
        results = await asyncio.gather(
            *(filler(users) for filler in fillers), return_exceptions=True
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"Failed to fill OAuth info: {result}")
                raise result

    async def _fill_twitter_oauth_info(self, users: List[UserInfoDTO]) -> None:
        twitter_users = [u for u in users if u.platform_name == PlatformName.TWITTER]
        usernames = list(dict.fromkeys(u.username for u in twitter_users))
        if not usernames:
            return

        profiles = await self.twitter_repository.batch_get_profiles(usernames)

        for user in twitter_users:
            profile = profiles.get(user.username)
            if profile is None:
                logger.debug("No Twitter profile stored", username=user.username)
                continue
            user.twitter_oauth_info = TwitterOAuthInfoDTO.from_profile(profile)
            user.gravatar_hash = hashlib.md5(
                (profile.email or "").encode("utf-8")
            ).hexdigest()


# Global service instance
user_service = UserService()
