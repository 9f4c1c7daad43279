"""
Twitter OAuth Service Layer.
Issues login URLs and stores the profile returned by the OAuth callback.
"""

from typing import Any, Dict, Optional

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import CacheError, OAuthError
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.domain.models.twitter_oauth import TwitterOAuthProfile
from keymesh_proxy.domain.repositories.twitter_oauth_repository import (
    TwitterOAuthRepository,
    twitter_oauth_repository,
)
from keymesh_proxy.infrastructure.cache.cache_service import CacheService, cache_service
from keymesh_proxy.infrastructure.twitter.oauth_client import (
    TwitterOAuthClient,
    twitter_oauth_client,
)

logger = get_logger(__name__)


def request_token_cache_key(oauth_token: str) -> str:
    return f"twitter_oauth_request_token:{oauth_token}"


class TwitterOAuthService:
    """Service class for the Twitter OAuth1 flow."""

    def __init__(
        self,
        oauth_client: TwitterOAuthClient = twitter_oauth_client,
        repository: TwitterOAuthRepository = twitter_oauth_repository,
        cache: CacheService = cache_service,
    ):
        self.oauth_client = oauth_client
        self.repository = repository
        self.cache = cache

    async def get_authorize_url(self) -> str:
        """
        Generate a Twitter login URL.

        The request-token secret is kept for OAUTH_REQUEST_TOKEN_TTL seconds
        so the callback can sign the access token request with it.

        Raises:
            OAuthError: If Twitter does not issue a request token
        """
        authorization_url, oauth_token, oauth_token_secret = (
            await self.oauth_client.fetch_authorization()
        )

        try:
            stored = await self.cache.set(
                request_token_cache_key(oauth_token),
                oauth_token_secret,
                expire=settings.OAUTH_REQUEST_TOKEN_TTL,
            )
        except CacheError as e:
            logger.warning(f"Could not store Twitter request token secret: {e.message}")
        else:
            if not stored:
                logger.warning("Twitter request token secret was not stored")

        logger.info("Generated Twitter OAuth URL")
        return authorization_url

    async def handle_callback(
        self, oauth_token: Optional[str], oauth_verifier: Optional[str]
    ) -> Dict[str, Any]:
        """
        Exchange the OAuth callback for the user's profile and store it.

        Args:
            oauth_token: Request token echoed by Twitter
            oauth_verifier: Verifier echoed by Twitter

        Returns:
            The Twitter user object

        Raises:
            OAuthError: If the callback is incomplete or the exchange fails
            DatabaseError: If storing the profile fails
        """
        if not oauth_token or not oauth_verifier:
            raise OAuthError("oauth1: Request missing oauth_token or oauth_verifier")

        oauth_token_secret = None
        try:
            oauth_token_secret = await self.cache.pop(request_token_cache_key(oauth_token))
        except CacheError as e:
            logger.warning(f"Could not read Twitter request token secret: {e.message}")

        user = await self.oauth_client.fetch_user(
            oauth_token, oauth_verifier, oauth_token_secret
        )

        profile = TwitterOAuthProfile(**user)
        await self.repository.put_profile(profile)

        logger.info("Stored Twitter profile", screen_name=profile.screen_name)
        return user


# Global service instance
twitter_oauth_service = TwitterOAuthService()
