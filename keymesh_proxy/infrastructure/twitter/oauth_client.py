"""
Twitter OAuth1 client.
Wraps the three-legged flow: request token, authorization URL, access token
and account/verify_credentials.
"""

from typing import Any, Dict, Optional, Tuple

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth1Client

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import OAuthError
from keymesh_proxy.core.logging import get_logger

logger = get_logger(__name__)

OAUTH_CLIENT_ERRORS = (AuthlibBaseError, httpx.HTTPError, ValueError, KeyError)


class TwitterOAuthClient:
    """Twitter OAuth1 handshake."""

    def __init__(self):
        self.request_token_url = settings.TWITTER_REQUEST_TOKEN_URL
        self.authorize_url = settings.TWITTER_AUTHORIZE_URL
        self.access_token_url = settings.TWITTER_ACCESS_TOKEN_URL
        self.verify_credentials_url = settings.TWITTER_VERIFY_CREDENTIALS_URL

    def _credentials(self) -> Tuple[str, str]:
        if not settings.TWITTER_CONSUMER_KEY or not settings.TWITTER_CONSUMER_SECRET:
            raise OAuthError("Twitter consumer key not configured")
        return settings.TWITTER_CONSUMER_KEY, settings.TWITTER_CONSUMER_SECRET

    async def fetch_authorization(self) -> Tuple[str, str, str]:
        """
        Obtain a request token and build the login URL for it.

        Returns:
            Tuple of (authorization_url, oauth_token, oauth_token_secret)

        Raises:
            OAuthError: If Twitter rejects the request token call
        """
        consumer_key, consumer_secret = self._credentials()

        try:
            async with AsyncOAuth1Client(
                consumer_key,
                consumer_secret,
                redirect_uri=settings.TWITTER_CALLBACK_URL,
                timeout=30.0,
            ) as client:
                request_token = await client.fetch_request_token(self.request_token_url)
                oauth_token = request_token["oauth_token"]
                authorization_url = client.create_authorization_url(
                    self.authorize_url, request_token=oauth_token
                )
        except OAUTH_CLIENT_ERRORS as e:
            logger.error(f"Error fetching Twitter request token: {e}")
            raise OAuthError(f"Failed to get request token: {e}")

        return authorization_url, oauth_token, request_token.get("oauth_token_secret", "")

    async def fetch_user(
        self,
        oauth_token: str,
        oauth_verifier: str,
        oauth_token_secret: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Exchange the callback parameters for the authenticated user's profile.

        Args:
            oauth_token: Request token echoed by the callback
            oauth_verifier: Verifier echoed by the callback
            oauth_token_secret: Secret of the request token, when known

        Returns:
            Twitter user object, email included

        Raises:
            OAuthError: If any step of the exchange fails
        """
        consumer_key, consumer_secret = self._credentials()

        try:
            async with AsyncOAuth1Client(
                consumer_key,
                consumer_secret,
                token=oauth_token,
                token_secret=oauth_token_secret,
                timeout=30.0,
            ) as client:
                access_token = await client.fetch_access_token(
                    self.access_token_url, verifier=oauth_verifier
                )

            async with AsyncOAuth1Client(
                consumer_key,
                consumer_secret,
                token=access_token["oauth_token"],
                token_secret=access_token["oauth_token_secret"],
                timeout=30.0,
            ) as client:
                response = await client.get(
                    self.verify_credentials_url,
                    params={
                        "include_entities": "false",
                        "skip_status": "true",
                        "include_email": "true",
                    },
                )
                user = response.json() if response.status_code == 200 else None
        except OAUTH_CLIENT_ERRORS as e:
            logger.error(f"Error exchanging Twitter callback: {e}")
            raise OAuthError(f"Failed to exchange callback: {e}")

        if not user or not user.get("id") or not user.get("id_str"):
            logger.error(
                "Unexpected Twitter verify_credentials response",
                status_code=response.status_code,
            )
            raise OAuthError("twitter: unable to get Twitter User")

        return user


# Global OAuth client instance
twitter_oauth_client = TwitterOAuthClient()
