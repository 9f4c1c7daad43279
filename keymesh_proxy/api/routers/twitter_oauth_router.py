"""
Twitter OAuth Router.
Handles login URL, OAuth callback and social proof verification endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from keymesh_proxy.api.deps.providers import (
    get_network_id,
    get_twitter_oauth_service,
    get_verification_service,
)
from keymesh_proxy.api.services.twitter_oauth_service import TwitterOAuthService
from keymesh_proxy.api.services.verification_service import VerificationService
from keymesh_proxy.core.exceptions import OAuthError, create_http_exception
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.domain.models.authorization import SocialProofClaim

logger = get_logger(__name__)

# Create router
router = APIRouter()


@router.get("/authorize_url", response_class=PlainTextResponse)
async def get_twitter_authorize_url(
    service: TwitterOAuthService = Depends(get_twitter_oauth_service),
) -> PlainTextResponse:
    """
    Get the Twitter login URL.

    Returns:
        The authorization URL as plain text
    """
    try:
        authorize_url = await service.get_authorize_url()
    except OAuthError as e:
        logger.error(f"Error generating Twitter authorize URL: {e.message}")
        raise create_http_exception(e, status_code=500)

    return PlainTextResponse(authorize_url)


@router.get("/callback")
async def twitter_oauth_callback(
    oauth_token: Optional[str] = Query(None, description="Request token"),
    oauth_verifier: Optional[str] = Query(None, description="OAuth verifier"),
    service: TwitterOAuthService = Depends(get_twitter_oauth_service),
) -> JSONResponse:
    """
    Handle the Twitter OAuth callback.

    Returns:
        The Twitter user object; 401 when the handshake fails
    """
    logger.info("Twitter OAuth callback received", oauth_token=oauth_token)

    user = await service.handle_callback(oauth_token, oauth_verifier)
    return JSONResponse(user)


@router.api_route("/verify", methods=["GET", "PUT"], response_class=PlainTextResponse)
async def verify_twitter(
    user_address: str = Query("", alias="userAddress", description="Wallet address"),
    username: str = Query("", description="Twitter username (private networks)"),
    proof_url: str = Query("", alias="proofURL", description="Proof URL (private networks)"),
    network_id: int = Depends(get_network_id),
    service: VerificationService = Depends(get_verification_service),
) -> PlainTextResponse:
    """
    Verify a wallet's Twitter proof.

    username and proofURL are only honoured on private networks.

    Returns:
        ``verified`` on success
    """
    claim = None
    if username or proof_url:
        claim = SocialProofClaim(
            user_address=user_address, username=username, proof_url=proof_url
        )

    await service.verify_twitter(user_address, network_id, claim)
    return PlainTextResponse("verified")
