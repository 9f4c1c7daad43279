"""
FastAPI dependencies: request parameters shared by several routes and the
service instances, so tests can swap them through dependency_overrides.
"""

from typing import Optional

from fastapi import Query

from keymesh_proxy.api.services.account_service import AccountService, account_service
from keymesh_proxy.api.services.prekey_service import PrekeyService, prekey_service
from keymesh_proxy.api.services.twitter_oauth_service import (
    TwitterOAuthService,
    twitter_oauth_service,
)
from keymesh_proxy.api.services.user_service import UserService, user_service
from keymesh_proxy.api.services.verification_service import (
    VerificationService,
    verification_service,
)
from keymesh_proxy.core.exceptions import ValidationError


def get_network_id(
    network_id: Optional[str] = Query(
        None, alias="networkID", description="Ethereum network ID"
    ),
) -> int:
    """
    Parse the networkID query parameter.

    Raises:
        ValidationError: If it is missing or not an integer
    """
    if not network_id:
        raise ValidationError("networkID must be set")
    try:
        return int(network_id)
    except ValueError:
        raise ValidationError(
            "networkID must be an integer", {"networkID": network_id}
        )


def get_twitter_oauth_service() -> TwitterOAuthService:
    return twitter_oauth_service


def get_verification_service() -> VerificationService:
    return verification_service


def get_user_service() -> UserService:
    return user_service


def get_prekey_service() -> PrekeyService:
    return prekey_service


def get_account_service() -> AccountService:
    return account_service
