"""
User Router.
Handles lookups of verified identities by wallet address or username.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from keymesh_proxy.api.deps.providers import get_network_id, get_user_service
from keymesh_proxy.api.dto.user_dto import UserInfoDTO
from keymesh_proxy.api.services.user_service import DEFAULT_SEARCH_LIMIT, UserService
from keymesh_proxy.core.exceptions import ValidationError
from keymesh_proxy.core.logging import get_logger

logger = get_logger(__name__)

# Create router
router = APIRouter()


@router.get("/users", response_model=List[UserInfoDTO])
async def get_users(
    username: Optional[str] = Query(None, description="Exact username"),
    user_address: Optional[str] = Query(None, alias="userAddress", description="Wallet address"),
    network_id: int = Depends(get_network_id),
    service: UserService = Depends(get_user_service),
) -> List[UserInfoDTO]:
    """
    Get verified identities by exact username or by wallet address.
    username takes precedence when both are given.
    """
    if username:
        return await service.get_users_by_username(network_id, username)

    if user_address:
        return await service.get_users_by_user_address(network_id, user_address)

    raise ValidationError("username or userAddress must be set")


@router.get("/users/search", response_model=List[UserInfoDTO])
async def search_users(
    username_prefix: Optional[str] = Query(None, alias="usernamePrefix", description="Username prefix"),
    limit: Optional[str] = Query(None, description=f"Maximum results, default {DEFAULT_SEARCH_LIMIT}"),
    network_id: int = Depends(get_network_id),
    service: UserService = Depends(get_user_service),
) -> List[UserInfoDTO]:
    """Search verified identities by username prefix."""
    max_results = DEFAULT_SEARCH_LIMIT
    if limit:
        try:
            max_results = int(limit)
        except ValueError:
            raise ValidationError("limit must be an integer", {"limit": limit})

    return await service.search_users_by_username_prefix(
        network_id, username_prefix or "", max_results
    )
