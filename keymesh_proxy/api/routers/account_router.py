"""
Account Router.
Accepts account contact info.
"""

from fastapi import APIRouter, Depends, status

from keymesh_proxy.api.deps.providers import get_account_service
from keymesh_proxy.api.dto.account_dto import AccountInfoRequestDTO, AccountInfoResponseDTO
from keymesh_proxy.api.services.account_service import AccountService

# Create router
router = APIRouter()


@router.put(
    "/account-info",
    status_code=status.HTTP_201_CREATED,
    response_model=AccountInfoResponseDTO,
)
async def put_account_info(
    request: AccountInfoRequestDTO,
    service: AccountService = Depends(get_account_service),
) -> AccountInfoResponseDTO:
    """
    Store account info. A signature that fails to verify is recorded in
    validSig and does not reject the request.
    """
    info = await service.put_account_info(request)
    return AccountInfoResponseDTO(
        user_address=info.user_address,
        name=info.name,
        email=info.email,
        valid_sig=info.valid_sig,
        created_at=info.created_at,
    )
