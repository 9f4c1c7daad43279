"""
Account Service Layer.
Stores contact info submitted for a wallet.
"""

from keymesh_proxy.api.dto.account_dto import AccountInfoRequestDTO
from keymesh_proxy.core.exceptions import InvalidSignatureError, ValidationError
from keymesh_proxy.core.logging import get_logger, log_account_operation
from keymesh_proxy.core.security import WalletSignatureManager, wallet_signature_manager
from keymesh_proxy.domain.models.account_info import AccountInfoModel
from keymesh_proxy.domain.repositories.account_info_repository import (
    AccountInfoRepository,
    account_info_repository,
)

logger = get_logger(__name__)

UNKNOWN_ADDRESS = "-"


class AccountService:
    """Service class for account info."""

    def __init__(
        self,
        repository: AccountInfoRepository = account_info_repository,
        signature_manager: WalletSignatureManager = wallet_signature_manager,
    ):
        self.repository = repository
        self.signature_manager = signature_manager

    async def put_account_info(self, request: AccountInfoRequestDTO) -> AccountInfoModel:
        """
        Store account info.

        A signature, when present, is checked and the outcome recorded in
        valid_sig; an invalid signature does not block the write.

        Raises:
            ValidationError: If email is empty
            DatabaseError: If the write fails
        """
        if not request.email:
            raise ValidationError("email could not be empty")

        valid_sig = False
        if request.sig:
            valid_sig = self._check_signature(request)

        info = AccountInfoModel(
            user_address=request.user_address or UNKNOWN_ADDRESS,
            email=request.email,
            name=request.name,
            msg=request.msg,
            sig=request.sig,
            valid_sig=valid_sig,
        )
        await self.repository.put_account_info(info)

        log_account_operation(
            operation="put",
            wallet_address=info.user_address,
            email=info.email,
            valid_sig=info.valid_sig,
        )
        return info

    def _check_signature(self, request: AccountInfoRequestDTO) -> bool:
        if not request.user_address:
            logger.warning("Signature submitted without userAddress", email=request.email)
            return False

        try:
            return self.signature_manager.verify_wallet_signature(
                request.msg or "", request.sig, request.user_address
            )
        except InvalidSignatureError as e:
            logger.warning(
                "Invalid account info signature",
                user_address=request.user_address,
                error=e.message,
            )
            return False


# Global service instance
account_service = AccountService()
