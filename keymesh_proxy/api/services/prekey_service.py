"""
Prekey Service Layer.
Authenticates signed prekey bundles and stores them in the blob store.
"""

import pydantic

from keymesh_proxy.api.dto.prekey_dto import PutPrekeysRequestDTO
from keymesh_proxy.core.exceptions import ValidationError
from keymesh_proxy.core.logging import get_logger, log_prekey_operation
from keymesh_proxy.core.security import verify_ed25519_signature
from keymesh_proxy.infrastructure.aws.blob_store import S3BlobStore, blob_store

logger = get_logger(__name__)


def prekeys_object_key(network_id: int, public_key_hex: str) -> str:
    """Blob key of a prekey bundle, e.g. ``1/ab12...``."""
    return f"{network_id}/{public_key_hex}"


class PrekeyService:
    """Service class for prekey uploads."""

    def __init__(self, store: S3BlobStore = blob_store):
        self.store = store

    async def put_prekeys(
        self, public_key_hex: str, network_id: int, raw_body: bytes
    ) -> str:
        """
        Verify and store a prekey bundle.

        The raw request body is stored unchanged so clients can re-check the
        signature when they download it.

        Args:
            public_key_hex: Hex encoded Ed25519 public key of the uploader
            network_id: Ethereum network partition
            raw_body: JSON body ``{"signature": ..., "prekeys": ...}``

        Returns:
            The object key the bundle was stored under

        Raises:
            ValidationError: If the key is missing or the body is malformed
            InvalidKeyEncodingError: If the public key is not valid hex
            InvalidSignatureError: If the signature does not verify
            BlobStoreError: If the blob store rejects the write
        """
        if not public_key_hex:
            raise ValidationError("publicKey must be set")

        try:
            request = PutPrekeysRequestDTO.model_validate_json(raw_body)
        except pydantic.ValidationError as e:
            errors = e.errors(include_url=False, include_context=False, include_input=False)
            raise ValidationError("Invalid prekeys body", {"errors": errors})

        verify_ed25519_signature(
            public_key_hex, request.prekeys.encode("utf-8"), request.signature
        )

        object_key = prekeys_object_key(network_id, public_key_hex)
        await self.store.put_object(object_key, raw_body)

        log_prekey_operation(
            operation="put",
            public_key=public_key_hex,
            network_id=network_id,
            object_key=object_key,
            size=len(raw_body),
        )

        return object_key


# Global service instance
prekey_service = PrekeyService()
