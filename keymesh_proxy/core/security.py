"""
Signature verification utilities for the Keymesh OAuth proxy.
Handles Ethereum personal-sign recovery for account info and Ed25519 for prekeys.
"""

import base64
import binascii
import re

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from eth_account import Account
from eth_account.messages import encode_defunct

from keymesh_proxy.core.exceptions import (
    InvalidKeyEncodingError,
    InvalidSignatureError,
)
from keymesh_proxy.core.logging import get_logger

logger = get_logger(__name__)

ED25519_PUBLIC_KEY_HEX = re.compile(r"[0-9a-fA-F]{64}")


class WalletSignatureManager:
    """Verifies EIP-191 wallet signatures."""

    def verify_wallet_signature(
        self,
        message: str,
        signature: str,
        wallet_address: str,
    ) -> bool:
        """
        Verify a wallet signature against a message.

        Args:
            message: Original message that was signed
            signature: Hex signature from wallet
            wallet_address: Wallet address that should have signed

        Returns:
            bool: True if signature is valid, False otherwise

        Raises:
            InvalidSignatureError: If the signature is malformed
        """
        if not self._validate_signature_format(signature):
            raise InvalidSignatureError("Invalid signature format")

        try:
            message_hash = encode_defunct(text=message)
            recovered_address = Account.recover_message(message_hash, signature=signature)
        except Exception as e:
            logger.error("Error recovering wallet signature", error=str(e))
            raise InvalidSignatureError(f"Signature recovery failed: {str(e)}")

        is_valid = recovered_address.lower() == wallet_address.lower()

        if is_valid:
            logger.info("Wallet signature verified", wallet_address=wallet_address)
        else:
            logger.warning(
                "Wallet signature verification failed",
                expected=wallet_address,
                recovered=recovered_address,
            )

        return is_valid

    def _validate_signature_format(self, signature: str) -> bool:
        """Validate signature format."""
        if not signature or not signature.startswith("0x"):
            return False
        if len(signature) != 132:  # 0x + 130 hex chars
            return False
        return True


def decode_ed25519_public_key(public_key_hex: str) -> Ed25519PublicKey:
    """
    Decode a hex encoded raw Ed25519 public key.

    Raises:
        InvalidKeyEncodingError: If the key is not hex or not 32 bytes long
    """
    if not ED25519_PUBLIC_KEY_HEX.fullmatch(public_key_hex):
        raise InvalidKeyEncodingError(public_key_hex)

    try:
        return Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key_hex))
    except ValueError:
        raise InvalidKeyEncodingError(public_key_hex)


def verify_ed25519_signature(
    public_key_hex: str, payload: bytes, signature_b64: str
) -> None:
    """
    Verify a base64 encoded Ed25519 signature over payload.

    Raises:
        InvalidKeyEncodingError: If the public key is malformed
        InvalidSignatureError: If the signature is malformed or does not verify
    """
    public_key = decode_ed25519_public_key(public_key_hex)

    try:
        signature = base64.b64decode(signature_b64, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidSignatureError("Signature is not valid base64")

    try:
        public_key.verify(signature, payload)
    except InvalidSignature:
        raise InvalidSignatureError()


wallet_signature_manager = WalletSignatureManager()
