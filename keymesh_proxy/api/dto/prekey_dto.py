"""
DTOs (Data Transfer Objects) for prekey endpoints.
"""

from pydantic import BaseModel, Field


class PutPrekeysRequestDTO(BaseModel):
    """Signed prekey bundle uploaded by a client."""

    signature: str = Field(..., description="Base64 Ed25519 signature of prekeys")
    prekeys: str = Field(..., description="Serialized prekeys")
