"""
DTOs (Data Transfer Objects) for account info endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AccountInfoRequestDTO(BaseModel):
    """Request DTO for account info submission."""

    model_config = ConfigDict(populate_by_name=True)

    user_address: str = Field("", alias="userAddress", description="Wallet address")
    name: Optional[str] = Field(None, description="Display name")
    email: str = Field("", description="Contact email")
    msg: Optional[str] = Field(None, description="Message signed by the wallet")
    sig: Optional[str] = Field(None, description="EIP-191 signature of msg")


class AccountInfoResponseDTO(BaseModel):
    """Response DTO for account info submission."""

    model_config = ConfigDict(populate_by_name=True)

    user_address: str = Field(..., alias="userAddress")
    name: Optional[str] = None
    email: str
    valid_sig: bool = Field(..., alias="validSig")
    created_at: datetime = Field(..., alias="createdAt")
