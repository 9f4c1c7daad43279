"""
MongoDB model for account contact info.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class AccountInfoModel(BaseModel):
    """Contact info submitted for a wallet address."""

    user_address: str = Field(..., description="Wallet address, '-' when unknown")
    email: str = Field(..., description="Contact email")
    name: Optional[str] = Field(None, description="Display name")
    msg: Optional[str] = Field(None, description="Message signed by the wallet")
    sig: Optional[str] = Field(None, description="EIP-191 signature of msg")
    valid_sig: bool = Field(default=False, description="Whether sig recovers to user_address")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp",
    )
