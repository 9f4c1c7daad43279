"""
MongoDB models for verified social authorizations.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class PlatformName(str, Enum):
    """Supported social platforms."""

    TWITTER = "twitter"
    FACEBOOK = "facebook"
    GITHUB = "github"


class AuthorizationRecord(BaseModel):
    """Proof that a wallet address was verified against a social identity."""

    user_address: str = Field(..., description="Owner wallet address")
    platform_name: PlatformName = Field(..., description="Social platform")
    username: str = Field(..., description="Username on the platform")
    proof_url: str = Field("", description="URL of the public proof post")
    verified: bool = Field(default=False, description="Verification flag")
    verified_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Verification timestamp",
    )


class SocialProofClaim(BaseModel):
    """A (username, proof URL) pair asserting ownership of a social account."""

    user_address: str = Field(..., description="Owner wallet address")
    username: str = Field(..., description="Claimed username")
    proof_url: str = Field(..., description="URL of the proof post")
