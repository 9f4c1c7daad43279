"""
Models for Twitter OAuth profiles.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TwitterOAuthProfile(BaseModel):
    """
    Twitter user object returned by account/verify_credentials.

    Only the fields the proxy reads are declared; everything else Twitter
    sends is kept so the stored document mirrors the API response.
    """

    model_config = ConfigDict(extra="allow")

    id: int = Field(0, description="Twitter user ID")
    id_str: str = Field("", description="Twitter user ID as string")
    screen_name: str = Field(..., description="Twitter handle")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Account email")

    def to_document(self) -> Dict[str, Any]:
        """Serialize for storage, including undeclared Twitter fields."""
        return self.model_dump()
