"""
DTOs (Data Transfer Objects) for user lookup endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from keymesh_proxy.api.dto.oauth_dto import TwitterOAuthInfoDTO
from keymesh_proxy.domain.models.authorization import AuthorizationRecord, PlatformName


class UserInfoDTO(BaseModel):
    """A verified social identity of a wallet, with its public profile."""

    model_config = ConfigDict(populate_by_name=True)

    user_address: str = Field(..., alias="userAddress", description="Wallet address")
    username: str = Field(..., description="Username on the platform")
    platform_name: PlatformName = Field(..., alias="platformName", description="Social platform")
    proof_url: str = Field("", alias="proofURL", description="Proof post URL")
    twitter_oauth_info: Optional[TwitterOAuthInfoDTO] = Field(
        None, alias="twitterOAuthInfo", description="Public Twitter profile"
    )
    gravatar_hash: Optional[str] = Field(
        None, alias="gravatarHash", description="md5 of the profile email"
    )

    @classmethod
    def from_record(cls, record: AuthorizationRecord) -> "UserInfoDTO":
        return cls(
            user_address=record.user_address,
            username=record.username,
            platform_name=record.platform_name,
            proof_url=record.proof_url,
        )
