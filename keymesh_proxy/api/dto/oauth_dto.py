"""
DTOs (Data Transfer Objects) for Twitter OAuth endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from keymesh_proxy.domain.models.twitter_oauth import TwitterOAuthProfile


class TwitterOAuthInfoDTO(BaseModel):
    """
    Public projection of a stored Twitter profile.

    Only the fields listed here leave the service; email, ids, creation date,
    entities, status, protected and contributors_enabled never do.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="Display name")
    screen_name: str = Field(..., description="Twitter handle")
    location: Optional[str] = Field(None, description="Profile location")
    description: Optional[str] = Field(None, description="Profile bio")
    url: Optional[str] = Field(None, description="Profile URL")
    followers_count: Optional[int] = Field(None, description="Followers")
    friends_count: Optional[int] = Field(None, description="Following")
    listed_count: Optional[int] = Field(None, description="Lists the user is on")
    favourites_count: Optional[int] = Field(None, description="Likes")
    statuses_count: Optional[int] = Field(None, description="Tweets")
    verified: Optional[bool] = Field(None, description="Verified account")
    lang: Optional[str] = Field(None, description="Language")
    profile_image_url: Optional[str] = Field(None, description="Avatar URL")
    profile_image_url_https: Optional[str] = Field(None, description="Avatar URL (https)")
    profile_banner_url: Optional[str] = Field(None, description="Banner URL")
    profile_background_color: Optional[str] = Field(None, description="Background color")
    default_profile: Optional[bool] = Field(None, description="Uses the default theme")
    default_profile_image: Optional[bool] = Field(None, description="Uses the default avatar")

    @classmethod
    def from_profile(cls, profile: TwitterOAuthProfile) -> "TwitterOAuthInfoDTO":
        """Build the projection from a stored profile."""
        return cls.model_validate(profile.model_dump())
