"""
Configuration management for the Keymesh OAuth proxy.
Handles environment variables and application settings for social proof verification.
"""

import json
from typing import Annotated, Any, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


def split_env_list(v):
    """Accept a JSON list or a comma separated string."""
    if not isinstance(v, str):
        return v
    v = v.strip()
    if v.startswith("["):
        return json.loads(v)
    return [part.strip() for part in v.split(",") if part.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Keymesh OAuth Proxy"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 1235

    # CORS
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    # Database - MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "keymesh_proxy"
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[str] = None

    # MongoDB Environment Variables (from .env)
    MONGO_URI: Optional[str] = None
    MONGO_DB_NAME: Optional[str] = None

    # Collections
    AUTHORIZATION_COLLECTION_PREFIX: str = "authorizations"
    TWITTER_OAUTH_COLLECTION: str = "twitter_oauth"
    ACCOUNT_COLLECTION: str = "account_info"

    # Abort startup when MongoDB is unreachable
    STORE_CHECK_ON_STARTUP: bool = True

    # Redis for OAuth request tokens
    REDIS_URI: str = "redis://localhost:6379"
    REDIS_DB: int = 0
    OAUTH_REQUEST_TOKEN_TTL: int = 600  # seconds

    # AWS
    AWS_REGION: Optional[str] = None
    AWS_CONNECT_TIMEOUT: int = 10
    AWS_READ_TIMEOUT: int = 60
    PREKEYS_BUCKET_NAME: str = "keymesh-prekeys"
    SOCIAL_PROOF_LOOKUP_FUNCTION: str = "getUserLastProofEventLambda"

    # Twitter OAuth1
    TWITTER_CONSUMER_KEY: Optional[str] = None
    TWITTER_CONSUMER_SECRET: Optional[str] = None
    TWITTER_CALLBACK_URL: str = "http://localhost:1235/oauth/twitter/callback"
    TWITTER_REQUEST_TOKEN_URL: str = "https://api.twitter.com/oauth/request_token"
    TWITTER_AUTHORIZE_URL: str = "https://api.twitter.com/oauth/authorize"
    TWITTER_ACCESS_TOKEN_URL: str = "https://api.twitter.com/oauth/access_token"
    TWITTER_VERIFY_CREDENTIALS_URL: str = (
        "https://api.twitter.com/1.1/account/verify_credentials.json"
    )

    # Ethereum network IDs treated as public; any other ID is a private network
    # https://ethereum.stackexchange.com/questions/17051
    PUBLIC_NETWORK_IDS: Annotated[List[int], NoDecode] = [0, 1, 2, 3, 4, 8, 42, 77, 99, 7762959]

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        return split_env_list(v)

    @field_validator("PUBLIC_NETWORK_IDS", mode="before")
    @classmethod
    def parse_public_network_ids(cls, v):
        """Parse public network IDs from a comma separated string or list."""
        return split_env_list(v)

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of {allowed_envs}")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    def model_post_init(self, __context: Any) -> None:  # type: ignore[override]
        """Normalize alternate env var names."""
        if self.MONGO_DB_NAME:
            self.MONGODB_DATABASE = self.MONGO_DB_NAME


# Create global settings instance
settings = Settings()


def get_mongodb_url() -> str:
    """
    Get MongoDB connection URL with authentication if credentials are provided.

    Returns:
        str: MongoDB connection URL
    """
    # Use MONGO_URI from environment if available
    if settings.MONGO_URI:
        return settings.MONGO_URI

    # Fallback to MONGODB_URL with authentication
    if settings.MONGODB_USERNAME and settings.MONGODB_PASSWORD:
        base_url = settings.MONGODB_URL.replace("mongodb://", "")
        if "@" not in base_url:  # No existing auth in URL
            return f"mongodb://{settings.MONGODB_USERNAME}:{settings.MONGODB_PASSWORD}@{base_url}"

    return settings.MONGODB_URL


def get_mongodb_database_name() -> str:
    """Get MongoDB database name."""
    return settings.MONGODB_DATABASE


def is_production() -> bool:
    """Check if running in production environment."""
    return settings.ENVIRONMENT == "production"
