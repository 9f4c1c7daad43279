import os
import sys
from typing import Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from asgi_lifespan import LifespanManager

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)
os.environ.setdefault("ANYIO_BACKEND", "asyncio")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("STORE_CHECK_ON_STARTUP", "false")

from keymesh_proxy.main import app  # noqa: E402
from keymesh_proxy.api.deps import providers  # noqa: E402
from keymesh_proxy.api.services.account_service import AccountService  # noqa: E402
from keymesh_proxy.api.services.prekey_service import PrekeyService  # noqa: E402
from keymesh_proxy.api.services.twitter_oauth_service import TwitterOAuthService  # noqa: E402
from keymesh_proxy.api.services.user_service import UserService  # noqa: E402
from keymesh_proxy.api.services.verification_service import VerificationService  # noqa: E402
from keymesh_proxy.core.exceptions import OAuthError  # noqa: E402
from keymesh_proxy.domain.models.account_info import AccountInfoModel  # noqa: E402
from keymesh_proxy.domain.models.authorization import (  # noqa: E402
    AuthorizationRecord,
    PlatformName,
    SocialProofClaim,
)
from keymesh_proxy.domain.models.twitter_oauth import TwitterOAuthProfile  # noqa: E402


class FakeAuthorizationRepository:
    """In-memory stand-in for one network's authorization collection."""

    def __init__(self, network_id: int):
        self.network_id = network_id
        self.records: Dict[tuple, AuthorizationRecord] = {}
        self.put_calls = 0

    async def put_authorization(self, record: AuthorizationRecord) -> AuthorizationRecord:
        self.put_calls += 1
        self.records[(record.user_address, record.platform_name)] = record
        return record

    async def get_by_user_address(self, user_address: str) -> List[AuthorizationRecord]:
        return [r for r in self.records.values() if r.user_address == user_address]

    async def scan_username(self, username: str) -> List[AuthorizationRecord]:
        return [r for r in self.records.values() if r.username == username]

    async def scan_username_prefix(
        self, username_prefix: str, limit: Optional[int] = None
    ) -> List[AuthorizationRecord]:
        matches = [
            r for r in self.records.values() if r.username.startswith(username_prefix)
        ]
        return matches[:limit] if limit else matches


class FakeRegistry:
    def __init__(self):
        self.repositories: Dict[int, FakeAuthorizationRepository] = {}

    async def get(self, network_id: int) -> FakeAuthorizationRepository:
        if network_id not in self.repositories:
            self.repositories[network_id] = FakeAuthorizationRepository(network_id)
        return self.repositories[network_id]


class FakeTwitterRepository:
    def __init__(self):
        self.profiles: Dict[str, TwitterOAuthProfile] = {}
        self.batch_calls: List[List[str]] = []
        self.error: Optional[Exception] = None

    async def put_profile(self, profile: TwitterOAuthProfile) -> TwitterOAuthProfile:
        self.profiles[profile.screen_name] = profile
        return profile

    async def get_profile(self, screen_name: str) -> Optional[TwitterOAuthProfile]:
        return self.profiles.get(screen_name)

    async def batch_get_profiles(self, screen_names: List[str]) -> Dict[str, TwitterOAuthProfile]:
        self.batch_calls.append(list(screen_names))
        if self.error:
            raise self.error
        return {n: self.profiles[n] for n in screen_names if n in self.profiles}


class FakeLookupClient:
    def __init__(self):
        self.proofs: Dict[str, SocialProofClaim] = {}
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    async def get_last_proof(self, user_address: str, platform: PlatformName) -> SocialProofClaim:
        self.calls.append((user_address, platform))
        if self.error:
            raise self.error
        return self.proofs[user_address]


class FakeBlobStore:
    def __init__(self):
        self.objects: Dict[str, bytes] = {}

    async def put_object(self, key: str, body: bytes, content_type: str = "application/json") -> None:
        self.objects[key] = body


class FakeAccountRepository:
    def __init__(self):
        self.items: List[AccountInfoModel] = []

    async def put_account_info(self, info: AccountInfoModel) -> AccountInfoModel:
        self.items.append(info)
        return info


class FakeOAuthClient:
    def __init__(self):
        self.user: Optional[dict] = None
        self.fetch_user_calls: List[tuple] = []

    async def fetch_authorization(self):
        return (
            "https://api.twitter.com/oauth/authorize?oauth_token=req-token",
            "req-token",
            "req-secret",
        )

    async def fetch_user(self, oauth_token, oauth_verifier, oauth_token_secret=None):
        self.fetch_user_calls.append((oauth_token, oauth_verifier, oauth_token_secret))
        if self.user is None:
            raise OAuthError("twitter: unable to get Twitter User")
        return self.user


class FakeCache:
    def __init__(self):
        self.values: Dict[str, object] = {}
        self.expires: Dict[str, object] = {}

    async def set(self, key, value, expire=None):
        self.values[key] = value
        self.expires[key] = expire
        return True

    async def get(self, key):
        return self.values.get(key)

    async def delete(self, key):
        return self.values.pop(key, None) is not None

    async def pop(self, key):
        return self.values.pop(key, None)


class Fakes:
    """Collaborator fakes plus services built on them."""

    def __init__(self):
        self.registry = FakeRegistry()
        self.twitter_repository = FakeTwitterRepository()
        self.lookup_client = FakeLookupClient()
        self.blob_store = FakeBlobStore()
        self.account_repository = FakeAccountRepository()
        self.oauth_client = FakeOAuthClient()
        self.cache = FakeCache()

        self.verification_service = VerificationService(
            self.registry, self.twitter_repository, self.lookup_client
        )
        self.user_service = UserService(self.registry, self.twitter_repository)
        self.prekey_service = PrekeyService(self.blob_store)
        self.account_service = AccountService(self.account_repository)
        self.twitter_oauth_service = TwitterOAuthService(
            self.oauth_client, self.twitter_repository, self.cache
        )


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fakes() -> Fakes:
    return Fakes()


@pytest.fixture(autouse=True)
def override_service_dependencies(fakes: Fakes):
    """
    Route every service dependency to the in-memory fakes so no test touches
    MongoDB, Redis, S3, Lambda or Twitter.
    """
    app.dependency_overrides[providers.get_verification_service] = lambda: fakes.verification_service
    app.dependency_overrides[providers.get_user_service] = lambda: fakes.user_service
    app.dependency_overrides[providers.get_prekey_service] = lambda: fakes.prekey_service
    app.dependency_overrides[providers.get_account_service] = lambda: fakes.account_service
    app.dependency_overrides[providers.get_twitter_oauth_service] = lambda: fakes.twitter_oauth_service
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    """Shared HTTPX async client with FastAPI lifespan handling."""
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
