import pytest

from keymesh_proxy.api.dto.oauth_dto import TwitterOAuthInfoDTO
from keymesh_proxy.api.services.twitter_oauth_service import request_token_cache_key
from keymesh_proxy.core.exceptions import CacheError, OAuthError
from keymesh_proxy.domain.models.twitter_oauth import TwitterOAuthProfile

pytestmark = pytest.mark.anyio

TWITTER_USER = {
    "id": 42,
    "id_str": "42",
    "screen_name": "alice",
    "name": "Alice",
    "email": "alice@example.com",
    "location": "Berlin",
    "followers_count": 10,
    "protected": False,
    "created_at": "Mon Jan 01 00:00:00 +0000 2018",
}


async def test_authorize_url_is_plain_text(async_client, fakes):
    resp = await async_client.get("/oauth/twitter/authorize_url")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "https://api.twitter.com/oauth/authorize?oauth_token=req-token"

    key = request_token_cache_key("req-token")
    assert fakes.cache.values[key] == "req-secret"
    assert fakes.cache.expires[key] == 600


async def test_authorize_url_survives_cache_failure(fakes):
    async def broken_set(*args, **kwargs):
        raise CacheError("down")

    fakes.cache.set = broken_set

    url = await fakes.twitter_oauth_service.get_authorize_url()

    assert url.endswith("oauth_token=req-token")


async def test_authorize_url_failure_is_server_error(async_client, fakes):
    async def broken_fetch():
        raise OAuthError("Failed to get request token")

    fakes.oauth_client.fetch_authorization = broken_fetch

    resp = await async_client.get("/oauth/twitter/authorize_url")

    assert resp.status_code == 500


async def test_callback_stores_profile_and_uses_cached_secret(async_client, fakes):
    fakes.oauth_client.user = TWITTER_USER
    fakes.cache.values[request_token_cache_key("req-token")] = "req-secret"

    resp = await async_client.get(
        "/oauth/twitter/callback",
        params={"oauth_token": "req-token", "oauth_verifier": "verifier"},
    )

    assert resp.status_code == 200
    assert resp.json()["screen_name"] == "alice"
    assert fakes.oauth_client.fetch_user_calls == [("req-token", "verifier", "req-secret")]
    assert request_token_cache_key("req-token") not in fakes.cache.values

    stored = fakes.twitter_repository.profiles["alice"]
    assert stored.email == "alice@example.com"
    assert stored.model_dump()["location"] == "Berlin"


async def test_callback_failure_is_unauthorized(async_client, fakes):
    resp = await async_client.get(
        "/oauth/twitter/callback",
        params={"oauth_token": "req-token", "oauth_verifier": "verifier"},
    )

    assert resp.status_code == 401
    assert resp.json()["error_code"] == "OAUTH_ERROR"
    assert fakes.twitter_repository.profiles == {}


async def test_callback_missing_parameters(async_client, fakes):
    resp = await async_client.get("/oauth/twitter/callback", params={"oauth_token": "t"})

    assert resp.status_code == 401
    assert fakes.oauth_client.fetch_user_calls == []


def test_public_projection_hides_private_fields():
    info = TwitterOAuthInfoDTO.from_profile(TwitterOAuthProfile(**TWITTER_USER))
    dumped = info.model_dump()

    assert dumped["screen_name"] == "alice"
    assert dumped["location"] == "Berlin"
    assert dumped["followers_count"] == 10
    for hidden in ("email", "id", "id_str", "protected", "created_at"):
        assert hidden not in dumped


async def test_callback_survives_cache_failure(async_client, fakes):
    async def broken_pop(key):
        raise CacheError("down")

    fakes.cache.pop = broken_pop
    fakes.oauth_client.user = TWITTER_USER

    resp = await async_client.get(
        "/oauth/twitter/callback",
        params={"oauth_token": "req-token", "oauth_verifier": "verifier"},
    )

    assert resp.status_code == 200
    assert fakes.oauth_client.fetch_user_calls == [("req-token", "verifier", None)]


async def test_authorize_url_when_cache_rejects_write(fakes):
    async def rejected_set(*args, **kwargs):
        return False

    fakes.cache.set = rejected_set

    url = await fakes.twitter_oauth_service.get_authorize_url()

    assert url.endswith("oauth_token=req-token")
