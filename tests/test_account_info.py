import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from keymesh_proxy.core.exceptions import InvalidSignatureError
from keymesh_proxy.core.security import wallet_signature_manager

pytestmark = pytest.mark.anyio

MESSAGE = "I own this wallet"


def _signed(message: str = MESSAGE):
    account = Account.create()
    signed = Account.sign_message(encode_defunct(text=message), private_key=account.key)
    return account.address, "0x" + bytes(signed.signature).hex()


def test_wallet_signature_roundtrip():
    address, signature = _signed()

    assert wallet_signature_manager.verify_wallet_signature(MESSAGE, signature, address)
    assert wallet_signature_manager.verify_wallet_signature(MESSAGE, signature, address.lower())
    assert not wallet_signature_manager.verify_wallet_signature("other", signature, address)


@pytest.mark.parametrize("signature", ["", "deadbeef", "0x1234"])
def test_wallet_signature_malformed(signature):
    with pytest.raises(InvalidSignatureError):
        wallet_signature_manager.verify_wallet_signature(MESSAGE, signature, "0xabc")


async def test_put_account_info_with_valid_signature(async_client, fakes):
    address, signature = _signed()

    resp = await async_client.put(
        "/account-info",
        json={
            "userAddress": address,
            "name": "Alice",
            "email": "alice@example.com",
            "msg": MESSAGE,
            "sig": signature,
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["validSig"] is True
    assert body["userAddress"] == address
    assert "createdAt" in body
    assert fakes.account_repository.items[0].valid_sig is True


async def test_put_account_info_with_wrong_signer_is_still_stored(async_client, fakes):
    _, signature = _signed()
    other_address, _ = _signed()

    resp = await async_client.put(
        "/account-info",
        json={
            "userAddress": other_address,
            "email": "alice@example.com",
            "msg": MESSAGE,
            "sig": signature,
        },
    )

    assert resp.status_code == 201
    assert resp.json()["validSig"] is False
    assert len(fakes.account_repository.items) == 1


async def test_put_account_info_with_malformed_signature(async_client, fakes):
    resp = await async_client.put(
        "/account-info",
        json={
            "userAddress": "0xabc",
            "email": "alice@example.com",
            "msg": MESSAGE,
            "sig": "garbage",
        },
    )

    assert resp.status_code == 201
    assert resp.json()["validSig"] is False


async def test_put_account_info_defaults_missing_address(async_client, fakes):
    resp = await async_client.put("/account-info", json={"email": "alice@example.com"})

    assert resp.status_code == 201
    assert resp.json()["userAddress"] == "-"
    assert resp.json()["validSig"] is False


async def test_put_account_info_requires_email(async_client, fakes):
    resp = await async_client.put("/account-info", json={"userAddress": "0xabc"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "email could not be empty"
    assert fakes.account_repository.items == []


async def test_put_account_info_rejects_non_json_body(async_client):
    resp = await async_client.put(
        "/account-info",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
