"""Tests for password hashing, tokens and the auth endpoints."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

import pytest

from services.auth import (
    create_access_token, decode_access_token, generate_unique_id,
    hash_password, verify_password,
)
from services.errors import AuthenticationRequired


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_verify_against_malformed_hash():
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_unique_id_prefix():
    assert generate_unique_id("CUSTOMER").startswith("CUST")
    assert generate_unique_id("OFFICER").startswith("OFF")


def test_token_claims():
    claims = decode_access_token(create_access_token("asha@example.com", 42, "CUSTOMER"))
    assert claims["sub"] == "asha@example.com"
    assert claims["userId"] == "42"
    assert claims["role"] == "CUSTOMER"
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_expired_token_rejected():
    token = create_access_token("asha@example.com", 42, "CUSTOMER", expires_hours=-1)
    with pytest.raises(AuthenticationRequired):
        decode_access_token(token)


def test_token_signed_with_other_secret_rejected():
    from jose import jwt
    token = jwt.encode({"sub": "asha@example.com", "userId": "42", "role": "CUSTOMER"}, "other-secret", algorithm="HS256")
    with pytest.raises(AuthenticationRequired):
        decode_access_token(token)


# ── Endpoints ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_register_and_login(client, register):
    headers, user = await register()
    assert user["unique_id"].startswith("CUST")
    assert user["role"] == "CUSTOMER"
    assert "password" not in user

    resp = await client.post("/api/auth/login", json={"unique_id": user["unique_id"], "password": "secret123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["token"]

    me = await client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["unique_id"] == user["unique_id"]


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client, register):
    _, user = await register()
    payload = {
        "customer_name": "Someone Else",
        "email": user["email"].upper(),
        "password": "secret123",
        "mobile_number": "9000000000",
        "address": "1 Residency Road",
    }
    resp = await client.post("/api/auth/register", json=payload)
    assert resp.status_code == 409
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_login_failures_share_one_message(client, register):
    _, customer = await register()
    _, officer = await register(role="OFFICER", name="Officer Rao")

    attempts = [
        ("/api/auth/login", customer["unique_id"], "wrong-password"),
        ("/api/auth/login", "CUST000000", "secret123"),
        ("/api/auth/login", officer["unique_id"], "secret123"),
        ("/api/auth/officer-login", customer["unique_id"], "secret123"),
    ]
    for path, unique_id, password in attempts:
        resp = await client.post(path, json={"unique_id": unique_id, "password": password})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid credentials"

    resp = await client.post("/api/auth/officer-login", json={"unique_id": officer["unique_id"], "password": "secret123"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_change_password(client, register):
    headers, user = await register()

    mismatch = await client.post("/api/auth/change-password", headers=headers, json={
        "current_password": "secret123", "new_password": "newsecret1", "confirm_password": "different1",
    })
    assert mismatch.status_code == 422

    wrong = await client.post("/api/auth/change-password", headers=headers, json={
        "current_password": "nope-nope", "new_password": "newsecret1", "confirm_password": "newsecret1",
    })
    assert wrong.status_code == 401

    ok = await client.post("/api/auth/change-password", headers=headers, json={
        "current_password": "secret123", "new_password": "newsecret1", "confirm_password": "newsecret1",
    })
    assert ok.status_code == 200

    resp = await client.post("/api/auth/login", json={"unique_id": user["unique_id"], "password": "newsecret1"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_missing_and_bad_tokens(client):
    assert (await client.get("/api/auth/me")).status_code == 401
    resp = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_role_enforced(client, register):
    headers, _ = await register()
    resp = await client.get("/api/bookings/officer", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["message"] == "Access denied"


@pytest.mark.asyncio
async def test_request_validation_envelope(client):
    resp = await client.post("/api/auth/register", json={"customer_name": "A", "email": "not-an-email"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    fields = {err["field"] for err in body["data"]}
    assert "email" in fields
    assert "password" in fields
