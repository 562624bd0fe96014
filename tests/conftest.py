"""Shared fixtures: in-memory database and an HTTP client bound to the app."""

import itertools
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  registers mappers
from db.database import Base, get_db
from main import app

_emails = itertools.count(1)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user; returns (auth headers, user profile)."""

    async def _register(role: str = "CUSTOMER", name: str = "Asha Verma", password: str = "secret123"):
        payload = {
            "customer_name": name,
            "email": f"user{next(_emails)}@example.com",
            "password": password,
            "country_code": "+91",
            "mobile_number": "9876543210",
            "address": "12 MG Road, Bengaluru",
            "role": role,
            "preferences": "EMAIL",
        }
        resp = await client.post("/api/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _register


@pytest.fixture
def booking_payload():
    return {
        "receiver_name": "Ravi Kumar",
        "receiver_address": "45 Park Street, Kolkata",
        "receiver_pin": "700016",
        "receiver_mobile": "9123456780",
        "parcel_weight_in_gram": 2000,
        "parcel_contents_description": "Books",
        "parcel_delivery_type": "STANDARD",
        "parcel_packing_preference": "BASIC",
    }


@pytest.fixture
def card():
    return {
        "card_number": "4111111111111111",
        "cardholder_name": "Asha Verma",
        "expiry_date": "12/30",
        "cvv": "123",
    }
