"""
Auth Service — password hashing, JWT issuance and role checks.

Security:
  - Passwords hashed with bcrypt
  - HS256 JWT, subject = email, claims userId + role, 24h expiry
  - Role checks happen once, at the router boundary, via require_role()
"""

import logging
import random
import time
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from db.database import get_db
from models.customer import Customer
from services.errors import AccessDenied, AuthenticationRequired

logger = logging.getLogger(__name__)

ROLE_PREFIXES = {"CUSTOMER": "CUST", "OFFICER": "OFF"}

bearer_scheme = HTTPBearer(auto_error=False)


# ── Passwords ──────────────────────────────────────────────

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


# ── Identifiers ────────────────────────────────────────────

def generate_unique_id(role: str) -> str:
    """Login identifier: CUST/OFF + last 5 digits of epoch millis + 0..999."""
    prefix = ROLE_PREFIXES.get(role, "CUST")
    millis = str(int(time.time() * 1000))
    return f"{prefix}{millis[8:]}{random.randint(0, 999)}"


async def allocate_unique_id(db: AsyncSession, role: str, attempts: int = 5) -> str:
    """Generate a unique_id not yet present in the customers table."""
    for _ in range(attempts):
        candidate = generate_unique_id(role)
        taken = await db.execute(select(Customer.id).where(Customer.unique_id == candidate))
        if taken.scalar_one_or_none() is None:
            return candidate
    raise RuntimeError("Could not allocate a unique customer id")


# ── Tokens ─────────────────────────────────────────────────

def create_access_token(email: str, user_id: int, role: str, expires_hours: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    hours = settings.JWT_EXPIRE_HOURS if expires_hours is None else expires_hours
    claims = {
        "sub": email,
        "userId": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=hours),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry; raise AuthenticationRequired on any failure."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthenticationRequired("Invalid or expired token") from e

    if not claims.get("sub") or not claims.get("userId") or not claims.get("role"):
        raise AuthenticationRequired("Invalid or expired token")
    return claims


# ── Dependencies ───────────────────────────────────────────

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Customer:
    """Resolve the bearer token to a stored user whose email and role still match."""
    if credentials is None:
        raise AuthenticationRequired("Missing bearer token")

    claims = decode_access_token(credentials.credentials)
    try:
        user_id = int(claims["userId"])
    except ValueError:
        raise AuthenticationRequired("Invalid or expired token")

    user = await db.get(Customer, user_id)
    if user is None or user.email != claims["sub"] or user.role != claims["role"]:
        logger.warning("Token subject mismatch for userId=%s", claims["userId"])
        raise AccessDenied()
    return user


def require_role(*roles: str):
    """Dependency factory: the bearer must hold one of ``roles``."""

    async def _checker(user: Customer = Depends(get_current_user)) -> Customer:
        if user.role not in roles:
            logger.info("Access denied: user %s (%s) needs %s", user.unique_id, user.role, "/".join(roles))
            raise AccessDenied()
        return user

    return _checker


def ensure_owner_or_officer(user: Customer, owner_id: int) -> None:
    """Customers may only touch their own records; officers may touch any."""
    if user.role == "OFFICER":
        return
    if user.id != owner_id:
        raise AccessDenied()
