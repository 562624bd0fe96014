"""Registration, login and password management endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_db
from models.customer import Customer
from schemas import (
    ApiResponse, AuthData, LoginRequest, PasswordChangeRequest,
    RegisterRequest, UserProfile,
)
from services.auth import (
    allocate_unique_id, create_access_token, get_current_user,
    hash_password, verify_password,
)
from services.errors import InvalidCredentials, StateConflict, ValidationFailed

router = APIRouter()
logger = logging.getLogger(__name__)


def _auth_data(user: Customer) -> AuthData:
    return AuthData(
        token=create_access_token(user.email, user.id, user.role),
        user=UserProfile.model_validate(user),
    )


async def _login(db: AsyncSession, data: LoginRequest, role: str) -> Customer:
    """Same failure message for unknown id, wrong password and wrong role."""
    result = await db.execute(
        select(Customer).where(Customer.unique_id == data.unique_id.strip())
    )
    user = result.scalar_one_or_none()
    if user is None or user.role != role or not verify_password(data.password, user.password):
        logger.info("Failed %s login for id=%s", role.lower(), data.unique_id)
        raise InvalidCredentials()
    return user


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a customer or officer and return a token for immediate use."""
    email = data.email.lower()
    existing = await db.execute(select(Customer.id).where(Customer.email == email))
    if existing.scalar_one_or_none() is not None:
        raise StateConflict("Email already registered")

    user = Customer(
        unique_id=await allocate_unique_id(db, data.role.value),
        customer_name=data.customer_name,
        email=email,
        password=hash_password(data.password),
        country_code=data.country_code,
        mobile_number=data.mobile_number,
        address=data.address,
        role=data.role.value,
        get_updates_via=data.preferences,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise StateConflict("Email already registered")
    await db.refresh(user)

    logger.info("Registered %s %s", user.role.lower(), user.unique_id)
    return ApiResponse(
        message=f"Registration successful for: {user.customer_name}",
        data=_auth_data(user),
    )


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Customer login by unique id."""
    user = await _login(db, data, "CUSTOMER")
    return ApiResponse(message="Login successful", data=_auth_data(user))


@router.post("/officer-login", response_model=ApiResponse[AuthData])
async def officer_login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Officer login by unique id."""
    user = await _login(db, data, "OFFICER")
    return ApiResponse(message="Login successful", data=_auth_data(user))


@router.post("/change-password", response_model=ApiResponse[None])
async def change_password(
    data: PasswordChangeRequest,
    user: Customer = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the bearer's password after verifying the current one."""
    if data.new_password != data.confirm_password:
        raise ValidationFailed("New password and confirm password do not match")
    if not verify_password(data.current_password, user.password):
        raise InvalidCredentials("Current password is incorrect")

    user.password = hash_password(data.new_password)
    await db.commit()
    logger.info("Password changed for %s", user.unique_id)
    return ApiResponse(message="Password updated successfully")


@router.get("/me", response_model=UserProfile)
async def me(user: Customer = Depends(get_current_user)):
    return user
