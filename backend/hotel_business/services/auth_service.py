"""
Authentication service handling guest and business registration and login.

Business logins are rate limited per account: each wrong password increments
failed_login_attempts; reaching LOGIN_MAX_FAILED_ATTEMPTS deactivates the
account. A deactivated account unlocks itself once LOGIN_LOCKOUT_MINUTES have
passed since the last attempt.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.config import get_settings
from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.core.metrics import record_login_failure
from hotel_business.core.security import (
    ROLE_BUSINESS,
    ROLE_USER,
    create_access_token,
    hash_password,
    verify_password,
)
from hotel_business.models.business import Business
from hotel_business.models.user import User
from hotel_business.schemas.user import BusinessCreate, UserCreate, UserLogin
from hotel_business.services.callers import BusinessCaller

logger = get_logger(__name__)
settings = get_settings()


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new guest with hashed password.
    Raises 409 if email or username already exists.
    """
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise ServiceError(ErrorCode.EMAIL_ALREADY_REGISTERED, "Email already registered")

    result = await db.execute(select(User).where(User.username == user_data.username))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="username_exists", username=user_data.username)
        raise ServiceError(ErrorCode.EMAIL_ALREADY_REGISTERED, "Username already taken")

    user = User(
        email=user_data.email,
        username=user_data.username,
        phone=user_data.phone,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """Authenticate a guest and return a JWT access token."""
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email, role=ROLE_USER)
        raise ServiceError(
            ErrorCode.INVALID_CREDENTIALS,
            "Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise ServiceError(ErrorCode.ACCOUNT_LOCKED, "Account is deactivated")

    token = create_access_token(data={"sub": str(user.id), "role": ROLE_USER})
    logger.info("user_logged_in", user_id=user.id)
    return token


async def register_business(db: AsyncSession, data: BusinessCreate) -> Business:
    result = await db.execute(select(Business).where(Business.email == data.email))
    if result.scalar_one_or_none():
        logger.warning("business_registration_failed", reason="email_exists", email=data.email)
        raise ServiceError(ErrorCode.EMAIL_ALREADY_REGISTERED, "Email already registered")

    fields = data.model_dump(exclude={"password"})
    business = Business(**fields, hashed_password=hash_password(data.password))
    db.add(business)
    await db.flush()
    await db.refresh(business)

    logger.info("business_registered", business_id=business.id, email=business.email)
    return business


async def authenticate_business(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate a business and return a JWT carrying its token version.

    Failed attempts are committed even though the request fails, otherwise the
    rollback in get_db would erase the counter.
    """
    result = await db.execute(select(Business).where(Business.email == login_data.email))
    business = result.scalar_one_or_none()

    if not business:
        logger.warning("login_failed", email=login_data.email, role=ROLE_BUSINESS)
        raise ServiceError(
            ErrorCode.INVALID_CREDENTIALS,
            "Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    now = datetime.now(timezone.utc)
    lockout = timedelta(minutes=settings.LOGIN_LOCKOUT_MINUTES)

    if not business.is_active:
        last_attempt = _as_utc(business.last_login_attempt)
        if last_attempt is not None and now - last_attempt > lockout:
            business.is_active = True
            business.failed_login_attempts = 0
            logger.info("business_unlocked", business_id=business.id)
        else:
            record_login_failure("locked")
            raise ServiceError(
                ErrorCode.ACCOUNT_LOCKED,
                f"Too many failed logins. Try again in {settings.LOGIN_LOCKOUT_MINUTES} minutes.",
            )

    business.last_login_attempt = now

    if not verify_password(login_data.password, business.hashed_password):
        business.failed_login_attempts += 1
        record_login_failure("bad_password")
        remaining = settings.LOGIN_MAX_FAILED_ATTEMPTS - business.failed_login_attempts
        if remaining <= 0:
            business.is_active = False
            logger.warning("business_locked", business_id=business.id)
        else:
            logger.warning(
                "login_failed",
                email=login_data.email,
                role=ROLE_BUSINESS,
                remaining_attempts=remaining,
            )
        await db.commit()
        raise ServiceError(
            ErrorCode.INVALID_CREDENTIALS,
            "Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    business.failed_login_attempts = 0
    await db.flush()

    token = create_access_token(
        data={"sub": str(business.id), "role": ROLE_BUSINESS, "ver": business.token_version}
    )
    logger.info("business_logged_in", business_id=business.id)
    return token


async def get_business(db: AsyncSession, caller: BusinessCaller) -> Business:
    business = await db.get(Business, caller.business_id)
    if not business:
        raise ServiceError(ErrorCode.BUSINESS_NOT_FOUND)
    return business


async def logout_business(db: AsyncSession, caller: BusinessCaller) -> None:
    """Revoke every token issued to the business so far."""
    business = await get_business(db, caller)
    business.token_version += 1
    await db.flush()
    logger.info("business_logged_out", business_id=business.id, token_version=business.token_version)
