"""
Password hashing, JWT issue/verify, and the caller-resolution dependencies.

Tokens carry `sub` (account id) and `role` ("user" or "business"). Business
tokens also carry `ver`, compared against Business.token_version so that a
logout revokes every token issued before it.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.config import get_settings
from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.db.session import get_db
from hotel_business.models.business import Business
from hotel_business.models.user import User
from hotel_business.services.callers import BusinessCaller, Caller, UserCaller

logger = get_logger(__name__)
settings = get_settings()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

ROLE_USER = "user"
ROLE_BUSINESS = "business"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT; `data` must contain `sub` and `role`."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise _credentials_exception("Token has expired")
    except jwt.PyJWTError:
        raise _credentials_exception()

    if "sub" not in payload or payload.get("role") not in (ROLE_USER, ROLE_BUSINESS):
        raise _credentials_exception()
    return payload


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Caller:
    """Resolve the bearer token into a UserCaller or BusinessCaller."""
    if credentials is None:
        raise _credentials_exception("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    try:
        account_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise _credentials_exception()

    if payload["role"] == ROLE_USER:
        user = await db.get(User, account_id)
        if user is None:
            raise _credentials_exception()
        if not user.is_active:
            raise ServiceError(ErrorCode.UNAUTHORIZED, "Account is deactivated")
        return UserCaller(user_id=user.id)

    business = await db.get(Business, account_id)
    if business is None:
        raise ServiceError(ErrorCode.BUSINESS_NOT_FOUND)
    if payload.get("ver", 0) != business.token_version:
        logger.info("stale_token_rejected", business_id=business.id)
        raise _credentials_exception("Token has been revoked, please log in again")
    if business.status == "suspended":
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Business account is suspended")
    return BusinessCaller(business_id=business.id)


async def require_business(caller: Caller = Depends(get_current_caller)) -> BusinessCaller:
    if not isinstance(caller, BusinessCaller):
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Business account required")
    return caller


async def require_user(caller: Caller = Depends(get_current_caller)) -> UserCaller:
    if not isinstance(caller, UserCaller):
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Guest account required")
    return caller


async def require_admin(
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
) -> UserCaller:
    """Platform operators are guest accounts flagged is_admin."""
    if isinstance(caller, UserCaller):
        user = await db.get(User, caller.user_id)
        if user is not None and user.is_admin:
            return caller
    raise ServiceError(ErrorCode.UNAUTHORIZED, "Administrator account required")
