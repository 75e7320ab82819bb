"""
Authentication endpoints: guest and business registration, login, logout.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.security import ROLE_BUSINESS, ROLE_USER, require_business
from hotel_business.db.session import get_db
from hotel_business.schemas.user import (
    BusinessCreate,
    BusinessResponse,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
)
from hotel_business.services.auth_service import (
    authenticate_business,
    authenticate_user,
    get_business,
    logout_business,
    register_business,
    register_user,
)
from hotel_business.services.callers import BusinessCaller

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new guest account."""
    return await register_user(db, user_data)


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate a guest and receive a JWT access token."""
    token = await authenticate_user(db, login_data)
    return Token(access_token=token, role=ROLE_USER)


@router.post("/business/register", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def register_business_endpoint(data: BusinessCreate, db: AsyncSession = Depends(get_db)):
    """Register a new business account."""
    return await register_business(db, data)


@router.post("/business/login", response_model=Token)
async def business_login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate a business. Repeated failures lock the account for a while."""
    token = await authenticate_business(db, login_data)
    return Token(access_token=token, role=ROLE_BUSINESS)


@router.post("/business/logout", status_code=status.HTTP_204_NO_CONTENT)
async def business_logout(
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """Invalidate every token issued to this business."""
    await logout_business(db, caller)


@router.get("/business/me", response_model=BusinessResponse)
async def business_profile(
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await get_business(db, caller)
