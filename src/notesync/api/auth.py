"""Authentication API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.auth import LoginRequest, SignupRequest, TokenResponse, UserResponse
from ..core.schemas.common import MessageResponse
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_access_token, get_current_user_id

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest, session: AsyncSession = Depends(get_db_session)):
    """Register a new user and return a token for them."""
    auth_service = AuthService(session)
    return await auth_service.signup(request)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, session: AsyncSession = Depends(get_db_session)):
    """Login user and get a JWT."""
    auth_service = AuthService(session)
    return await auth_service.login(request)


@router.get("/user", response_model=UserResponse)
async def get_current_user(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get current user profile."""
    auth_service = AuthService(session)
    return await auth_service.get_current_user(current_user_id)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    access_token: str = Depends(get_access_token),
    session: AsyncSession = Depends(get_db_session),
):
    """Revoke the presented access token."""
    auth_service = AuthService(session)
    if await auth_service.logout(access_token):
        return MessageResponse(message="Logged out successfully")
    return MessageResponse(message="Logged out; token expires on its own")
