"""Authentication service implementation."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...security import (
    blacklist_token,
    create_access_token,
    hash_password,
    needs_update,
    verify_password,
)
from ..errors import ConflictError, NotFoundError
from ..logging import get_logger
from ..models.activity import ActivityAction
from ..models.user import User
from ..repositories import UserRepository
from ..schemas.auth import LoginRequest, SignupRequest, TokenResponse, UserResponse
from .activity_service import ActivityRecorder
from .interfaces import IAuthService

logger = get_logger("auth")


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.activity = ActivityRecorder(session)
        self.settings = get_settings()

    def _issue_token(self, user: User) -> TokenResponse:
        access_token = create_access_token(
            data={"sub": str(user.id), "name": user.name, "email": user.email, "role": user.role}
        )
        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        )

    async def signup(self, request: SignupRequest) -> TokenResponse:
        """Register new user and sign them in."""
        email = request.email.strip().lower()
        if await self.user_repo.is_email_taken(email):
            raise ConflictError("Email already registered")

        user_data = {
            "name": request.name,
            "email": email,
            "password_hash": hash_password(request.password),
        }
        try:
            user = await self.user_repo.create_user(user_data)
            await self.activity.record(user.id, None, ActivityAction.SIGNUP)
            await self.session.commit()
        except IntegrityError:
            # lost a race with a concurrent signup for the same address
            await self.session.rollback()
            raise ConflictError("Email already registered")

        logger.info("User signed up", extra={"user_id": str(user.id)})
        return self._issue_token(user)

    async def login(self, request: LoginRequest) -> TokenResponse:
        """Login user and return a JWT."""
        user = await self.user_repo.get_by_email(request.email)
        if not user or not verify_password(request.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )

        if needs_update(user.password_hash):
            user.password_hash = hash_password(request.password)

        await self.activity.record(user.id, None, ActivityAction.LOGIN)
        await self.session.commit()

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return self._issue_token(user)

    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserResponse.model_validate(user)

    async def logout(self, access_token: str) -> bool:
        """Logout user with Redis token blacklisting."""
        revoked = await blacklist_token(access_token)
        if not revoked:
            logger.warning("Logout without revocation; token stays valid until expiry")
        return revoked
