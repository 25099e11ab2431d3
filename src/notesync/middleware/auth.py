"""Authentication middleware."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, WebSocket, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..security import Identity, get_identity_from_token


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication.

    Resolves to the caller's :class:`Identity`; the raw token is kept on
    ``request.state.access_token`` so logout can revoke it.
    """

    def __init__(self, auto_error: bool = True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request: Request) -> Identity:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Invalid authorization code"
            )
        if credentials.scheme.lower() != "bearer":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Invalid authentication scheme"
            )

        identity = await get_identity_from_token(credentials.credentials)
        if identity is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.access_token = credentials.credentials
        return identity


jwt_bearer = JWTBearer()


async def get_current_identity(identity: Identity = Depends(jwt_bearer)) -> Identity:
    return identity


async def get_current_user_id(identity: Identity = Depends(jwt_bearer)) -> UUID:
    """Get current authenticated user ID."""
    return identity.user_id


async def get_access_token(request: Request, identity: Identity = Depends(jwt_bearer)) -> str:
    """The bearer token of an authenticated request."""
    return request.state.access_token


class InvalidSocketToken(Exception):
    """A WebSocket presented a token that does not verify."""


async def get_websocket_identity(websocket: WebSocket) -> Optional[Identity]:
    """Identity for a WebSocket handshake.

    No ``token`` query parameter means an anonymous connection; a token that
    fails verification raises :class:`InvalidSocketToken`.
    """
    token = websocket.query_params.get("token")
    if not token:
        return None
    identity = await get_identity_from_token(token)
    if identity is None:
        raise InvalidSocketToken()
    return identity
