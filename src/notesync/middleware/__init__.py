"""Middleware for authentication and other cross-cutting concerns."""

from .auth import (
    InvalidSocketToken,
    JWTBearer,
    get_access_token,
    get_current_identity,
    get_current_user_id,
    get_websocket_identity,
)

__all__ = [
    "JWTBearer",
    "get_current_identity",
    "get_current_user_id",
    "get_access_token",
    "get_websocket_identity",
    "InvalidSocketToken",
]
