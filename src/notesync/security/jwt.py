"""JWT token utilities."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import get_settings
from ..core.logging import get_logger
from ..core.redis_client import get_redis_client

logger = get_logger("security.jwt")


@dataclass(frozen=True)
class Identity:
    """Verified principal carried by a request or a live connection."""

    user_id: UUID
    name: str


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with JTI for Redis blacklisting."""
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "type": "access", "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def _decode(token: str) -> Optional[Dict[str, Any]]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


async def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate access token, checking Redis blacklist."""
    payload = _decode(token)
    if not payload or payload.get("type") != "access":
        return None

    jti = payload.get("jti")
    if jti:
        redis_client = get_redis_client()
        try:
            await redis_client.connect()
            if await redis_client.is_token_blacklisted(jti):
                return None
        except Exception as e:
            # a Redis outage must not lock everybody out
            logger.warning(f"Skipping blacklist check: {e}")

    return payload


async def get_identity_from_token(token: str) -> Optional[Identity]:
    """Resolve a token to the (user id, display name) it was issued for."""
    payload = await decode_access_token(token)
    if not payload:
        return None

    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        return None
    return Identity(user_id=user_id, name=payload.get("name") or "")


async def get_user_id_from_token(token: str) -> Optional[UUID]:
    """Extract user ID from token."""
    identity = await get_identity_from_token(token)
    return identity.user_id if identity else None


async def blacklist_token(token: str) -> bool:
    """Add token to Redis blacklist for secure logout."""
    payload = _decode(token)
    if not payload or not payload.get("jti") or not payload.get("exp"):
        return False

    expire_time = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    remaining_seconds = int((expire_time - datetime.now(timezone.utc)).total_seconds())
    if remaining_seconds <= 0:
        return False

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
    except Exception as e:
        logger.error(f"Blacklist token error: {e}")
        return False
    return await redis_client.add_to_blacklist(payload["jti"], remaining_seconds)
