"""
Reader authentication helpers.

Access tokens are issued by the session service (outside this API) and
verified here:
  - Authorization: Bearer <jwt>, HS256, signed with JWT_SECRET
  - required claims: exp, iat, iss, sub  (sub = user id)
  - optional claim: role ("reader" | "admin")

issue_access_token() mirrors the issuer's payload and is used by tests and
local tooling.
"""
import logging
from datetime import datetime, timezone, timedelta
from fastapi import Header, HTTPException
from typing import Optional

import jwt

from config import settings
from domain.enums import UserRole
from domain.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def decode_access_token(token: str) -> dict:
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token expired.")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid access token.")


def issue_access_token(*, user_id: str, role: UserRole = UserRole.READER) -> str:
    now = _now_utc()
    exp = now.replace(microsecond=0) + timedelta(minutes=settings.jwt_access_ttl_minutes)
    payload = {
        "iss": settings.jwt_issuer,
        "sub": user_id,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


async def get_token_claims(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[dict]:
    """Verified claims of the bearer token, or None when no token was sent."""
    token = _parse_bearer_token(authorization)
    if not token:
        return None
    return decode_access_token(token)


async def require_authenticated_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """Dependency yielding the authenticated user id (401 when absent)."""
    claims = await get_token_claims(authorization=authorization)
    if not claims or not claims.get("sub"):
        raise UnauthorizedError(
            "Authentication required. Provide Authorization: Bearer <token>.",
        )
    return claims["sub"]
