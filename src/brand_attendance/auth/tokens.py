from __future__ import annotations

import datetime
from typing import Any, Optional

import jwt
import structlog

from ..core.constants import AUTH_COOKIE_NAME, DEFAULT_TOKEN_HOURS, JWT_ALGORITHM

logger = structlog.get_logger(__name__)


def issue_token(user: Any, *, secret: str, expires_hours: int = DEFAULT_TOKEN_HOURS) -> str:
    """Signed session token carrying userId, username and groupId."""
    payload = {
        "userId": user.id,
        "username": user.username,
        "groupId": user.group_id,
        "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=int(expires_hours)),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, *, secret: str) -> Optional[dict]:
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("token_expired")
        return None
    except jwt.InvalidTokenError:
        logger.info("token_invalid")
        return None


def token_from_request(request) -> Optional[str]:
    """Bearer token from the Authorization header, else the auth cookie."""
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        token = header[len("Bearer "):].strip()
        if token:
            return token
    return request.cookies.get(AUTH_COOKIE_NAME) or None
