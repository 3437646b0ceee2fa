# src/userpurge/api/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from userpurge.api.deps import get_settings
from userpurge.core.settings import Settings
from userpurge.domain.usecase.admin import CallerContext

log = logging.getLogger(__name__)

JWT_EXPIRE_MINUTES = 60

# auto_error=False: a missing header is an unauthenticated caller, not a 403.
bearer = HTTPBearer(auto_error=False)


def create_access_token(
    *,
    sub: str,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = JWT_EXPIRE_MINUTES,
    claims: Optional[dict[str, Any]] = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = dict(claims or {})
    payload.update(
        {
            "sub": sub,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
        }
    )
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_caller(token: str, settings: Settings) -> Optional[CallerContext]:
    """Return the caller carried by ``token``, or None if it cannot be trusted."""
    if not settings.jwt_secret:
        log.warning("JWT_SECRET is not configured; treating caller as anonymous")
        return None
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        log.info("Rejected bearer token: %s", exc)
        return None
    sub = payload.get("sub")
    if not sub:
        return None
    return CallerContext(uid=str(sub), claims=payload)


async def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> Optional[CallerContext]:
    if credentials is None:
        return None
    return decode_caller(credentials.credentials, settings)
