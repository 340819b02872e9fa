"""
Bearer-token access control.

Tokens are HS256 JWTs signed with SECRET_KEY and carry a `role` claim
(ROLE_VIEWER or ROLE_ADMIN). They are minted out of band with
scripts/issue_token.py; there is no user table.

Data routes are public unless REQUIRE_LOGIN is set. Admin routes always
require a token.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from prosecution_tracker.settings import settings

ROLE_VIEWER = "viewer"
ROLE_ADMIN = "admin"

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    payload = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    payload["exp"] = expire
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    if credentials is None:
        raise _credentials_exception()
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise _credentials_exception()
    if payload.get("role") not in (ROLE_VIEWER, ROLE_ADMIN):
        raise _credentials_exception()
    return payload


def require_viewer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[dict]:
    """Gate for data routes: a no-op unless REQUIRE_LOGIN is enabled."""
    if not settings.require_login:
        return None
    return get_token_payload(credentials)


def require_role(*roles: str):
    """Dependency factory: raises 403 if the token doesn't carry one of the required roles."""

    def _check(payload: dict = Depends(get_token_payload)) -> dict:
        if payload.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {list(roles)}",
            )
        return payload

    return _check
