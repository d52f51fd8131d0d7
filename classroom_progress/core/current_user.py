from datetime import datetime, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from classroom_progress.core.security import decode_session_token
from classroom_progress.schemas.user import SessionUser

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_session_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> SessionUser:
    """Decode the session token without checking the Google credential's lifetime."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_session_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("Not authenticated")

    if not payload.get("sub") or not payload.get("gat"):
        raise _unauthorized("Not authenticated")

    gexp = payload.get("gexp")
    return SessionUser(
        email=payload["sub"],
        name=payload.get("name"),
        access_token=payload["gat"],
        refresh_token=payload.get("grt"),
        expires_at=datetime.fromtimestamp(gexp, tz=timezone.utc) if gexp else None,
    )


def get_current_user(user: SessionUser = Depends(get_session_user)) -> SessionUser:
    if user.expires_at is not None and user.expires_at <= datetime.now(timezone.utc):
        raise _unauthorized("Session expired")
    return user
