import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwe, jwt
from jose.exceptions import JWEError

from classroom_progress.core.config import (
    ALGORITHM,
    OAUTH_STATE_EXPIRE,
    SECRET_KEY,
    SESSION_ENCRYPTION,
    SESSION_TOKEN_EXPIRE,
)

STATE_PURPOSE = "oauth-state"
SESSION_PURPOSE = "session"

# A256GCM with "dir" needs exactly 32 key bytes
_SESSION_KEY = hashlib.sha256(SECRET_KEY.encode()).digest()


def _encode(data: dict[str, Any], expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _decode(token: str, purpose: str) -> dict[str, Any]:
    """Raises jose.JWTError on a bad signature, an expired token or the wrong purpose."""
    payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    if payload.get("purpose") != purpose:
        raise JWTError("unexpected token purpose")
    return payload


def create_session_token(data: dict[str, Any], expires_delta: timedelta = SESSION_TOKEN_EXPIRE) -> str:
    """Signed JWT wrapped in a JWE, so the browser holding it cannot read the Google tokens."""
    signed = _encode({**data, "purpose": SESSION_PURPOSE}, expires_delta)
    return jwe.encrypt(
        signed.encode(),
        _SESSION_KEY,
        algorithm="dir",
        encryption=SESSION_ENCRYPTION,
        cty="JWT",
    ).decode()


def decode_session_token(token: str) -> dict[str, Any]:
    try:
        signed = jwe.decrypt(token, _SESSION_KEY)
    except JWEError as exc:
        raise JWTError("session token cannot be decrypted") from exc
    return _decode(signed.decode(), SESSION_PURPOSE)


def create_state_token() -> str:
    return _encode({"purpose": STATE_PURPOSE}, OAUTH_STATE_EXPIRE)


def verify_state_token(token: str) -> None:
    _decode(token, STATE_PURPOSE)
