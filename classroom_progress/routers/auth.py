import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from jose import JWTError

from classroom_progress.clients.google_oauth import GoogleOAuthClient
from classroom_progress.core.current_user import get_current_user, get_session_user
from classroom_progress.core.deps import get_oauth_client
from classroom_progress.core.security import create_session_token, create_state_token, verify_state_token
from classroom_progress.schemas.token import Token
from classroom_progress.schemas.user import SessionUser, Viewer

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue_session(email: str, name: str | None, tokens: dict[str, Any], refresh_token: str | None) -> Token:
    data = {
        "sub": email,
        "name": name,
        "gat": tokens["access_token"],
        "grt": refresh_token,
    }
    expires_in = tokens.get("expires_in")
    if expires_in:
        gexp = datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
        data["gexp"] = int(gexp.timestamp())

    return Token(access_token=create_session_token(data))


@router.get("/login", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
def login(oauth: GoogleOAuthClient = Depends(get_oauth_client)):
    return RedirectResponse(oauth.authorization_url(create_state_token()))


@router.get(
    "/callback",
    response_model=Token,
    responses={
        400: {"description": "Consent denied or invalid OAuth state"},
    },
)
def callback(
    state: str,
    code: str | None = None,
    error: str | None = None,
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
):
    try:
        verify_state_token(state)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OAuth state")

    if error or not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Google sign-in failed: {error or 'missing code'}",
        )

    tokens = oauth.exchange_code(code)
    info = oauth.userinfo(tokens["access_token"])
    email = info.get("email")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Google account has no email",
        )

    logger.info("Signed in %s", email)
    return _issue_session(email, info.get("name"), tokens, tokens.get("refresh_token"))


@router.post(
    "/refresh",
    response_model=Token,
    responses={
        401: {"description": "Session has no refresh token"},
    },
)
def refresh(
    user: SessionUser = Depends(get_session_user),
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
):
    if not user.refresh_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session cannot be refreshed, sign in again",
        )

    tokens = oauth.refresh(user.refresh_token)
    # Google only sends a new refresh token when it rotates it
    return _issue_session(user.email, user.name, tokens, tokens.get("refresh_token") or user.refresh_token)


@router.get("/me", response_model=Viewer)
def me(current_user: SessionUser = Depends(get_current_user)):
    return current_user
