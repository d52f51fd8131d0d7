import logging
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from classroom_progress.clients.classroom import GoogleAPIError
from classroom_progress.core.config import (
    GOOGLE_AUTH_URL,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_SCOPES,
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
    OAUTH_REDIRECT_URI,
    REQUEST_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class GoogleOAuthClient:
    """Authorization-code flow against Google's OAuth endpoints."""

    def __init__(
        self,
        client_id: str = GOOGLE_CLIENT_ID,
        client_secret: str = GOOGLE_CLIENT_SECRET,
        redirect_uri: str = OAUTH_REDIRECT_URI,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def _request(self, method: str, url: str, **kwargs) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=REQUEST_TIMEOUT_SECONDS, transport=self._transport) as http:
                res = http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("OAuth request to %s failed: %s", url, exc)
            raise GoogleAPIError(502, "Google OAuth unreachable", str(exc)) from exc

        if res.is_error:
            logger.warning("OAuth request to %s -> %s", url, res.status_code)
            raise GoogleAPIError(res.status_code, "Google OAuth error", res.text)
        return res.json()

    def exchange_code(self, code: str) -> dict[str, Any]:
        return self._request(
            "POST",
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
        )

    def refresh(self, refresh_token: str) -> dict[str, Any]:
        return self._request(
            "POST",
            GOOGLE_TOKEN_URL,
            data={
                "refresh_token": refresh_token,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "refresh_token",
            },
        )

    def userinfo(self, access_token: str) -> dict[str, Any]:
        return self._request(
            "GET",
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
