"""OAuth client-credentials tokens for the WorldCat Search API."""
from __future__ import annotations

import base64
import logging
import time
from typing import Any, Callable, Optional

import requests

from ..config.settings import ConfigurationError
from ..domain.records import Oclc2IiifError

LOGGER = logging.getLogger(__name__)

DEFAULT_TOKEN_URL = "https://oauth.oclc.org/token"
EXPIRY_MARGIN = 30.0


class AuthError(Oclc2IiifError):
    """Raised when no access token could be obtained."""


class TokenProvider:
    """Fetches a token on first use and reuses it until it expires."""

    def __init__(
        self,
        api_key: str | None,
        *,
        token_url: str = DEFAULT_TOKEN_URL,
        scope: str = "wcapi",
        timeout: float = 30,
        session: Any = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.api_key = api_key
        self.token_url = token_url
        self.scope = scope
        self.timeout = timeout
        self.session = session or requests
        self.clock = clock
        self._access_token: Optional[str] = None
        self._expires_at: Optional[float] = None

    def token(self) -> str:
        if self._access_token is None or self._expired():
            self._access_token, self._expires_at = self._request_token()
        return self._access_token

    def reset(self) -> None:
        self._access_token = None
        self._expires_at = None

    def _expired(self) -> bool:
        return self._expires_at is not None and self.clock() >= self._expires_at

    def _request_token(self) -> tuple[str, Optional[float]]:
        if not self.api_key:
            raise ConfigurationError("No API key found in environmental variables (OCLC_SEARCH_API_TOKEN)")
        credentials = base64.b64encode(self.api_key.encode("utf-8")).decode("ascii")
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
            "Authorization": f"Basic {credentials}",
        }
        body = f"grant_type=client_credentials&scope={self.scope}"
        LOGGER.debug("Requesting access token from %s", self.token_url)
        try:
            resp = self.session.post(self.token_url, headers=headers, data=body, timeout=self.timeout)
            payload = resp.json()
        except requests.RequestException as exc:
            raise AuthError(f"Token request failed: {exc}") from exc
        except ValueError as exc:
            raise AuthError("Token response is not valid JSON") from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise AuthError(f"Could not fetch access token: {payload}")
        expires_at: Optional[float] = None
        expires_in = payload.get("expires_in")
        if isinstance(expires_in, (int, float)):
            expires_at = self.clock() + max(0.0, float(expires_in) - EXPIRY_MARGIN)
        LOGGER.info("Obtained catalog access token")
        return str(access_token), expires_at


_DEFAULT_PROVIDER: Optional[TokenProvider] = None


def default_token_provider(api_key: str | None, **kwargs: Any) -> TokenProvider:
    """Return the process-wide provider, creating it on the first call."""
    global _DEFAULT_PROVIDER
    if _DEFAULT_PROVIDER is None:
        _DEFAULT_PROVIDER = TokenProvider(api_key, **kwargs)
    return _DEFAULT_PROVIDER
