"""
OAuth2 token lifecycle for the Podbean API.
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import aiohttp

from .errors import AuthError, PodbeanError, TransportError, parse_error_body
from .types import Credentials, Token

logger = logging.getLogger(__name__)

SessionGetter = Callable[[], Awaitable[aiohttp.ClientSession]]


class TokenManager:
    """Holds the client's token and performs authorization-code and refresh grants.

    States: unauthenticated (no token), authenticated with a valid token,
    authenticated with an expired token. `authorize` moves to valid,
    time moves valid to expired, `refresh` moves expired back to valid.

    Concurrent callers that find the token expired share a single refresh:
    the first one through the gate performs it, the rest pick up its result.
    """

    def __init__(
        self,
        credentials: Credentials,
        token_url: str,
        get_session: SessionGetter,
        *,
        expiry_margin: float = 300.0,
        token: Optional[Token] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Initialize the token manager.

        Args:
            credentials: OAuth client credentials
            token_url: URL of the OAuth token endpoint
            get_session: Coroutine returning the HTTP session to use
            expiry_margin: Seconds before expiry at which a token counts as expired
            token: Previously saved token to start from
            clock: Wall-clock source, defaults to time.time
        """
        self.credentials = credentials
        self.token_url = token_url
        self.expiry_margin = expiry_margin
        self._get_session = get_session
        self._clock = clock or time.time
        self._token = token
        self._refresh_lock = asyncio.Lock()
        self._refresh_attempts = 0
        self._refresh_error: Optional[PodbeanError] = None

    @property
    def token(self) -> Optional[Token]:
        """The current token, if any."""
        return self._token

    def set_token(self, token: Token) -> None:
        """Replace the current token, e.g. with one restored from storage."""
        self._token = token

    def is_expired(self, token: Token) -> bool:
        return token.is_expired(self._clock(), self.expiry_margin)

    async def authorize(self, code: str, redirect_uri: str) -> Token:
        """Exchange an authorization code for a token.

        Raises:
            AuthError: If the exchange is rejected or the response lacks a token
            TransportError: If the token endpoint cannot be reached
        """
        token = await self._request_token({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        })
        self.set_token(token)
        logger.info("Authorized with Podbean")
        return token

    async def refresh(self) -> Token:
        """Obtain a new token using the stored refresh token.

        Raises:
            AuthError: If there is no refresh token or the exchange fails
            TransportError: If the token endpoint cannot be reached
        """
        async with self._refresh_lock:
            return await self._refresh_locked()

    async def ensure_valid(self) -> Token:
        """Return a usable token, refreshing it first if it has expired.

        Raises:
            AuthError: If the client was never authorized or the refresh fails
            TransportError: If the token endpoint cannot be reached during refresh

        Tasks that waited on a refresh which failed get that same failure.
        """
        token = self._token
        if token is None:
            raise AuthError("Not authenticated")

        if not self.is_expired(token):
            return token

        attempts = self._refresh_attempts
        async with self._refresh_lock:
            current = self._token
            if current is not token and current is not None:
                # refreshed while we were waiting on the gate
                return current

            if self._refresh_attempts != attempts and self._refresh_error is not None:
                # a refresh of this same token failed while we were waiting
                raise self._refresh_error

            return await self._refresh_locked()

    async def _refresh_locked(self) -> Token:
        token = self._token
        if token is None or not token.refresh_token:
            raise AuthError("No refresh token available")

        logger.debug("Refreshing Podbean access token")
        try:
            refreshed = await self._request_token({
                "grant_type": "refresh_token",
                "refresh_token": token.refresh_token,
            })
        except PodbeanError as e:
            logger.warning(f"Token refresh failed: {e}")
            self._refresh_error = e
            self._refresh_attempts += 1
            raise

        self._refresh_attempts += 1

        # Podbean may omit refresh_token on refresh; keep the existing one.
        if not refreshed.refresh_token:
            refreshed = Token(
                access_token=refreshed.access_token,
                expires_at=refreshed.expires_at,
                token_type=refreshed.token_type,
                refresh_token=token.refresh_token,
                scope=refreshed.scope,
            )

        self.set_token(refreshed)
        logger.info("Refreshed Podbean access token")
        return refreshed

    async def _request_token(self, form: Dict[str, str]) -> Token:
        """POST a grant to the token endpoint and parse the response."""
        data = {
            **form,
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
        }
        session = await self._get_session()

        try:
            async with session.post(self.token_url, data=data) as response:
                status = response.status
                text = await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError("Token request failed", cause=e) from e

        if not 200 <= status < 300:
            message, _ = parse_error_body(text)
            raise AuthError(f"Token request rejected (HTTP {status}): {message}")

        try:
            payload: Any = json.loads(text)
        except ValueError as e:
            raise AuthError("Token response was not JSON", cause=e) from e

        if not isinstance(payload, dict):
            raise AuthError(f"Token response was not an object: {payload!r}")

        try:
            return Token.from_token_response(payload, now=self._clock())
        except (KeyError, TypeError, ValueError) as e:
            raise AuthError("Token response is missing required fields", cause=e) from e
