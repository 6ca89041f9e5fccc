"""
Podbean API client.
"""

import asyncio
import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar, Union
from urllib.parse import urlencode

import aiohttp

from .config import DEFAULT_BASE_URL, PodbeanConfig
from .errors import (
    ApiError,
    AuthError,
    DecodeError,
    RateLimitError,
    TransportError,
    parse_error_body,
)
from .rate_limiter import RateLimiter
from .token_manager import TokenManager
from .types import (
    Credentials,
    Episode,
    EpisodeList,
    EpisodeStatus,
    EpisodeType,
    MediaFormat,
    MediaList,
    PodcastList,
    Token,
    UploadAuthorization,
    enum_value,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Params = Dict[str, Any]


def _clean(params: Optional[Params]) -> Optional[Dict[str, str]]:
    """Drop None values and stringify the rest."""
    if params is None:
        return None
    return {k: str(enum_value(v)) for k, v in params.items() if v is not None}


def _retry_after(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return max(0, int(value.strip()))
    except ValueError:
        return None


class PodbeanClient:
    """Client for the Podbean API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        requests_per_minute: int = 60,
        rate_limit_window: float = 60.0,
        block_on_rate_limit: bool = True,
        timeout: float = 30.0,
        token_expiry_margin: float = 300.0,
        token: Optional[Token] = None,
    ) -> None:
        """Initialize the Podbean client.

        Args:
            client_id: Client ID of your Podbean API application
            client_secret: Client secret of your Podbean API application
            base_url: Base URL for the API
            requests_per_minute: Maximum calls per rate limit window
            rate_limit_window: Length of the rate limit window in seconds
            block_on_rate_limit: Wait for a free slot instead of raising RateLimitError
            timeout: Total timeout for a single HTTP request in seconds
            token_expiry_margin: Refresh tokens this many seconds before they expire
            token: Previously saved token to resume with
        """
        self.credentials = Credentials(client_id=client_id, client_secret=client_secret)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self._tokens = TokenManager(
            self.credentials,
            f"{self.base_url}/oauth/token",
            self._ensure_session,
            expiry_margin=token_expiry_margin,
            token=token,
        )
        self._rate_limiter = RateLimiter(
            requests_per_minute,
            rate_limit_window,
            blocking=block_on_rate_limit,
        )

    @classmethod
    def from_config(cls, config: PodbeanConfig, token: Optional[Token] = None) -> "PodbeanClient":
        """Create a client from a PodbeanConfig."""
        return cls(
            config.client_id,
            config.client_secret,
            config.base_url,
            requests_per_minute=config.requests_per_minute,
            rate_limit_window=config.rate_limit_window,
            block_on_rate_limit=config.block_on_rate_limit,
            timeout=config.request_timeout,
            token_expiry_margin=config.token_expiry_margin,
            token=token,
        )

    async def __aenter__(self) -> "PodbeanClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    @property
    def token(self) -> Optional[Token]:
        """Current OAuth token, for callers that want to persist it."""
        return self._tokens.token

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    # -----------------
    # OAuth
    # -----------------

    def get_authorization_url(self, redirect_uri: str, state: Optional[str] = None) -> str:
        """Build the URL the user visits to grant this application access.

        Args:
            redirect_uri: Where Podbean redirects with the authorization code
            state: Optional opaque value for CSRF protection
        """
        params = {
            "response_type": "code",
            "client_id": self.credentials.client_id,
            "redirect_uri": redirect_uri,
        }
        if state:
            params["state"] = state
        return f"{self.base_url}/dialog/oauth?{urlencode(params)}"

    async def authorize(self, code: str, redirect_uri: str) -> Token:
        """Exchange an authorization code from the OAuth callback for a token.

        Raises:
            AuthError: If Podbean rejects the code
            TransportError: If the token endpoint cannot be reached
        """
        return await self._tokens.authorize(code, redirect_uri)

    async def refresh_token(self) -> Token:
        """Force a token refresh. Normally done automatically on expiry."""
        return await self._tokens.refresh()

    # -----------------
    # Dispatch
    # -----------------

    async def dispatch(
        self,
        method: str,
        path: str,
        params: Optional[Params] = None,
        body: Optional[Any] = None,
        form: Optional[Params] = None,
        decode: Optional[Callable[[Any], T]] = None,
    ) -> Any:
        """Make an authenticated request to the Podbean API.

        Args:
            method: HTTP method
            path: Path below the base URL, e.g. "/episodes"
            params: Query parameters; None values are omitted
            body: JSON request body
            form: Form-encoded request body; None values are omitted
            decode: Converts the parsed JSON response into the result type

        Returns:
            The decoded response, or the parsed JSON if no decoder is given

        Raises:
            AuthError: If not authorized, the refresh fails, or the API returns 401
            RateLimitError: If the local limiter refuses the call or the API returns 429
            ApiError: For any other non-2xx response
            TransportError: If the request could not be sent or completed
            DecodeError: If a 2xx response does not have the expected shape
            ValueError: If both body and form are given
        """
        if body is not None and form is not None:
            raise ValueError("dispatch accepts either a JSON body or form data, not both")

        token = await self._tokens.ensure_valid()
        await self._rate_limiter.admit()

        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": token.authorization,
            "Accept": "application/json",
        }

        logger.debug(f"{method} {path}")
        try:
            async with session.request(
                method,
                url,
                params=_clean(params),
                json=body,
                data=_clean(form),
                headers=headers,
            ) as response:
                status = response.status
                retry_after = response.headers.get("Retry-After")
                text = await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Request failed: {method} {path}", cause=e) from e

        if status == 401:
            message, _ = parse_error_body(text)
            raise AuthError(f"Authentication failed: {message}")

        if status == 429:
            logger.warning(f"Podbean rate limit hit on {method} {path} (Retry-After: {retry_after})")
            raise RateLimitError(retry_after=_retry_after(retry_after))

        if not 200 <= status < 300:
            message, error = parse_error_body(text)
            raise ApiError(status, message, error)

        try:
            data = json.loads(text) if text.strip() else {}
        except ValueError as e:
            raise DecodeError(f"Response to {method} {path} was not JSON", cause=e) from e

        if decode is None:
            return data

        try:
            return decode(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodeError(f"Unexpected response shape for {method} {path}", cause=e) from e

    # -----------------
    # Podcasts
    # -----------------

    async def list_podcasts(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> PodcastList:
        """List podcasts of the authenticated account."""
        return await self.dispatch(
            "GET",
            "/podcasts",
            params={"offset": offset, "limit": limit},
            decode=PodcastList.from_dict,
        )

    # -----------------
    # Episodes
    # -----------------

    async def list_episodes(
        self,
        podcast_id: Optional[str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> EpisodeList:
        """List episodes, optionally of a single podcast.

        Args:
            podcast_id: Only return episodes of this podcast
            offset: Pagination offset
            limit: Number of episodes to return
        """
        return await self.dispatch(
            "GET",
            "/episodes",
            params={"podcast_id": podcast_id, "offset": offset, "limit": limit},
            decode=EpisodeList.from_dict,
        )

    async def get_episode(self, episode_id: str) -> Episode:
        """Get a single episode by ID."""
        return await self.dispatch(
            "GET",
            "/episodes/one",
            params={"id": episode_id},
            decode=lambda data: Episode.from_dict(data.get("episode", data)),
        )

    async def publish_episode(
        self,
        podcast_id: str,
        title: str,
        content: str,
        media_key: str,
        status: Union[str, EpisodeStatus] = EpisodeStatus.PUBLISH,
        episode_type: Union[str, EpisodeType] = EpisodeType.PUBLIC,
        publish_timestamp: Optional[int] = None,
        logo_key: Optional[str] = None,
    ) -> str:
        """Publish a new episode.

        Args:
            podcast_id: Podcast to publish to
            title: Episode title
            content: Description or show notes
            media_key: File key returned by upload_media
            status: publish, draft or future
            episode_type: public, premium or private
            publish_timestamp: Unix time for future publication
            logo_key: File key of an uploaded episode image

        Returns:
            ID of the new episode
        """
        return await self.dispatch(
            "POST",
            "/episodes",
            form={
                "podcast_id": podcast_id,
                "title": title,
                "content": content,
                "media_key": media_key,
                "status": status,
                "type": episode_type,
                "publish_timestamp": publish_timestamp,
                "logo_key": logo_key,
            },
            decode=lambda data: str(data["episode"]["id"]),
        )

    async def update_episode(
        self,
        episode_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        status: Optional[Union[str, EpisodeStatus]] = None,
        episode_type: Optional[Union[str, EpisodeType]] = None,
        publish_timestamp: Optional[int] = None,
    ) -> None:
        """Update fields of an existing episode; None leaves a field unchanged."""
        await self.dispatch(
            "PUT",
            "/episodes",
            form={
                "id": episode_id,
                "title": title,
                "content": content,
                "status": status,
                "type": episode_type,
                "publish_timestamp": publish_timestamp,
            },
        )

    async def delete_episode(self, episode_id: str) -> None:
        """Delete an episode."""
        await self.dispatch("DELETE", "/episodes", params={"id": episode_id})

    # -----------------
    # Media
    # -----------------

    async def list_media(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> MediaList:
        """List files in the account's media library."""
        return await self.dispatch(
            "GET",
            "/medias",
            params={"offset": offset, "limit": limit},
            decode=MediaList.from_dict,
        )

    async def authorize_upload(self, filename: str, filesize: int, content_type: str) -> UploadAuthorization:
        """Request a presigned URL for uploading a media file."""
        return await self.dispatch(
            "GET",
            "/files/uploadAuthorize",
            params={"filename": filename, "filesize": filesize, "content_type": content_type},
            decode=UploadAuthorization.from_dict,
        )

    async def upload_media(self, data: bytes, filename: str, content_type: Union[str, MediaFormat]) -> str:
        """Upload media bytes and return the file key for publish_episode.

        The bytes go straight to the presigned storage URL, without the
        bearer token and outside the API rate limit.
        """
        content_type = enum_value(content_type) or "application/octet-stream"
        upload = await self.authorize_upload(filename, len(data), content_type)
        session = await self._ensure_session()

        logger.debug(f"Uploading {filename} ({len(data)} bytes)")
        try:
            async with session.put(
                upload.presigned_url,
                data=data,
                headers={"Content-Type": content_type},
            ) as response:
                status = response.status
                text = await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Upload of {filename} failed", cause=e) from e

        if not 200 <= status < 300:
            message, error = parse_error_body(text)
            raise ApiError(status, message, error)

        return upload.file_key

    async def upload_media_file(
        self,
        path: Union[str, Path],
        content_type: Optional[Union[str, MediaFormat]] = None,
    ) -> str:
        """Upload a local media file and return its file key."""
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        data = await asyncio.to_thread(path.read_bytes)
        return await self.upload_media(data, path.name, content_type)
