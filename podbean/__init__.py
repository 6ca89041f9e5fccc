"""
Podbean API client library.

This library provides an asynchronous client for the Podbean API: OAuth2
authorization and token refresh, client-side rate limiting, and typed access
to podcasts, episodes and media.
"""

from .config import PodbeanConfig, load_config
from .errors import (
    ApiError,
    AuthError,
    DecodeError,
    PodbeanError,
    RateLimitError,
    TransportError,
)
from .podbean import PodbeanClient
from .rate_limiter import RateLimiter
from .token_manager import TokenManager
from .types import (
    Credentials,
    Episode,
    EpisodeList,
    EpisodeStatus,
    EpisodeType,
    MediaFormat,
    MediaItem,
    MediaList,
    Podcast,
    PodcastList,
    Token,
    UploadAuthorization,
)

__all__ = [
    "PodbeanClient",
    "PodbeanConfig",
    "load_config",
    "RateLimiter",
    "TokenManager",
    "Credentials",
    "Token",
    "Podcast",
    "PodcastList",
    "Episode",
    "EpisodeList",
    "EpisodeStatus",
    "EpisodeType",
    "MediaItem",
    "MediaList",
    "MediaFormat",
    "UploadAuthorization",
    "PodbeanError",
    "ApiError",
    "AuthError",
    "DecodeError",
    "RateLimitError",
    "TransportError",
]
