"""
Data types for Podbean API resources and responses.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class EpisodeStatus(str, Enum):
    """Publication status of an episode."""

    PUBLISH = "publish"
    DRAFT = "draft"
    FUTURE = "future"


class EpisodeType(str, Enum):
    """Visibility of an episode."""

    PUBLIC = "public"
    PREMIUM = "premium"
    PRIVATE = "private"


class MediaFormat(str, Enum):
    """Audio formats accepted for media uploads."""

    MP3 = "audio/mp3"
    M4A = "audio/m4a"
    OGG = "audio/ogg"


def enum_value(value: Union[str, Enum, None]) -> Optional[str]:
    """Return the wire value for an enum member or plain string."""
    if isinstance(value, Enum):
        return str(value.value)
    return value


@dataclass(frozen=True)
class Credentials:
    """OAuth client credentials of a Podbean API application."""

    client_id: str
    client_secret: str = field(repr=False)


@dataclass(frozen=True)
class Token:
    """OAuth access token held by a client."""

    access_token: str
    expires_at: float
    token_type: str = "Bearer"
    refresh_token: Optional[str] = field(default=None, repr=False)
    scope: Optional[str] = None

    @staticmethod
    def from_token_response(payload: Dict[str, Any], *, now: Optional[float] = None) -> "Token":
        """Convert a token endpoint response into a Token.

        Podbean returns access_token, token_type, expires_in (seconds),
        scope and, for refreshable grants, refresh_token.

        Raises:
            KeyError: If access_token or expires_in is missing
            TypeError: If expires_in is null
            ValueError: If access_token is empty or expires_in is not numeric
        """
        access_token = str(payload["access_token"] or "")
        if not access_token:
            raise ValueError("empty access_token")

        now_ts = float(time.time() if now is None else now)
        return Token(
            access_token=access_token,
            expires_at=now_ts + float(payload["expires_in"]),
            token_type=str(payload.get("token_type") or "Bearer"),
            refresh_token=payload.get("refresh_token"),
            scope=payload.get("scope"),
        )

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Token":
        return Token(
            access_token=str(data["access_token"]),
            expires_at=float(data["expires_at"]),
            token_type=str(data.get("token_type") or "Bearer"),
            refresh_token=data.get("refresh_token"),
            scope=data.get("scope"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_at": self.expires_at,
            "refresh_token": self.refresh_token,
            "scope": self.scope,
        }

    def is_expired(self, now: Optional[float] = None, margin: float = 300.0) -> bool:
        """Check whether the token is expired or within `margin` seconds of expiry."""
        now_ts = time.time() if now is None else now
        return now_ts >= self.expires_at - margin

    @property
    def authorization(self) -> str:
        """Value for the Authorization header."""
        return f"{self.token_type} {self.access_token}"


@dataclass
class Podcast:
    """Podcast owned by the authenticated account."""

    podcast_id: str
    title: str
    description: str = ""
    logo: str = ""
    url: str = ""
    category: str = ""
    subcategory: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Podcast":
        return Podcast(
            podcast_id=str(data["podcast_id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            logo=data.get("logo", ""),
            url=data.get("url", ""),
            category=data.get("category", ""),
            subcategory=data.get("subcategory"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "podcast_id": self.podcast_id,
            "title": self.title,
            "description": self.description,
            "logo": self.logo,
            "url": self.url,
            "category": self.category,
            "subcategory": self.subcategory,
        }


@dataclass
class Episode:
    """Podcast episode.

    See https://developers.podbean.com/podbean-api-docs/#EpisodeObject
    """

    id: str
    podcast_id: str
    title: str
    content: str = ""
    media_url: str = ""
    player_url: str = ""
    permalink_url: str = ""
    publish_time: int = 0
    duration: Optional[int] = None
    status: str = ""
    episode_type: str = ""
    transcripts_url: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Episode":
        duration = data.get("duration")
        return Episode(
            id=str(data["id"]),
            podcast_id=str(data["podcast_id"]),
            title=data["title"],
            content=data.get("content", ""),
            media_url=data.get("media_url", ""),
            player_url=data.get("player_url", ""),
            permalink_url=data.get("permalink_url", ""),
            publish_time=int(data.get("publish_time") or 0),
            duration=int(duration) if duration is not None else None,
            status=data.get("status", ""),
            # wire name is "type"
            episode_type=data.get("type", ""),
            transcripts_url=data.get("transcripts_url"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "podcast_id": self.podcast_id,
            "title": self.title,
            "content": self.content,
            "media_url": self.media_url,
            "player_url": self.player_url,
            "permalink_url": self.permalink_url,
            "publish_time": self.publish_time,
            "duration": self.duration,
            "status": self.status,
            "type": self.episode_type,
            "transcripts_url": self.transcripts_url,
        }

    def publish_datetime(self) -> Optional[datetime]:
        """Get the publish time as a datetime."""
        if self.publish_time:
            return datetime.fromtimestamp(self.publish_time)
        return None


@dataclass
class MediaItem:
    """Media file in the account's media library."""

    media_key: str
    title: str
    media_url: str = ""
    content: str = ""
    status: str = ""
    created_at: str = ""
    logo_url: Optional[str] = None
    player_url: Optional[str] = None
    publish_time: Optional[str] = None
    duration: Optional[int] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MediaItem":
        duration = data.get("duration")
        return MediaItem(
            media_key=str(data["media_key"]),
            title=data.get("title", ""),
            media_url=data.get("media_url", ""),
            content=data.get("content", ""),
            status=data.get("status", ""),
            created_at=str(data.get("created_at", "")),
            logo_url=data.get("logo_url"),
            player_url=data.get("player_url"),
            publish_time=data.get("publish_time"),
            duration=int(duration) if duration is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "media_key": self.media_key,
            "title": self.title,
            "media_url": self.media_url,
            "content": self.content,
            "status": self.status,
            "created_at": self.created_at,
            "logo_url": self.logo_url,
            "player_url": self.player_url,
            "publish_time": self.publish_time,
            "duration": self.duration,
        }


def _list_items(data: Union[Dict[str, Any], List[Any]], key: str) -> List[Dict[str, Any]]:
    # Endpoints return {"count": ..., key: [...]}; a bare array is accepted too.
    items = data if isinstance(data, list) else data[key]
    if not isinstance(items, list):
        raise TypeError(f"expected a list under {key!r}, got {type(items).__name__}")
    return items


def _list_count(data: Union[Dict[str, Any], List[Any]], items: List[Any]) -> int:
    if isinstance(data, dict) and data.get("count") is not None:
        return int(data["count"])
    return len(items)


def _has_more(data: Union[Dict[str, Any], List[Any]]) -> bool:
    return bool(isinstance(data, dict) and data.get("has_more"))


@dataclass
class PodcastList:
    count: int
    podcasts: List[Podcast] = field(default_factory=list)

    @staticmethod
    def from_dict(data: Union[Dict[str, Any], List[Any]]) -> "PodcastList":
        items = _list_items(data, "podcasts")
        return PodcastList(
            count=_list_count(data, items),
            podcasts=[Podcast.from_dict(item) for item in items],
        )


@dataclass
class EpisodeList:
    count: int
    episodes: List[Episode] = field(default_factory=list)
    has_more: bool = False

    @staticmethod
    def from_dict(data: Union[Dict[str, Any], List[Any]]) -> "EpisodeList":
        items = _list_items(data, "episodes")
        return EpisodeList(
            count=_list_count(data, items),
            episodes=[Episode.from_dict(item) for item in items],
            has_more=_has_more(data),
        )


@dataclass
class MediaList:
    count: int
    media: List[MediaItem] = field(default_factory=list)
    has_more: bool = False

    @staticmethod
    def from_dict(data: Union[Dict[str, Any], List[Any]]) -> "MediaList":
        items = _list_items(data, "media")
        return MediaList(
            count=_list_count(data, items),
            media=[MediaItem.from_dict(item) for item in items],
            has_more=_has_more(data),
        )


@dataclass
class UploadAuthorization:
    """Presigned upload slot returned by /files/uploadAuthorize."""

    presigned_url: str
    file_key: str
    expire_at: Optional[int] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "UploadAuthorization":
        expire_at = data.get("expire_at")
        return UploadAuthorization(
            presigned_url=str(data["presigned_url"]),
            file_key=str(data["file_key"]),
            expire_at=int(expire_at) if expire_at is not None else None,
        )
