"""
Tests for the Podbean data types.
"""

import json

import pytest

from podbean import Credentials, Episode, EpisodeList, MediaList, PodcastList, Token
from podbean.fake_server import episode_payload
from podbean.types import EpisodeStatus, UploadAuthorization, enum_value


def test_episode_json_round_trip():
    episode = Episode.from_dict(episode_payload(1))

    decoded = Episode.from_dict(json.loads(json.dumps(episode.to_dict())))

    assert decoded == episode
    assert decoded.episode_type == "public"
    assert decoded.to_dict()["type"] == "public"


def test_episode_requires_identity_fields():
    data = episode_payload(1)
    del data["id"]

    with pytest.raises(KeyError):
        Episode.from_dict(data)


def test_episode_list_accepts_bare_array():
    episodes = EpisodeList.from_dict([episode_payload(n) for n in range(3)])

    assert episodes.count == 3
    assert [e.id for e in episodes.episodes] == ["ep_0", "ep_1", "ep_2"]
    assert episodes.has_more is False


def test_episode_list_envelope_count_and_has_more():
    episodes = EpisodeList.from_dict({
        "episodes": [episode_payload(1)],
        "count": 42,
        "has_more": True,
    })

    assert episodes.count == 42
    assert episodes.has_more is True


def test_list_rejects_non_list_items():
    with pytest.raises(TypeError):
        MediaList.from_dict({"media": {"media_key": "x"}})


def test_podcast_list_parses_podcasts():
    podcasts = PodcastList.from_dict({
        "podcasts": [{
            "podcast_id": "pod_1",
            "title": "My Show",
            "description": "About things",
            "logo": "https://example.com/logo.png",
            "url": "https://example.podbean.com",
            "category": "Technology",
        }],
        "count": 1,
    })

    assert podcasts.count == 1
    assert podcasts.podcasts[0].title == "My Show"
    assert podcasts.podcasts[0].subcategory is None


def test_token_from_token_response():
    token = Token.from_token_response(
        {"access_token": "at", "token_type": "Bearer", "expires_in": 3600, "refresh_token": "rt"},
        now=1000.0,
    )

    assert token.expires_at == 4600.0
    assert token.refresh_token == "rt"
    assert token.authorization == "Bearer at"


def test_token_from_token_response_without_access_token():
    with pytest.raises(KeyError):
        Token.from_token_response({"expires_in": 3600})

    with pytest.raises(KeyError):
        Token.from_token_response({"access_token": "at"})

    with pytest.raises(TypeError):
        Token.from_token_response({"access_token": "at", "expires_in": None})

    with pytest.raises(ValueError):
        Token.from_token_response({"access_token": "", "expires_in": 3600})


def test_token_expiry_uses_margin():
    token = Token(access_token="at", expires_at=1000.0)

    assert not token.is_expired(now=600.0, margin=300.0)
    assert token.is_expired(now=700.0, margin=300.0)
    assert token.is_expired(now=1000.0, margin=0.0)


def test_token_dict_round_trip():
    token = Token(access_token="at", expires_at=1234.5, refresh_token="rt", scope="podcast_read")

    assert Token.from_dict(token.to_dict()) == token


def test_secrets_are_not_in_repr():
    assert "s3cret" not in repr(Credentials("id", "s3cret"))
    assert "r3fresh" not in repr(Token(access_token="at", expires_at=0.0, refresh_token="r3fresh"))


def test_upload_authorization_from_dict():
    upload = UploadAuthorization.from_dict({
        "presigned_url": "https://upload.example.com/put",
        "expire_at": "1700000000",
        "file_key": "audio/abc.mp3",
    })

    assert upload.file_key == "audio/abc.mp3"
    assert upload.expire_at == 1700000000


def test_enum_value():
    assert enum_value(EpisodeStatus.DRAFT) == "draft"
    assert enum_value("publish") == "publish"
    assert enum_value(None) is None
