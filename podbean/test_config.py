"""
Tests for configuration loading.
"""

import json

import pytest

from podbean import PodbeanClient, PodbeanConfig, load_config
from podbean.config import DEFAULT_BASE_URL


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "podbean": {"client_id": "abc", "client_secret": "def"},
        "rate_limit": {"requests_per_minute": 10, "window": 30, "blocking": False},
        "request_timeout": 5,
    }))

    config = load_config(path)

    assert config.client_id == "abc"
    assert config.client_secret == "def"
    assert config.base_url == DEFAULT_BASE_URL
    assert config.requests_per_minute == 10
    assert config.rate_limit_window == 30
    assert config.block_on_rate_limit is False
    assert config.request_timeout == 5
    assert config.token_expiry_margin == 300.0


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")


def test_client_from_config():
    config = PodbeanConfig(
        client_id="abc",
        client_secret="def",
        base_url="https://podbean.test/v1/",
        requests_per_minute=7,
        block_on_rate_limit=False,
    )

    client = PodbeanClient.from_config(config)

    assert client.credentials.client_id == "abc"
    assert client.base_url == "https://podbean.test/v1"
    assert client.rate_limiter.max_calls == 7
    assert client.rate_limiter.blocking is False
    assert client.token is None


def test_load_config_overrides(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "podbean": {"client_id": "abc", "client_secret": "def", "base_url": "https://podbean.test/v1"},
        "token_expiry_margin": 60,
    }))

    config = load_config(path)

    assert config.base_url == "https://podbean.test/v1"
    assert config.token_expiry_margin == 60
    assert config.requests_per_minute == 60
    assert config.block_on_rate_limit is True
