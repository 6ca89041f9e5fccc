"""
Shared fixtures: a local aiohttp application standing in for the Podbean API.
"""

import pytest
from aiohttp.test_utils import TestServer

from podbean import PodbeanClient
from podbean.fake_server import FakePodbean, make_token


@pytest.fixture
async def fake_podbean():
    fake = FakePodbean()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.base_url = str(server.make_url("/v1"))
    fake.upload_url = str(server.make_url("/upload"))
    yield fake
    await server.close()


@pytest.fixture
async def client(fake_podbean):
    """Client holding a valid token."""
    client = PodbeanClient("client-id", "client-secret", fake_podbean.base_url, token=make_token())
    yield client
    await client.close()


@pytest.fixture
async def expired_client(fake_podbean):
    """Client whose token expired a minute ago."""
    client = PodbeanClient("client-id", "client-secret", fake_podbean.base_url, token=make_token(expires_in=-60))
    yield client
    await client.close()
