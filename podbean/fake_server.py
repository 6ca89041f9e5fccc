"""
In-process stand-in for the Podbean API, used by the test suite.
"""

import asyncio
import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from aiohttp import web

from .types import Token


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: Dict[str, str]
    form: Dict[str, str]
    headers: Dict[str, str]
    body: bytes = b""


@dataclass
class FakePodbean:
    """In-process fake of the Podbean endpoints used by the client."""

    base_url: str = ""
    upload_url: str = ""
    requests: List[RecordedRequest] = field(default_factory=list)
    token_requests: List[Dict[str, str]] = field(default_factory=list)
    uploads: List[RecordedRequest] = field(default_factory=list)

    # Token endpoint behaviour
    token_status: int = 200
    token_delay: float = 0.0
    token_body: Optional[Any] = None
    expires_in: int = 3600
    issue_refresh_token: bool = True

    responses: Dict[Tuple[str, str], Tuple[int, Any, Dict[str, str]]] = field(default_factory=dict)
    upload_status: int = 200

    def respond(self, method: str, path: str, payload: Any, status: int = 200,
                headers: Optional[Dict[str, str]] = None) -> None:
        """Register the response for METHOD /v1<path>."""
        self.responses[(method, path)] = (status, payload, headers or {})

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/v1/oauth/token", self._token)
        app.router.add_put("/upload/{key}", self._upload)
        app.router.add_route("*", "/v1/{tail:.*}", self._api)
        return app

    async def _token(self, request: web.Request) -> web.Response:
        form = dict(await request.post())
        self.token_requests.append(form)
        if self.token_delay:
            await asyncio.sleep(self.token_delay)

        if self.token_body is not None:
            body = self.token_body if isinstance(self.token_body, str) else json.dumps(self.token_body)
            return web.Response(status=self.token_status, text=body, content_type="application/json")

        if self.token_status != 200:
            return web.json_response(
                {"error": "invalid_grant", "error_description": "Invalid authorization code"},
                status=self.token_status,
            )

        n = len(self.token_requests)
        payload = {
            "access_token": f"access-{n}",
            "token_type": "Bearer",
            "expires_in": self.expires_in,
            "scope": "podcast_read episode_publish",
        }
        if self.issue_refresh_token:
            payload["refresh_token"] = f"refresh-{n}"
        return web.json_response(payload)

    async def _upload(self, request: web.Request) -> web.Response:
        self.uploads.append(RecordedRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            form={},
            headers=dict(request.headers),
            body=await request.read(),
        ))
        return web.Response(status=self.upload_status, text="")

    async def _api(self, request: web.Request) -> web.Response:
        form = dict(await request.post()) if request.content_type == "application/x-www-form-urlencoded" else {}
        body = b"" if form else await request.read()
        path = "/" + request.match_info["tail"]
        self.requests.append(RecordedRequest(
            method=request.method,
            path=path,
            query=dict(request.query),
            form=form,
            headers=dict(request.headers),
            body=body,
        ))

        if (request.method, path) not in self.responses:
            return web.json_response(
                {"error": "not_found", "error_description": f"No route for {path}"},
                status=404,
            )

        status, payload, headers = self.responses[(request.method, path)]
        if isinstance(payload, str):
            return web.Response(status=status, text=payload, headers=headers)
        return web.json_response(payload, status=status, headers=headers)


def make_token(expires_in: float = 3600, refresh_token: Optional[str] = "refresh-0",
               access_token: str = "access-0") -> Token:
    return Token(
        access_token=access_token,
        expires_at=time.time() + expires_in,
        refresh_token=refresh_token,
    )


def episode_payload(n: int, podcast_id: str = "podcast_1") -> Dict[str, Any]:
    return {
        "id": f"ep_{n}",
        "podcast_id": podcast_id,
        "title": f"Episode {n}",
        "content": f"<p>Show notes {n}</p>",
        "media_url": f"https://mcdn.podbean.com/ep_{n}.mp3",
        "player_url": f"https://www.podbean.com/player/ep_{n}",
        "permalink_url": f"https://example.podbean.com/e/ep_{n}",
        "publish_time": 1700000000 + n,
        "duration": 600 + n,
        "status": "publish",
        "type": "public",
        "transcripts_url": None,
    }
