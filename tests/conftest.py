"""Shared fixtures: a fake backend behind httpx.MockTransport"""

import json

import httpx
import pytest

from journey import Document, InMemoryStorage, JourneyConfig, JourneyTracker
from journey.dom import Location, Viewport

DEFAULT_BODY = {"success": True, "logId": "log_123", "eventId": "evt_456"}


class FakeBackend:
    """
    Records every request and answers by path suffix

    Routes map a path suffix to (status, body) or to an httpx exception
    class, which is raised for that request.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict = {}

    def route(self, suffix: str, status: int = 200, body=None, error=None):
        self.routes[suffix] = error if error is not None else (status, DEFAULT_BODY if body is None else body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, answer in self.routes.items():
            if request.url.path.endswith(suffix):
                if isinstance(answer, type) and issubclass(answer, Exception):
                    raise answer("simulated failure", request=request)
                status, body = answer
                if isinstance(body, str):
                    return httpx.Response(status, text=body)
                return httpx.Response(status, json=body)
        return httpx.Response(200, json=DEFAULT_BODY)

    def bodies(self, suffix: str = "") -> list[dict]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.url.path.endswith(suffix) and r.content
        ]

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend):
    return httpx.AsyncClient(transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def config():
    return JourneyConfig(project_id="testproj", publishable_key="pk_test")


@pytest.fixture
def document():
    return Document(
        location=Location(pathname="/products"),
        viewport=Viewport(width=1280, height=800),
        referrer="https://google.com/"
    )


@pytest.fixture
def session_storage():
    return InMemoryStorage()


@pytest.fixture
def local_storage():
    return InMemoryStorage()


@pytest.fixture
def tracker(config, document, session_storage, local_storage, client):
    return JourneyTracker(
        config=config,
        document=document,
        session_storage=session_storage,
        local_storage=local_storage,
        client=client
    )
