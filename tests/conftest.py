"""Pytest configuration and fixtures for detakit tests."""

import os
from typing import Callable, List, Tuple

import httpx
import pytest
from dotenv import load_dotenv

from detakit import Deta
from fakes.fake_service import FakeDetaService

# Load environment variables
load_dotenv()

PROJECT_KEY = "a0test_secretkey"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def project_key():
    return PROJECT_KEY


@pytest.fixture
def service():
    """Fresh in-memory Base/Drive service."""
    return FakeDetaService(api_key=PROJECT_KEY)


@pytest.fixture
def deta(service):
    """Deta client wired to the in-memory service."""
    client = Deta(PROJECT_KEY, transport=service.transport())
    yield client
    client.close()


@pytest.fixture
def base(deta):
    return deta.base("users")


@pytest.fixture
def drive(deta):
    return deta.drive("photos")


@pytest.fixture
def make_deta():
    """Build a Deta client around an ad-hoc request handler.

    Returns `(deta, transport)`; `transport.requests` lists what was sent.
    """
    created: List[Deta] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> Tuple[Deta, RecordingTransport]:
        transport = RecordingTransport(handler)
        client = Deta(PROJECT_KEY, transport=transport)
        created.append(client)
        return client, transport

    yield factory
    for client in created:
        client.close()


@pytest.fixture
def seeded_base(base):
    """Base with a handful of user records."""
    base.put(
        [
            {"key": "u1", "name": "Ada", "age": 36, "role": "admin", "profile": {"city": "London"}},
            {"key": "u2", "name": "Alan", "age": 41, "role": "user", "profile": {"city": "Wilmslow"}},
            {"key": "u3", "name": "Grace", "age": 85, "role": "admin", "profile": {"city": "Arlington"}},
            {"key": "u4", "name": "Linus", "age": 17, "role": "user", "profile": {"city": "Helsinki"}},
            {"key": "u5", "name": "Barbara", "age": 29, "role": "guest", "profile": {"city": "Boston"}},
        ]
    )
    return base


@pytest.fixture
def deta_credentials():
    """Live project key from environment."""
    project_key = os.getenv("DETA_PROJECT_KEY")
    if not project_key:
        pytest.skip("DETA_PROJECT_KEY not set")
    return project_key
