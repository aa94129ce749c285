"""
Shared test fixtures.

The network is replaced by httpx.MockTransport: each test supplies a handler
that receives the outgoing httpx.Request and returns an httpx.Response.
"""
import os
import uuid

import httpx
import pytest

from fareplay.core.http import HttpClient, HttpClientConfig
from fareplay.core.signing import generate_keypair

BASE_URL = "https://discovery.test"
NOW_MS = 1700000000000


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep FAREPLAY_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("FAREPLAY_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def keypair():
    """Fresh Ed25519 keypair"""
    return generate_keypair()


@pytest.fixture
def other_keypair():
    """A second, unrelated keypair"""
    return generate_keypair()


@pytest.fixture
def casino_id():
    return str(uuid.uuid4())


@pytest.fixture
def envelope():
    """Build a standard response envelope."""
    def build(data=None, success=True, error=None, timestamp=NOW_MS):
        body = {"success": success, "timestamp": timestamp}
        if data is not None:
            body["data"] = data
        if error is not None:
            body["error"] = error
        return body
    return build


@pytest.fixture
def make_http_client():
    """
    Build an HttpClient backed by a MockTransport handler.

    Retries default to 0 and backoff to 0ms so tests stay fast; pass
    overrides as keyword arguments.
    """
    def build(handler, **options):
        settings = {"base_url": BASE_URL, "retries": 0, "retry_delay": 0}
        settings.update(options)
        return HttpClient(HttpClientConfig(**settings), transport=httpx.MockTransport(handler))
    return build


@pytest.fixture
def casino_record(casino_id, keypair):
    """Casino metadata as returned by the Discovery Service."""
    return {
        "id": casino_id,
        "name": "Lucky Fare",
        "url": "https://lucky.example.com",
        "publicKey": keypair.public_key,
        "status": "online",
        "metadata": {
            "description": "Provably fair dice",
            "games": ["dice", "slots"],
            "supportedTokens": ["SOL"],
        },
        "createdAt": NOW_MS,
        "updatedAt": NOW_MS,
        "version": "1.0.0",
    }
