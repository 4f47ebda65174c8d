"""
Shared fixtures: a throwaway P-256 key on disk, settings pointing at it,
and an httpx transport spy that records every outgoing request.
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from customer_review_mcp.config.settings import ConnectSettings
from customer_review_mcp.connect import ConnectClient, TokenIssuer
from customer_review_mcp.tools import RequestDispatcher

KEY_ID = "ABC123DEFG"
ISSUER_ID = "69a6de7f-0000-47e3-e053-5b8c7c11a4d1"


def generate_key_pair() -> tuple[str, str]:
    """Return (private PEM, public PEM) for a fresh P-256 key."""
    key = ec.generate_private_key(ec.SECP256R1())
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


class TransportSpy:
    """
    httpx.MockTransport handler that records requests and replays a
    canned response.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {"data": []}
        self.raw: bytes | None = None
        self.error: Exception | None = None

    def respond(self, status_code: int = 200, body: Any = None, raw: bytes | None = None):
        self.status_code = status_code
        self.body = body
        self.raw = raw

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def key_pair() -> tuple[str, str]:
    return generate_key_pair()


@pytest.fixture
def new_key_pair() -> tuple[str, str]:
    """A second, unrelated key pair for rotation tests."""
    return generate_key_pair()


@pytest.fixture
def key_file(tmp_path: Path, key_pair) -> Path:
    path = tmp_path / f"AuthKey_{KEY_ID}.p8"
    path.write_text(key_pair[0])
    return path


@pytest.fixture
def connect_settings(key_file: Path) -> ConnectSettings:
    return ConnectSettings(
        _env_file=None,
        key_id=KEY_ID,
        issuer_id=ISSUER_ID,
        p8_path=key_file,
    )


@pytest.fixture
def stub_issuer() -> MagicMock:
    issuer = MagicMock(spec=TokenIssuer)
    issuer.issue_token = AsyncMock(return_value="test-token")
    return issuer


@pytest.fixture
def spy() -> TransportSpy:
    return TransportSpy()


@pytest.fixture
def client(connect_settings, stub_issuer, spy) -> ConnectClient:
    return ConnectClient(connect_settings, stub_issuer, transport=httpx.MockTransport(spy))


@pytest.fixture
def dispatcher(client) -> RequestDispatcher:
    return RequestDispatcher(client)
