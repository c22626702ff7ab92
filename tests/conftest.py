import time

import httpx
import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from main import create_app

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01" + b"\x00" * 64 + b"\xff\xd9"
IPFS_HASH = "QmTestHash1234567890"


class FakePinata:
    """Records pin requests and answers like Pinata's pinFileToIPFS"""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"IpfsHash": IPFS_HASH, "PinSize": len(JPEG_BYTES), "Timestamp": "2024-01-01T00:00:00Z"}
        self.raise_error = None
        self.delay = 0.0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            time.sleep(self.delay)
        if self.raise_error is not None:
            raise self.raise_error
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def pinata():
    return FakePinata()


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        PINATA_API_KEY="test-key",
        PINATA_SECRET_API_KEY="test-secret",
    )


@pytest.fixture
def app(settings, pinata):
    return create_app(settings, http_client=httpx.Client(transport=httpx.MockTransport(pinata.handler)))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client, app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mint(client):
    """Mint an NFT through the API and return the response data"""
    def _mint(**overrides):
        form = {
            "title": "Sunset",
            "description": "Evening over the bay",
            "price": "15.5",
            "category": "landscape",
            "creator": "u1",
        }
        form.update(overrides)
        resp = client.post(
            "/api/nfts/mint",
            data=form,
            files={"image": ("sunset.jpg", JPEG_BYTES, "image/jpeg")},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]
    return _mint
