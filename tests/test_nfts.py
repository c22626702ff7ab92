import threading
import time

import httpx
from fastapi.testclient import TestClient

import api.nft
from config.settings import Settings
from core.marketplace import ImagePayload
from core.nft import TOKEN_ID_PATTERN
from main import create_app
from models.nft import NFT, NFTStatus

from tests.conftest import IPFS_HASH, JPEG_BYTES


def test_mint_nft(client, db, mint, pinata):
    data = mint()

    assert data["tokenId"].startswith("NFT_")
    assert TOKEN_ID_PATTERN.match(data["tokenId"])
    assert data["title"] == "Sunset"
    assert data["price"] == 15.5
    assert data["creator"] == "u1"
    assert data["owner"] == "u1"
    assert data["ipfsHash"] == IPFS_HASH
    assert data["imageUrl"] == f"https://gateway.pinata.cloud/ipfs/{IPFS_HASH}"
    assert "status" not in data

    stored = db.query(NFT).filter(NFT.token_id == data["tokenId"]).one()
    assert stored.status == NFTStatus.AVAILABLE
    assert stored.owner == "u1"
    assert stored.views == 0
    assert len(pinata.requests) == 1


def test_mint_sends_image_to_pinata(client, mint, pinata):
    mint()
    request = pinata.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/pinning/pinFileToIPFS"
    assert request.headers["pinata_api_key"] == "test-key"
    assert request.headers["pinata_secret_api_key"] == "test-secret"
    assert b'filename="sunset.jpg"' in request.content
    assert JPEG_BYTES in request.content


def test_mint_without_image_rejected(client, db, pinata):
    resp = client.post(
        "/api/nfts/mint",
        data={"title": "Sunset", "description": "d", "price": "15.5", "category": "landscape", "creator": "u1"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["message"] == "Image file is required"
    assert db.query(NFT).count() == 0
    assert pinata.requests == []


def test_mint_missing_fields_rejected(client, db, pinata):
    for missing in ("title", "description", "price", "category"):
        form = {"title": "Sunset", "description": "d", "price": "15.5", "category": "landscape", "creator": "u1"}
        del form[missing]
        resp = client.post(
            "/api/nfts/mint",
            data=form,
            files={"image": ("sunset.jpg", JPEG_BYTES, "image/jpeg")},
        )
        assert resp.status_code == 400, missing
        assert missing in resp.json()["message"]

    assert db.query(NFT).count() == 0
    assert pinata.requests == []


def test_mint_invalid_price_rejected(client, db):
    resp = client.post(
        "/api/nfts/mint",
        data={"title": "Sunset", "description": "d", "price": "free", "category": "landscape", "creator": "u1"},
        files={"image": ("sunset.jpg", JPEG_BYTES, "image/jpeg")},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "price must be a positive number"
    assert db.query(NFT).count() == 0


def test_mint_non_image_rejected(client, db, pinata):
    resp = client.post(
        "/api/nfts/mint",
        data={"title": "Doc", "description": "d", "price": "1", "category": "misc", "creator": "u1"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Only image files are allowed"
    assert db.query(NFT).count() == 0
    assert pinata.requests == []


def test_mint_oversized_image_rejected(client, db, pinata):
    big = b"\xff\xd8" + b"\x00" * (10 * 1024 * 1024)
    resp = client.post(
        "/api/nfts/mint",
        data={"title": "Big", "description": "d", "price": "1", "category": "misc", "creator": "u1"},
        files={"image": ("big.jpg", big, "image/jpeg")},
    )
    assert resp.status_code == 413
    assert db.query(NFT).count() == 0
    assert pinata.requests == []


def test_oversized_upload_is_read_only_up_to_limit(pinata, monkeypatch):
    seen = []

    class RecordingPayload(ImagePayload):
        def __init__(self, data, filename, content_type):
            seen.append(len(data))
            super().__init__(data, filename, content_type)

    monkeypatch.setattr(api.nft, "ImagePayload", RecordingPayload)
    settings = Settings(
        DATABASE_URL="sqlite://",
        PINATA_API_KEY="test-key",
        PINATA_SECRET_API_KEY="test-secret",
        MAX_IMAGE_SIZE=1024,
    )
    app = create_app(settings, http_client=httpx.Client(transport=httpx.MockTransport(pinata.handler)))
    with TestClient(app) as client:
        resp = client.post(
            "/api/nfts/mint",
            data={"title": "Big", "description": "d", "price": "1", "category": "misc", "creator": "u1"},
            files={"image": ("big.jpg", b"\xff\xd8" + b"\x00" * 50_000, "image/jpeg")},
        )
        assert resp.status_code == 413
        assert resp.json()["success"] is False
        assert client.get("/api/nfts").json()["data"]["total"] == 0

    assert seen == [1025]
    assert pinata.requests == []


def test_mint_pinning_failure_persists_nothing(client, db, pinata):
    pinata.status_code = 401
    pinata.body = {"error": "Invalid API key"}
    resp = client.post(
        "/api/nfts/mint",
        data={"title": "Sunset", "description": "d", "price": "15.5", "category": "landscape", "creator": "u1"},
        files={"image": ("sunset.jpg", JPEG_BYTES, "image/jpeg")},
    )
    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert "Failed to upload image to IPFS" in resp.json()["message"]
    assert db.query(NFT).count() == 0


def test_list_nfts_newest_first(client, mint):
    first = mint(title="First")
    second = mint(title="Second")

    resp = client.get("/api/nfts")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total"] == 2
    assert [n["tokenId"] for n in data["nfts"]] == [second["tokenId"], first["tokenId"]]


def test_list_available_excludes_sold(client, mint):
    kept = mint(title="Kept")
    sold = mint(title="Sold")
    client.post(
        "/api/payments/complete",
        json={"paymentId": "pay_1", "txid": "tx_1", "tokenId": sold["tokenId"], "buyerId": "buyer"},
    )

    resp = client.get("/api/nfts/available")
    assert resp.status_code == 200
    tokens = [n["tokenId"] for n in resp.json()["data"]["nfts"]]
    assert tokens == [kept["tokenId"]]
    assert all(n["status"] == "available" for n in resp.json()["data"]["nfts"])


def test_get_nft_increments_views(client, mint):
    token_id = mint()["tokenId"]

    for expected in range(1, 4):
        resp = client.get(f"/api/nfts/{token_id}")
        assert resp.status_code == 200
        assert resp.json()["data"]["views"] == expected
        assert resp.json()["data"]["status"] == "available"


def test_get_unknown_nft(client):
    resp = client.get("/api/nfts/NFT_0_missing")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "NFT not found", "data": None}


def test_create_test_nft(client, db, pinata):
    resp = client.get("/api/create-test-nft")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["tokenId"].startswith("NFT_")
    assert data["status"] == "available"
    assert data["imageUrl"] is None
    assert db.query(NFT).count() == 1
    assert pinata.requests == []


def test_slow_pinning_does_not_block_other_requests(client, pinata):
    pinata.delay = 1.5
    result = {}

    def _mint():
        result["resp"] = client.post(
            "/api/nfts/mint",
            data={"title": "Slow", "description": "d", "price": "2", "category": "misc", "creator": "u1"},
            files={"image": ("slow.jpg", JPEG_BYTES, "image/jpeg")},
        )

    worker = threading.Thread(target=_mint)
    worker.start()
    time.sleep(0.3)

    started = time.monotonic()
    resp = client.get("/")
    elapsed = time.monotonic() - started
    worker.join()

    assert resp.status_code == 200
    assert elapsed < 0.5
    assert result["resp"].status_code == 201
