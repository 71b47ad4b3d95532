# tests/test_api.py
import json

import httpx
import pytest

from auction_relay.api.app import create_app
from auction_relay.api.dispatcher import RequestDispatcher
from auction_relay.config.config_service import ConfigService
from auction_relay.config.setup.container import Container
from auction_relay.shared.errors import QueueFull

from conftest import FakeStorage, listing_html

IMAGES = {
    "https://img.test/1.jpg": b"\xff\xd8one",
    "https://img.test/2.jpg": b"\xff\xd8two",
}
E2E_URL = "https://host/auction/input/s112/"


# ─────────────────────────────────────────────────────────────────────
# 🔧 Фейковий «інтернет»: сторінка лоту, CDN фото та шлюз
# ─────────────────────────────────────────────────────────────────────
class _FakeWeb:
    def __init__(self, listing: str, listing_status: int = 200):
        self.listing = listing
        self.listing_status = listing_status
        self.gateway_calls = []
        self.listing_paths = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host == "page.auctions.yahoo.co.jp":
            self.listing_paths.append(request.url.path)
            return httpx.Response(self.listing_status, text=self.listing)
        if host == "img.test":
            payload = IMAGES.get(str(request.url))
            return httpx.Response(200, content=payload) if payload else httpx.Response(404)
        if host == "localhost" and request.url.path == "/path":
            self.gateway_calls.append((request.headers.get("requestId"), json.loads(request.content)))
            return httpx.Response(200)
        return httpx.Response(418)


def _container(tmp_path, web, storage, **overrides) -> Container:
    config = ConfigService(overrides={"files": {"root": str(tmp_path / "files")}, **overrides})
    return Container(config, transport=httpx.MockTransport(web), storage=storage)


def _client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://relay.test")


# ─────────────────────────────────────────────────────────────────────
# ✅ Наскрізний сценарій
# ─────────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_post_url_downloads_then_uploader_publishes(tmp_path):
    web = _FakeWeb(listing_html([{"image": url} for url in IMAGES]))
    storage = FakeStorage(bucket="team-3-project-3")
    container = _container(tmp_path, web, storage)
    app = create_app(container)

    async with _client(app) as client:
        response = await client.post("/url", json={"url": E2E_URL}, headers={"requestId": "r1"})

    assert response.status_code == 200
    assert "Downloaded 2 image(s) for requestId r1" in response.text
    assert web.listing_paths == ["/jp/auction/s112"]
    directory = tmp_path / "files" / "r1"
    assert (directory / "image1.jpg").read_bytes() == IMAGES["https://img.test/1.jpg"]
    assert (directory / "image2.jpg").read_bytes() == IMAGES["https://img.test/2.jpg"]
    assert storage.objects == {}                                       # вивантаження - окремий крок

    manifest = await container.uploader.upload("r1")
    await container.aclose()

    assert manifest.counter == 2
    assert manifest.keys == ("images/1/image0.jpg", "images/1/image1.jpg")
    assert web.gateway_calls == [
        ("r1", {"final_image_path": "s3://team-3-project-3/images/1/image1.jpg", "requestId": "r1"})
    ]
    assert not directory.exists()


@pytest.mark.asyncio
async def test_in_process_upload_is_reported(tmp_path):
    web = _FakeWeb(listing_html([{"image": "https://img.test/1.jpg"}]))
    storage = FakeStorage(bucket="team-3-project-3", existing=[1, 2])
    container = _container(tmp_path, web, storage, pipeline={"upload_after_download": True})

    async with _client(create_app(container)) as client:
        response = await client.post("/url", json={"url": E2E_URL}, headers={"requestId": "r2"})
    await container.aclose()

    assert response.status_code == 200
    assert "uploaded to s3://team-3-project-3/images/3/image0.jpg" in response.text
    assert len(web.gateway_calls) == 1


@pytest.mark.asyncio
async def test_unexpected_structure_is_soft_success(tmp_path):
    web = _FakeWeb(listing_html())
    container = _container(tmp_path, web, FakeStorage())

    async with _client(create_app(container)) as client:
        response = await client.post("/url", json={"url": E2E_URL}, headers={"requestId": "r1"})
    await container.aclose()

    assert response.status_code == 200
    assert "Expected JSON structure not found" in response.text
    assert not (tmp_path / "files" / "r1").exists()


# ─────────────────────────────────────────────────────────────────────
# 🚨 Відмови
# ─────────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://example.com/item/1", "Unsupported auction source"),
        ("https://www.fromjapan.co.jp/japan/en/", "Auction ID not found in the URL"),
    ],
)
async def test_bad_url_is_422_plain_text(tmp_path, url, expected):
    container = _container(tmp_path, _FakeWeb(listing_html([])), FakeStorage())

    async with _client(create_app(container)) as client:
        response = await client.post("/url", json={"url": url}, headers={"requestId": "r1"})
    await container.aclose()

    assert response.status_code == 422
    assert response.headers["content-type"].startswith("text/plain")
    assert expected in response.text


@pytest.mark.asyncio
async def test_missing_request_id_header_is_rejected(tmp_path):
    container = _container(tmp_path, _FakeWeb(listing_html([])), FakeStorage())

    async with _client(create_app(container)) as client:
        response = await client.post("/url", json={"url": E2E_URL})
    await container.aclose()

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_listing_failure_is_502(tmp_path):
    container = _container(tmp_path, _FakeWeb("gone", listing_status=404), FakeStorage())

    async with _client(create_app(container)) as client:
        response = await client.post("/url", json={"url": E2E_URL}, headers={"requestId": "r1"})
    await container.aclose()

    assert response.status_code == 502
    assert "HTTP 404" in response.text


@pytest.mark.asyncio
async def test_download_failure_is_502_and_keeps_partial_files(tmp_path):
    web = _FakeWeb(listing_html([{"image": "https://img.test/1.jpg"}, {"image": "https://img.test/404.jpg"}]))
    container = _container(tmp_path, web, FakeStorage())

    async with _client(create_app(container)) as client:
        response = await client.post("/url", json={"url": E2E_URL}, headers={"requestId": "r1"})
    await container.aclose()

    assert response.status_code == 502
    assert (tmp_path / "files" / "r1" / "image1.jpg").exists()
    assert not (tmp_path / "files" / "r1" / "image2.jpg").exists()


@pytest.mark.asyncio
async def test_queue_full_sets_retry_after(tmp_path):
    async def overloaded(request_id, url):
        raise QueueFull(3)

    container = _container(tmp_path, _FakeWeb(listing_html([])), FakeStorage())
    app = create_app(container)
    app.state.dispatcher = RequestDispatcher(overloaded)

    async with _client(app) as client:
        response = await client.post("/url", json={"url": E2E_URL}, headers={"requestId": "r1"})
    await container.aclose()

    assert response.status_code == 503
    assert response.headers["retry-after"] == "3"


@pytest.mark.asyncio
async def test_health(tmp_path):
    container = _container(tmp_path, _FakeWeb(listing_html([])), FakeStorage())

    async with _client(create_app(container)) as client:
        response = await client.get("/health")
    await container.aclose()

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "active": 0, "pending": 0}


@pytest.mark.asyncio
async def test_container_applies_configured_timeouts(tmp_path):
    container = _container(
        tmp_path,
        _FakeWeb(listing_html([])),
        FakeStorage(),
        gateway={"timeout_s": 1},
        download={"timeout_s": 4},
    )
    await container.aclose()

    assert container.http_client.timeout.read == 30.0
    assert container.notifier.timeout.read == 1.0
    assert container.downloader.timeout.read == 4.0
