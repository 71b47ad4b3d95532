# tests/test_listing_fetcher.py
import httpx
import pytest

from auction_relay.infrastructure.parsers import ListingFetcher
from auction_relay.shared.errors import ExtractionError, FetchError

from conftest import listing_html


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_listing_url_template():
    fetcher = ListingFetcher(httpx.AsyncClient(), base_url="https://page.auctions.yahoo.co.jp/", locale="jp")
    assert fetcher.listing_url("x123") == "https://page.auctions.yahoo.co.jp/jp/auction/x123"


@pytest.mark.asyncio
async def test_image_urls_from_listing_page():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text=listing_html([{"image": "https://img.test/1.jpg"}]))

    async with _client(handler) as client:
        urls = await ListingFetcher(client).image_urls("s112")

    assert urls == ("https://img.test/1.jpg",)
    assert seen == ["https://page.auctions.yahoo.co.jp/jp/auction/s112"]


@pytest.mark.asyncio
async def test_each_call_refetches_page():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, text=listing_html([]))

    async with _client(handler) as client:
        fetcher = ListingFetcher(client)
        await fetcher.image_urls("a1")
        await fetcher.image_urls("a1")

    assert len(calls) == 2


@pytest.mark.asyncio
async def test_non_success_status_is_fetch_error():
    async with _client(lambda request: httpx.Response(404, text="gone")) as client:
        with pytest.raises(FetchError) as exc_info:
            await ListingFetcher(client).image_urls("x1")

    assert exc_info.value.http_status == 404
    assert exc_info.value.url.endswith("/jp/auction/x1")


@pytest.mark.asyncio
async def test_transport_failure_is_fetch_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    async with _client(handler) as client:
        with pytest.raises(FetchError) as exc_info:
            await ListingFetcher(client).fetch_html("x1")

    assert exc_info.value.http_status is None


@pytest.mark.asyncio
async def test_page_without_embedded_data():
    async with _client(lambda request: httpx.Response(200, text="<html></html>")) as client:
        with pytest.raises(ExtractionError):
            await ListingFetcher(client).image_urls("x1")


@pytest.mark.asyncio
async def test_unexpected_structure_is_empty(caplog):
    async with _client(lambda request: httpx.Response(200, text=listing_html())) as client:
        with caplog.at_level("WARNING", logger="auction_relay"):
            urls = await ListingFetcher(client).image_urls("x1")

    assert urls == ()
    assert "Expected JSON structure not found" in caplog.text
