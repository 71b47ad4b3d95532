# tests/test_auction_job_service.py
import pytest

from auction_relay.domain.auction import ImageRecord, UploadManifest, image_file_name
from auction_relay.infrastructure.services import AuctionJobService
from auction_relay.infrastructure.url import AuctionIdResolver, FromJapanUrlStrategy
from auction_relay.shared.errors import DownloadError, UnsupportedSource


# ─────────────────────────────────────────────────────────────────────
# 🔧 Заглушки адаптерів
# ─────────────────────────────────────────────────────────────────────
class _FetcherStub:
    def __init__(self, urls):
        self.urls = tuple(urls)
        self.ids = []

    async def image_urls(self, auction_id):
        self.ids.append(auction_id)
        return self.urls


class _DownloaderStub:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def download_all(self, urls, destination):
        self.calls.append((tuple(urls), destination))
        if self.fail:
            raise DownloadError(urls[0], "http_status")
        return [ImageRecord(i, url, destination / image_file_name(i)) for i, url in enumerate(urls)]


class _UploaderStub:
    def __init__(self):
        self.request_ids = []

    async def upload(self, request_id):
        self.request_ids.append(request_id)
        return UploadManifest(folder_number=1, file_count=1, final_path_template="s3://b/images/1/image0.jpg")


def _service(fetcher, downloader, tmp_path, **kwargs) -> AuctionJobService:
    return AuctionJobService(
        AuctionIdResolver([FromJapanUrlStrategy()]),
        fetcher,
        downloader,
        files_root=tmp_path,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_run_resolves_fetches_and_downloads(tmp_path):
    fetcher = _FetcherStub(["https://img.test/1.jpg", "https://img.test/2.jpg"])
    downloader = _DownloaderStub()

    result = await _service(fetcher, downloader, tmp_path).run("r1", "https://host/auction/input/s112/")

    assert fetcher.ids == ["s112"]
    assert downloader.calls == [(("https://img.test/1.jpg", "https://img.test/2.jpg"), tmp_path / "r1")]
    assert [img.file_name for img in result.images] == ["image1.jpg", "image2.jpg"]
    assert result.reference.canonical_id == "s112"
    assert result.manifest is None
    assert not result.soft_empty


@pytest.mark.asyncio
async def test_empty_image_list_skips_download(tmp_path):
    downloader = _DownloaderStub()

    result = await _service(_FetcherStub([]), downloader, tmp_path).run("r1", "https://host/input/s1")

    assert result.soft_empty
    assert downloader.calls == []


@pytest.mark.asyncio
async def test_unsupported_url_stops_before_network(tmp_path):
    fetcher = _FetcherStub(["https://img.test/1.jpg"])

    with pytest.raises(UnsupportedSource):
        await _service(fetcher, _DownloaderStub(), tmp_path).run("r1", "https://example.com/x")
    assert fetcher.ids == []


@pytest.mark.asyncio
async def test_download_error_propagates_without_upload(tmp_path):
    uploader = _UploaderStub()
    service = _service(
        _FetcherStub(["https://img.test/1.jpg"]),
        _DownloaderStub(fail=True),
        tmp_path,
        uploader=uploader,
        upload_after_download=True,
    )

    with pytest.raises(DownloadError):
        await service.run("r1", "https://host/input/s1")
    assert uploader.request_ids == []


@pytest.mark.asyncio
async def test_optional_in_process_upload(tmp_path):
    uploader = _UploaderStub()
    service = _service(
        _FetcherStub(["https://img.test/1.jpg"]),
        _DownloaderStub(),
        tmp_path,
        uploader=uploader,
        upload_after_download=True,
    )

    result = await service.run("r1", "https://host/input/s1")

    assert uploader.request_ids == ["r1"]
    assert result.manifest.counter == 1
