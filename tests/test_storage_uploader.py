# tests/test_storage_uploader.py
from pathlib import Path

import httpx
import pytest

from auction_relay.infrastructure.notify import GatewayNotifier
from auction_relay.infrastructure.storage import ReservingFolderAllocator, ScanFolderAllocator, StorageUploader
from auction_relay.infrastructure.storage.uploader import cleanup_files, list_staged_files
from auction_relay.shared.errors import UploadError

from conftest import FakeStorage, RecordingNotifier


def _stage(root: Path, request_id: str, names) -> Path:
    directory = root / request_id
    directory.mkdir(parents=True)
    for name in names:
        (directory / name).write_bytes(name.encode())
    return directory


def _uploader(storage, notifier, root, allocator=None) -> StorageUploader:
    return StorageUploader(
        storage,
        allocator or ReservingFolderAllocator(storage),
        notifier,
        files_root=root,
    )


def test_staged_files_sorted_by_numeric_suffix(tmp_path):
    _stage(tmp_path, "r1", ["image10.jpg", "image2.jpg", "image1.jpg", "image3.jpg.part"])
    names = [p.name for p in list_staged_files(tmp_path / "r1")]
    assert names == ["image1.jpg", "image2.jpg", "image10.jpg"]


@pytest.mark.asyncio
async def test_upload_keys_counter_and_notification(tmp_path, notifier):
    storage = FakeStorage(bucket="team-3-project-3", existing=[1, 2])
    directory = _stage(tmp_path, "r1", ["image2.jpg", "image1.jpg"])

    manifest = await _uploader(storage, notifier, tmp_path).upload("r1")

    assert manifest.folder_number == 3
    assert manifest.counter == 2
    assert manifest.keys == ("images/3/image0.jpg", "images/3/image1.jpg")
    assert storage.put_order == [
        ("images/3/image0.jpg", "image1.jpg"),
        ("images/3/image1.jpg", "image2.jpg"),
    ]
    assert storage.objects["images/3/image0.jpg"] == b"image1.jpg"
    assert manifest.final_path_template == "s3://team-3-project-3/images/3/image1.jpg"
    assert notifier.calls == [("r1", "s3://team-3-project-3/images/3/image1.jpg")]
    assert not directory.exists()


@pytest.mark.asyncio
async def test_first_upload_goes_to_folder_one(tmp_path, notifier):
    storage = FakeStorage()
    _stage(tmp_path, "r1", ["image1.jpg"])

    manifest = await _uploader(storage, notifier, tmp_path, ScanFolderAllocator(storage)).upload("r1")

    assert manifest.folder_number == 1
    assert manifest.keys == ("images/1/image0.jpg",)


@pytest.mark.asyncio
async def test_failed_notification_does_not_fail_upload(tmp_path):
    storage = FakeStorage()
    _stage(tmp_path, "r1", ["image1.jpg"])

    manifest = await _uploader(storage, RecordingNotifier(result=False), tmp_path).upload("r1")

    assert manifest.file_count == 1
    assert not (tmp_path / "r1").exists()


@pytest.mark.asyncio
async def test_broken_gateway_url_still_uploads_and_cleans(tmp_path):
    storage = FakeStorage()
    _stage(tmp_path, "r1", ["image1.jpg"])

    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200))) as client:
        notifier = GatewayNotifier(client, url="http://[::1/path")
        manifest = await _uploader(storage, notifier, tmp_path).upload("r1")

    assert manifest.file_count == 1
    assert "images/1/image0.jpg" in storage.objects
    assert not (tmp_path / "r1").exists()


@pytest.mark.asyncio
async def test_cleanup_runs_even_if_notifier_raises(tmp_path):
    class _Exploding:
        async def notify(self, request_id, final_image_path):
            raise RuntimeError("gateway client bug")

    _stage(tmp_path, "r1", ["image1.jpg", "image2.jpg"])

    with pytest.raises(RuntimeError):
        await _uploader(FakeStorage(), _Exploding(), tmp_path).upload("r1")

    assert not (tmp_path / "r1").exists()


@pytest.mark.asyncio
async def test_storage_failure_keeps_local_files(tmp_path, notifier):
    class _Broken(FakeStorage):
        async def put_file(self, key, path):
            raise UploadError("s3 down", key=key)

    directory = _stage(tmp_path, "r1", ["image1.jpg", "image2.jpg"])

    with pytest.raises(UploadError):
        await _uploader(_Broken(), notifier, tmp_path).upload("r1")

    assert sorted(p.name for p in directory.iterdir()) == ["image1.jpg", "image2.jpg"]
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_empty_directory_uploads_nothing(tmp_path, notifier, fake_storage):
    _stage(tmp_path, "r1", [])

    manifest = await _uploader(fake_storage, notifier, tmp_path).upload("r1")

    assert manifest.file_count == 0
    assert manifest.final_path_template == ""
    assert fake_storage.objects == {}
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_missing_directory_is_upload_error(tmp_path, notifier, fake_storage):
    with pytest.raises(UploadError):
        await _uploader(fake_storage, notifier, tmp_path).upload("nope")


def test_cleanup_continues_after_single_failure(tmp_path):
    directory = _stage(tmp_path, "r1", ["image1.jpg", "image3.jpg"])
    files = [directory / "image1.jpg", directory / "image2.jpg", directory / "image3.jpg"]

    errors = cleanup_files(files, directory)

    assert len(errors) == 1
    assert errors[0].path.endswith("image2.jpg")
    assert not directory.exists()
