# 📤 auction_relay/infrastructure/storage/uploader.py
"""
📤 StorageUploader - вивантажує підготовлені фото задачі в об'єктне сховище.

🔹 Порядок: перелік файлів → номер папки → upload → сповіщення → прибирання.
🔹 Файли впорядковуються за числовим суфіксом `image{N}.jpg`, а не за порядком ФС.
🔹 Ключі: `images/{folder}/image{counter}.jpg`, counter від 0.
🔹 Сповіщення та прибирання ніколи не валять успішне вивантаження.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# 🧵 Файлові операції поза event loop
import logging															# 🧾 Логування
import re																# 🧵 Числовий суфікс імені
from pathlib import Path												# 🛤️ Локальні шляхи
from typing import List, Optional, Tuple								# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.domain.auction.entities import RequestContext, UploadManifest
from auction_relay.domain.auction.interfaces import IFolderAllocator, INotifier, IObjectStorage
from auction_relay.shared.errors import CleanupError, UploadError
from auction_relay.shared.metrics import inc_uploaded
from auction_relay.shared.utils.logger import LOG_NAME
from .folder_allocator import DEFAULT_PREFIX

logger = logging.getLogger(f"{LOG_NAME}.storage.uploader")

_IMAGE_NAME_RE = re.compile(r"^image(\d+)\.jpg$", re.IGNORECASE)


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def staged_sort_key(path: Path) -> Tuple[int, int, str]:
    """`image2.jpg` < `image10.jpg`; файли з іншими іменами - в кінці, за алфавітом."""
    match = _IMAGE_NAME_RE.match(path.name)
    if match:
        return (0, int(match.group(1)), path.name)
    return (1, 0, path.name)


def list_staged_files(directory: Path) -> List[Path]:
    """Звичайні файли каталогу у детермінованому порядку (без `.part`)."""
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and not p.name.endswith(".part")),
        key=staged_sort_key,
    )


def cleanup_files(files: List[Path], directory: Path) -> List[CleanupError]:
    """Видаляє файли по одному; збій одного не зупиняє решту. Порожній каталог теж прибирається."""
    errors: List[CleanupError] = []
    for path in files:
        try:
            path.unlink()
            logger.debug("🧹 Removed local file: %s", path)
        except OSError as exc:
            error = CleanupError(str(path), details=str(exc))
            logger.warning("🧹 %s", error, extra=error.to_log_extra())
            errors.append(error)
    try:
        directory.rmdir()
    except OSError as exc:
        logger.debug("🧹 Каталог %s не видалено: %s", directory, exc)
    return errors


# ================================
# 📤 АПЛОАДЕР
# ================================
class StorageUploader:
    """📤 Аллокація папки, вивантаження, сповіщення та прибирання для однієї задачі."""

    def __init__(
        self,
        storage: IObjectStorage,
        allocator: IFolderAllocator,
        notifier: Optional[INotifier],
        *,
        files_root: Path,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self._storage = storage
        self._allocator = allocator
        self._notifier = notifier
        self._files_root = Path(files_root)
        self._prefix = prefix

    def object_key(self, folder_number: int, counter: int) -> str:
        return f"{self._prefix}{folder_number}/image{counter}.jpg"

    def s3_path(self, key: str) -> str:
        return f"s3://{self._storage.bucket}/{key}"

    async def upload(self, request_id: str) -> UploadManifest:
        """
        Вивантажує всі файли `{files_root}/{request_id}`.

        Raises:
            UploadError: каталогу немає або збій сховища (локальні файли лишаються).
        """
        context = RequestContext.for_request(self._files_root, request_id)
        directory = context.working_directory
        if not directory.is_dir():
            raise UploadError(f"No staged files for requestId {request_id!r}", key=str(directory))

        files = await asyncio.to_thread(list_staged_files, directory)
        if not files:
            logger.info("📭 Немає файлів для вивантаження (request=%s)", request_id)
            return UploadManifest(folder_number=0, file_count=0, final_path_template="")

        allocation = await self._allocator.allocate()
        keys: List[str] = []
        for counter, path in enumerate(files):
            key = self.object_key(allocation.folder_number, counter)
            await self._storage.put_file(key, path)
            keys.append(key)
        inc_uploaded(len(keys))

        final_path = self.s3_path(keys[-1])
        manifest = UploadManifest(
            folder_number=allocation.folder_number,
            file_count=len(keys),
            final_path_template=final_path,
            keys=tuple(keys),
        )
        logger.info(
            "📤 Uploaded %d file(s) to %s%d/ (request=%s)",
            manifest.file_count,
            self._prefix,
            manifest.folder_number,
            request_id,
        )

        try:
            if self._notifier is not None:
                await self._notifier.notify(request_id, final_path)
        finally:
            await asyncio.to_thread(cleanup_files, files, directory)       # 🧹 Файли вже в сховищі
        return manifest


__all__ = ["StorageUploader", "cleanup_files", "list_staged_files", "staged_sort_key"]
