# 📥 auction_relay/infrastructure/downloads/image_downloader.py
"""
📥 Послідовне асинхронне скачування фото лоту в робочий каталог задачі.

🔹 Стримить відповіді через `httpx` у тимчасовий `.part` і атомарно замінює ціль.
🔹 Імена файлів `image{index+1}.jpg` - щільні та 1-based у порядку списку.
🔹 Перша ж помилка зупиняє партію (`DownloadError`); ретраїв немає.
🔹 Метрики Prometheus за результатом кожного скачування.
🔹 Чанки пишуться через `aiofiles`, таймаут `download.timeout_s` - на кожен запит.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles														# 💽 Асинхронний запис чанків
import httpx															# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import logging															# 🧾 Логування результатів
import os																# 📁 Атомарна заміна файлів
import tempfile														# 🧪 Тимчасові файли
from pathlib import Path												# 🛤️ Шляхи до файлів
from typing import List, NoReturn, Optional, Sequence										# 🧰 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.domain.auction.entities import ImageRecord, image_file_name
from auction_relay.shared.errors import DownloadError					# 🚨 Помилка скачування
from auction_relay.shared.metrics import inc_download					# 📈 Метрики
from auction_relay.shared.utils.logger import LOG_NAME					# 🏷️ Ім'я базового логера

logger = logging.getLogger(f"{LOG_NAME}.downloader")


# ================================
# 🏷️ ПРИЧИНИ ЗБОЮ
# ================================
REASON_HTTP_STATUS = "http_status"										# 🌐 Не-2xx
REASON_TRANSPORT = "transport"											# 🔌 Збій з'єднання / таймаут
REASON_TOO_LARGE = "too_large"											# 📏 Перевищено ліміт
REASON_EMPTY_BODY = "empty_body"										# 🕳️ Порожнє тіло
REASON_IO_ERROR = "io_error"											# 💽 Файлова помилка


# ================================
# 📥 ЗАВАНТАЖУВАЧ
# ================================
class ImageDownloader:
    """📥 Скачує список URL у каталог, зберігаючи порядок."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        max_bytes: int = 20 * 1024 * 1024,
        chunk_size: int = 64 * 1024,
        timeout_s: float = 30.0,
    ) -> None:
        self._client = client
        self.timeout = httpx.Timeout(float(timeout_s))
        self.max_bytes = int(max_bytes)
        self.chunk_size = int(chunk_size)

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def download_all(self, urls: Sequence[str], destination: Path) -> List[ImageRecord]:
        """
        Скачує кожен URL по черзі у `destination/image{i+1}.jpg`.

        Raises:
            DownloadError: на першому ж невдалому скачуванні (решта не виконується).
        """
        destination = Path(destination)
        try:
            destination.mkdir(parents=True, exist_ok=True)				# 🧱 Разом з батьківськими сегментами
        except OSError as exc:
            raise DownloadError(str(destination), REASON_IO_ERROR, details=str(exc)) from exc

        records: List[ImageRecord] = []
        for index, url in enumerate(urls):
            target = destination / image_file_name(index)
            await self.download(url, target)
            records.append(ImageRecord(index=index, source_url=url, local_path=target))
            logger.info("🖼️ Image %d downloaded and saved → %s", index + 1, target)
        return records

    async def download(self, img_url: str, output_path: Path) -> int:
        """💾 Скачує один URL у файл; повертає кількість записаних байтів."""
        try:
            async with self._client.stream("GET", img_url, timeout=self.timeout) as response:
                if not response.is_success:
                    self._fail(img_url, REASON_HTTP_STATUS, f"HTTP {response.status_code}")
                return await self._stream_to_disk(response, img_url=img_url, output_path=Path(output_path))
        except httpx.HTTPError as exc:
            self._fail(img_url, REASON_TRANSPORT, str(exc), cause=exc)

    # ================================
    # 💾 СТРИМІНГ НА ДИСК
    # ================================
    async def _stream_to_disk(self, response: httpx.Response, *, img_url: str, output_path: Path) -> int:
        """💾 Пише у тимчасовий файл поруч із ціллю та атомарно підміняє її."""
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=output_path.name + ".",
                suffix=".part",
                dir=str(output_path.parent),
            )
            os.close(fd)
        except OSError as exc:
            self._fail(img_url, REASON_IO_ERROR, str(exc), cause=exc)
        tmp_path = Path(tmp_name)

        bytes_written = 0
        try:
            async with aiofiles.open(tmp_path, "wb") as file_handle:
                async for chunk in response.aiter_bytes(self.chunk_size):
                    if not chunk:
                        continue
                    bytes_written += len(chunk)
                    if bytes_written > self.max_bytes:
                        self._fail(img_url, REASON_TOO_LARGE, f"{bytes_written} B > {self.max_bytes} B")
                    await file_handle.write(chunk)

            if bytes_written == 0:
                self._fail(img_url, REASON_EMPTY_BODY)

            os.replace(tmp_path, output_path)							# 🔁 Атомарно підміняємо файл
        except OSError as exc:
            self._fail(img_url, REASON_IO_ERROR, str(exc), cause=exc)
        finally:
            tmp_path.unlink(missing_ok=True)							# 🧹 Після replace файла вже немає

        inc_download("ok")
        logger.debug("💾 %s → %s (%d B)", img_url, output_path, bytes_written)
        return bytes_written

    # ================================
    # 🛡️ ДОПОМІЖНЕ
    # ================================
    @staticmethod
    def _fail(img_url: str, reason: str, details: str = "", *, cause: Optional[BaseException] = None) -> NoReturn:
        logger.error(
            "❌ Не вдалося скачати %s (%s) %s",
            img_url,
            reason,
            details,
            extra={"download_error": reason},
        )
        inc_download(reason)
        raise DownloadError(img_url, reason, details=details or None) from cause


__all__ = ["ImageDownloader"]
