# 🛠️ auction_relay/infrastructure/services/auction_job_service.py
"""
🛠️ AuctionJobService - повний ланцюжок однієї задачі.

🔹 resolve → fetch/extract → download, строго послідовно.
🔹 Опційно (`pipeline.upload_after_download`) - вивантаження у тому ж процесі.
🔹 Помилки ланцюжка піднімаються як є; часткові файли лишаються на диску.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування
import time																# ⏱️ Тривалість задачі
from pathlib import Path												# 🛤️ Корінь файлів
from typing import Optional												# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.domain.auction.entities import JobResult, RequestContext
from auction_relay.infrastructure.downloads.image_downloader import ImageDownloader
from auction_relay.infrastructure.parsers.listing_fetcher import ListingFetcher
from auction_relay.infrastructure.storage.uploader import StorageUploader
from auction_relay.infrastructure.url.resolver import AuctionIdResolver
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.job")


class AuctionJobService:
    """🛠️ Оркеструє резолвер, фетчер, завантажувач і (опційно) аплоадер."""

    def __init__(
        self,
        resolver: AuctionIdResolver,
        fetcher: ListingFetcher,
        downloader: ImageDownloader,
        *,
        files_root: Path,
        uploader: Optional[StorageUploader] = None,
        upload_after_download: bool = False,
    ) -> None:
        self._resolver = resolver
        self._fetcher = fetcher
        self._downloader = downloader
        self._files_root = Path(files_root)
        self._uploader = uploader
        self._upload_after_download = upload_after_download and uploader is not None

    async def run(self, request_id: str, url: str) -> JobResult:
        """
        ▶️ Виконує задачу до кінця або піднімає `AppError`.

        Returns:
            JobResult: посилання на лот, записані файли та (якщо було) маніфест.
        """
        started = time.monotonic()
        context = RequestContext.for_request(self._files_root, request_id)
        reference = self._resolver.resolve(url)
        logger.info("🔗 [%s] %s → %s", request_id, url, reference.canonical_id)

        image_urls = await self._fetcher.image_urls(reference.canonical_id)
        if not image_urls:
            logger.info("📭 [%s] Фото не знайдено - задача завершена без файлів", request_id)
            return JobResult(context=context, reference=reference, images=())

        records = await self._downloader.download_all(image_urls, context.working_directory)

        manifest = None
        if self._upload_after_download:
            manifest = await self._uploader.upload(request_id)

        logger.info(
            "✅ [%s] %d фото за %.2f с",
            request_id,
            len(records),
            time.monotonic() - started,
        )
        return JobResult(context=context, reference=reference, images=tuple(records), manifest=manifest)


__all__ = ["AuctionJobService"]
