# 📦 auction_relay/config/setup/container.py
"""
📦 Контейнер залежностей сервісу.

🔹 Створює сервіси в правильному порядку DI на основі `ConfigService`.
🔹 Дозволяє підмінити транспорт httpx, boto3-клієнт або все сховище (тести, локальний запуск).
🔹 Володіє спільним `httpx.AsyncClient` і закриває його в `aclose()`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                             # 🌐 Спільний HTTP-клієнт

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from pathlib import Path                                                 # 🛤️ Корінь файлів
from typing import Any, Dict, Optional                                   # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.api.dispatcher import RequestDispatcher               # 🚦 Admission gate
from auction_relay.config.config_service import ConfigService            # ⚙️ Конфігурація
from auction_relay.domain.auction.interfaces import IFolderAllocator, IObjectStorage
from auction_relay.infrastructure.downloads.image_downloader import ImageDownloader
from auction_relay.infrastructure.notify.gateway_notifier import (
    DEFAULT_GATEWAY_URL,
    DEFAULT_TIMEOUT_S,
    GatewayNotifier,
)
from auction_relay.infrastructure.parsers.listing_fetcher import DEFAULT_BASE_URL, DEFAULT_LOCALE, ListingFetcher
from auction_relay.infrastructure.parsers.next_data_extractor import DEFAULT_SELECTOR, NextDataExtractor
from auction_relay.infrastructure.services.auction_job_service import AuctionJobService
from auction_relay.infrastructure.storage.folder_allocator import (
    DEFAULT_PREFIX,
    ReservingFolderAllocator,
    ScanFolderAllocator,
)
from auction_relay.infrastructure.storage.s3_storage import S3ObjectStorage
from auction_relay.infrastructure.storage.uploader import StorageUploader
from auction_relay.infrastructure.url.fromjapan_strategy import FromJapanUrlStrategy
from auction_relay.infrastructure.url.resolver import AuctionIdResolver
from auction_relay.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(LOG_NAME)


def bootstrap_logging(config: Optional[ConfigService] = None) -> logging.Logger:
    """🪵 Піднімає логування з розділу `logging` конфігурації."""
    cfg = config or ConfigService()
    return init_logging_from_config(cfg.get("logging", {}))


class Container:
    """📦 Збирає всі сервіси задачі та вивантаження."""

    def __init__(
        self,
        config: ConfigService,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        s3_client: Any = None,
        storage: Optional[IObjectStorage] = None,
    ) -> None:
        self.config = config
        self.files_root = Path(config.get("files.root", "./files"))

        headers: Dict[str, str] = dict(config.get("listing.headers") or {})
        self.http_client = httpx.AsyncClient(
            transport=transport,
            headers=headers,
            timeout=httpx.Timeout(float(config.get("listing.timeout_s", 30))),
            follow_redirects=True,
        )

        # 🔗 Резолвер: закритий набір стратегій
        self.resolver = AuctionIdResolver([FromJapanUrlStrategy(config)])

        # 🌐 Сторінка лоту
        self.fetcher = ListingFetcher(
            self.http_client,
            extractor=NextDataExtractor(config.get("listing.data_selector", DEFAULT_SELECTOR)),
            base_url=config.get("listing.base_url", DEFAULT_BASE_URL),
            locale=config.get("listing.locale", DEFAULT_LOCALE),
        )

        # 📥 Скачування
        self.downloader = ImageDownloader(
            self.http_client,
            max_bytes=config.get_int("download.max_bytes", 20 * 1024 * 1024),
            chunk_size=config.get_int("download.chunk_size", 64 * 1024),
            timeout_s=float(config.get("download.timeout_s", 30)),
        )

        # 🪣 Сховище, аллокатор, сповіщення
        self.prefix: str = config.get("storage.prefix", DEFAULT_PREFIX)
        self.storage: IObjectStorage = storage or S3ObjectStorage(
            config.get("storage.bucket", ""),
            client=s3_client,
            region=config.get("storage.region"),
        )
        self.allocator = self._make_allocator()
        self.notifier = GatewayNotifier(
            self.http_client,
            url=config.get("gateway.url", DEFAULT_GATEWAY_URL),
            timeout_s=float(config.get("gateway.timeout_s", DEFAULT_TIMEOUT_S)),
        )
        self.uploader = StorageUploader(
            self.storage,
            self.allocator,
            self.notifier,
            files_root=self.files_root,
            prefix=self.prefix,
        )

        # 🛠️ Ланцюжок задачі та admission gate
        self.job_service = AuctionJobService(
            self.resolver,
            self.fetcher,
            self.downloader,
            files_root=self.files_root,
            uploader=self.uploader,
            upload_after_download=config.get_bool("pipeline.upload_after_download", False),
        )
        self.dispatcher = RequestDispatcher(
            self.job_service.run,
            max_concurrent=config.get_int("dispatcher.max_concurrent", 2),
            max_pending=config.get_int("dispatcher.max_pending", 8),
            retry_after_s=config.get_int("dispatcher.retry_after_s", 5),
        )
        logger.debug("📦 Container зібрано (files_root=%s, prefix=%s)", self.files_root, self.prefix)

    def _make_allocator(self) -> IFolderAllocator:
        kind = str(self.config.get("storage.allocator", "reserving")).lower()
        if kind == "scan":
            logger.warning("⚠️ Scan-аллокатор не захищений від гонок між паралельними вивантаженнями")
            return ScanFolderAllocator(self.storage, prefix=self.prefix)
        return ReservingFolderAllocator(
            self.storage,
            prefix=self.prefix,
            max_attempts=self.config.get_int("storage.reserve_attempts", 16),
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()


__all__ = ["Container", "bootstrap_logging"]
