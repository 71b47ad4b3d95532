# 🌐 auction_relay/infrastructure/parsers/listing_fetcher.py
"""
🌐 ListingFetcher - завантажує канонічну сторінку лоту та віддає URL фото.

🔹 URL сторінки будується за шаблоном `{base}/{locale}/auction/{id}`.
🔹 Мережа - спільний `httpx.AsyncClient`; розбір HTML виноситься у робочий потік.
🔹 Кожен виклик `image_urls` заново завантажує сторінку.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx	# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio	# 🧵 to_thread для CPU-роботи
import logging	# 🧾 Логування
from typing import Optional, Tuple	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from auction_relay.shared.errors import FetchError	# 🚨 Мережеві збої
from auction_relay.shared.utils.logger import LOG_NAME	# 🏷️ Базовий логер
from .next_data_extractor import NextDataExtractor	# 🧾 Витяг вбудованих даних

logger = logging.getLogger(f"{LOG_NAME}.parser.listing")

DEFAULT_BASE_URL = "https://page.auctions.yahoo.co.jp"
DEFAULT_LOCALE = "jp"


class ListingFetcher:
    """🌐 Завантаження сторінки лоту + витяг списку фото."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        extractor: Optional[NextDataExtractor] = None,
        base_url: str = DEFAULT_BASE_URL,
        locale: str = DEFAULT_LOCALE,
    ) -> None:
        self._client = client
        self._extractor = extractor or NextDataExtractor()
        self._base_url = base_url.rstrip("/")
        self._locale = locale.strip("/")

    def listing_url(self, auction_id: str) -> str:
        """🔗 Канонічна адреса сторінки лоту."""
        return f"{self._base_url}/{self._locale}/auction/{auction_id}"

    async def fetch_html(self, auction_id: str) -> str:
        """
        Завантажує HTML сторінки лоту.

        Raises:
            FetchError: мережевий збій або не-2xx статус.
        """
        url = self.listing_url(auction_id)
        logger.info("🌐 GET %s", url)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("⚠️ Мережевий збій для %s: %s", url, exc)
            raise FetchError(f"Failed to fetch listing page: {url}", url=url, details=str(exc)) from exc

        if not response.is_success:
            logger.warning("🌐 HTTP %s для %s", response.status_code, url)
            raise FetchError(
                f"Listing page returned HTTP {response.status_code}: {url}",
                url=url,
                http_status=response.status_code,
            )
        return response.text

    async def image_urls(self, auction_id: str) -> Tuple[str, ...]:
        """🖼️ Впорядкований список URL фото лоту (порожній, якщо структура не збіглась)."""
        html = await self.fetch_html(auction_id)
        blob = await asyncio.to_thread(self._extractor.extract_blob, html)	# 🧵 BeautifulSoup + json поза event loop
        images = self._extractor.images(blob)
        if not images.structure_found:
            logger.warning("⚠️ Expected JSON structure not found (auction=%s)", auction_id)
        else:
            logger.info("🖼️ Знайдено %d фото для %s", len(images.urls), auction_id)
        return images.urls


__all__ = ["DEFAULT_BASE_URL", "DEFAULT_LOCALE", "ListingFetcher"]
