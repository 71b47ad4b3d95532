# 🔢 auction_relay/infrastructure/storage/folder_allocator.py
"""
🔢 Видача номера папки `images/{N}/` для нової партії фото.

🔹 `ScanFolderAllocator` - list → max → +1. Без резерву: два паралельні виклики
   можуть отримати однаковий номер. Лишається як bootstrap/fallback.
🔹 `ReservingFolderAllocator` - той самий скан, але номер закріплюється умовним
   створенням маркера `images/{N}/.reserved`; зайнятий маркер → наступний номер.
   Усередині процесу виклики серіалізовано `asyncio.Lock`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from typing import Iterable, Optional

# 🧩 Внутрішні модулі проєкту
from auction_relay.domain.auction.entities import FolderAllocation
from auction_relay.domain.auction.interfaces import IObjectStorage
from auction_relay.shared.errors import UploadError
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.storage.allocator")

DEFAULT_PREFIX = "images/"
RESERVATION_MARKER = ".reserved"


def next_folder_number(existing: Iterable[int]) -> int:
    """{1, 2, 5} → 6; порожньо → 1."""
    return max(existing, default=0) + 1


class ScanFolderAllocator:
    """🔢 Read-then-act: скан існуючих папок і `max + 1`."""

    def __init__(self, storage: IObjectStorage, *, prefix: str = DEFAULT_PREFIX) -> None:
        self._storage = storage
        self._prefix = prefix

    async def allocate(self) -> FolderAllocation:
        existing = await self._storage.list_folder_numbers(self._prefix)
        number = next_folder_number(existing)
        logger.info("🔢 Folder allocated by scan: %d (existing max=%d)", number, number - 1)
        return FolderAllocation(folder_number=number)


class ReservingFolderAllocator:
    """🔐 Скан + атомарний резерв номера через умовний запис у сховище."""

    def __init__(
        self,
        storage: IObjectStorage,
        *,
        prefix: str = DEFAULT_PREFIX,
        max_attempts: int = 16,
    ) -> None:
        self._storage = storage
        self._prefix = prefix
        self._max_attempts = max(1, int(max_attempts))
        self._lock = asyncio.Lock()
        self._last_issued: Optional[int] = None

    def marker_key(self, number: int) -> str:
        return f"{self._prefix}{number}/{RESERVATION_MARKER}"

    async def allocate(self) -> FolderAllocation:
        async with self._lock:
            existing = await self._storage.list_folder_numbers(self._prefix)
            candidate = next_folder_number(existing)
            if self._last_issued is not None and candidate <= self._last_issued:
                candidate = self._last_issued + 1				# 🧷 Маркер ще не видно в лістингу

            for _ in range(self._max_attempts):
                if await self._storage.create_if_absent(self.marker_key(candidate)):
                    self._last_issued = candidate
                    logger.info("🔐 Folder reserved: %d", candidate)
                    return FolderAllocation(folder_number=candidate)
                logger.debug("🔒 Папку %d зайняв інший аллокатор", candidate)
                candidate += 1

        raise UploadError(
            f"Could not reserve a folder number after {self._max_attempts} attempts",
            key=self._prefix,
        )


__all__ = [
    "DEFAULT_PREFIX",
    "RESERVATION_MARKER",
    "ReservingFolderAllocator",
    "ScanFolderAllocator",
    "next_folder_number",
]
