# 🔌 auction_relay/domain/auction/interfaces.py
"""
🔌 Контракти інфраструктурних адаптерів.

🔹 `IAuctionUrlStrategy` - одна родина URL: supports/resolve.
🔹 `IObjectStorage` - мінімальний API об'єктного сховища.
🔹 `IFolderAllocator` - видача номера папки для партії.
🔹 `INotifier` - сповіщення downstream-шлюзу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from pathlib import Path
from typing import List, Protocol, runtime_checkable

# 🧩 Внутрішні модулі проєкту
from .entities import FolderAllocation, SourceFamily


@runtime_checkable
class IAuctionUrlStrategy(Protocol):
    """Стратегія резолвінгу URL однієї родини маркетплейсів."""

    family: SourceFamily

    def supports(self, url: str) -> bool:
        """True, якщо URL належить цій родині."""
        ...

    def resolve(self, url: str) -> str:
        """Повертає канонічний ID або піднімає `IdentifierNotFound`."""
        ...


class IObjectStorage(Protocol):
    """Асинхронний фасад над об'єктним сховищем."""

    bucket: str

    async def list_folder_numbers(self, prefix: str) -> List[int]:
        """Числові імена «підкаталогів» під `prefix`."""
        ...

    async def put_file(self, key: str, path: Path) -> None:
        ...

    async def create_if_absent(self, key: str) -> bool:
        """Атомарно створює порожній об'єкт; False, якщо ключ уже існує."""
        ...


class IFolderAllocator(Protocol):
    async def allocate(self) -> FolderAllocation:
        ...


class INotifier(Protocol):
    async def notify(self, request_id: str, final_image_path: str) -> bool:
        ...


__all__ = ["IAuctionUrlStrategy", "IObjectStorage", "IFolderAllocator", "INotifier"]
