# 🧱 auction_relay/domain/auction/entities.py
"""
🧱 Доменні сутності: посилання на лот, контекст запиту, записи зображень, маніфест вивантаження.

🔹 Усі DTO незмінні (`frozen=True`) - створюються один раз і лише читаються далі.
🔹 Порядок `ImageRecord` значущий: він визначає імена файлів `image{N}.jpg`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import re														# 🧵 Валідація requestId
from dataclasses import dataclass, field									# 🧱 DTO
from enum import Enum														# 🏷️ Родини джерел
from pathlib import Path													# 🛤️ Локальні шляхи
from typing import Optional, Tuple													# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.shared.errors import InvalidRequestId

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


class SourceFamily(str, Enum):
    """Відомі родини URL маркетплейсів."""

    FROM_JAPAN = "fromjapan"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class AuctionReference:
    """🔗 Вхідний URL та канонічний ідентифікатор лоту."""

    raw_url: str
    canonical_id: str
    source_family: SourceFamily


@dataclass(frozen=True, slots=True)
class RequestContext:
    """🗂️ Задача та її ексклюзивний робочий каталог."""

    request_id: str
    working_directory: Path

    @classmethod
    def for_request(cls, files_root: Path, request_id: str) -> "RequestContext":
        """Робочий каталог `{files_root}/{request_id}`; requestId має бути одним безпечним сегментом."""
        validate_request_id(request_id)
        return cls(request_id=request_id, working_directory=Path(files_root) / request_id)


@dataclass(frozen=True, slots=True)
class ImageRecord:
    """🖼️ Одне скачане зображення (index - 0-based позиція у витягнутому списку)."""

    index: int
    source_url: str
    local_path: Path

    @property
    def file_name(self) -> str:
        return image_file_name(self.index)


@dataclass(frozen=True, slots=True)
class FolderAllocation:
    """📁 Номер папки у віддаленому сховищі (обчислюється на кожне вивантаження)."""

    folder_number: int


@dataclass(frozen=True, slots=True)
class UploadManifest:
    """📦 Підсумок вивантаження однієї партії."""

    folder_number: int
    file_count: int
    final_path_template: str											# 🔗 s3://… шлях останнього об'єкта
    keys: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def counter(self) -> int:
        """Кількість вивантажених файлів (лічильник після останнього інкременту)."""
        return self.file_count


@dataclass(frozen=True, slots=True)
class JobResult:
    """✅ Результат ланцюжка resolve → fetch → download."""

    context: RequestContext
    reference: AuctionReference
    images: Tuple[ImageRecord, ...]
    manifest: Optional[UploadManifest] = None

    @property
    def soft_empty(self) -> bool:
        """Сторінка доступна, але очікуваної структури з фото не знайдено."""
        return not self.images


def validate_request_id(request_id: str) -> str:
    """Пропускає лише `[A-Za-z0-9._-]`, без `.` і `..` - requestId стає імʼям каталогу."""
    if not isinstance(request_id, str) or not _REQUEST_ID_RE.match(request_id) or request_id in (".", ".."):
        raise InvalidRequestId(str(request_id))
    return request_id


def image_file_name(index: int) -> str:
    """0-based індекс → `image{index+1}.jpg`."""
    return f"image{index + 1}.jpg"


__all__ = [
    "SourceFamily",
    "AuctionReference",
    "RequestContext",
    "ImageRecord",
    "FolderAllocation",
    "UploadManifest",
    "JobResult",
    "image_file_name",
    "validate_request_id",
]
