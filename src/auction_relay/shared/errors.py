# 🚨 auction_relay/shared/errors.py
"""
🚨 Ієрархія доменних помилок сервісу.

🔹 `AppError` - базовий виняток із повідомленням, деталями та HTTP-статусом.
🔹 Фатальні для задачі: резолвінг, завантаження сторінки, парсинг, скачування, вивантаження.
🔹 Нефатальні (лише логуються): `NotificationError`, `CleanupError`.
🔹 Диспетчерські: `JobConflict`, `QueueFull`, `InvalidRequestId`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Dict, Optional									# 📐 Типізація


# ================================
# 🧠 БАЗОВИЙ ВИНЯТОК
# ================================
class AppError(Exception):
    """🧠 Базова помилка сервісу; `message` безпечно показувати клієнту."""

    status_code: int = 500											# 🔢 HTTP-статус для API-шару
    code: str = "app_error"											# 🏷️ Машинний код для логів

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для `logger.extra`."""
        extra: Dict[str, object] = {"error_code": self.code}
        if self.details:
            extra["details"] = self.details
        return extra


# ================================
# 🔗 РЕЗОЛВІНГ ІДЕНТИФІКАТОРА
# ================================
class UnsupportedSource(AppError):
    """🔗 URL не належить жодному відомому маркетплейсу."""

    status_code = 422
    code = "unsupported_source"

    def __init__(self, url: str) -> None:
        super().__init__(f"Unsupported auction source: {url}")
        self.url = url


class IdentifierNotFound(AppError):
    """🔍 Маркер є/очікувався, але ідентифікатор лоту не знайдено."""

    status_code = 422
    code = "identifier_not_found"

    def __init__(self, url: str) -> None:
        super().__init__(f"Auction ID not found in the URL: {url}")
        self.url = url


class InvalidRequestId(AppError):
    """🆔 requestId не можна використати як імʼя каталогу."""

    status_code = 422
    code = "invalid_request_id"

    def __init__(self, request_id: str) -> None:
        super().__init__(f"Invalid requestId: {request_id!r}")
        self.request_id = request_id


# ================================
# 🌐 СТОРІНКА ЛОТУ
# ================================
class FetchError(AppError):
    """🌐 Мережевий збій або не-2xx відповідь при завантаженні сторінки."""

    status_code = 502
    code = "fetch_error"

    def __init__(
        self,
        message: str,
        *,
        url: str,
        http_status: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.url = url
        self.http_status = http_status

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["url"] = self.url
        if self.http_status is not None:
            extra["http_status"] = self.http_status
        return extra


class ExtractionError(AppError):
    """🧾 На сторінці відсутній елемент із вбудованими даними."""

    status_code = 502
    code = "extraction_error"


class ParseError(AppError):
    """🧮 Вбудовані дані не є валідним JSON."""

    status_code = 502
    code = "parse_error"


# ================================
# 📥 СКАЧУВАННЯ / 📤 ВИВАНТАЖЕННЯ
# ================================
class DownloadError(AppError):
    """📥 Не вдалося скачати або зберегти зображення."""

    status_code = 502
    code = "download_error"

    def __init__(self, url: str, reason: str, *, details: Optional[str] = None) -> None:
        super().__init__(f"Image download failed: {url} [{reason}]", details=details)
        self.url = url
        self.reason = reason

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra.update({"url": self.url, "download_error": self.reason})
        return extra


class UploadError(AppError):
    """📤 Збій роботи з об'єктним сховищем."""

    status_code = 502
    code = "upload_error"

    def __init__(self, message: str, *, key: Optional[str] = None, details: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.key = key


class NotificationError(AppError):
    """📣 Шлюз не прийняв сповіщення (лише логується)."""

    code = "notification_error"

    def __init__(self, message: str, *, http_status: Optional[int] = None, details: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.http_status = http_status


class CleanupError(AppError):
    """🧹 Не вдалося видалити локальний файл (лише логується)."""

    code = "cleanup_error"

    def __init__(self, path: str, *, details: Optional[str] = None) -> None:
        super().__init__(f"Failed to remove local file: {path}", details=details)
        self.path = path


# ================================
# 🚦 ДИСПЕТЧЕР
# ================================
class JobConflict(AppError):
    """🚦 Задача з таким requestId вже виконується."""

    status_code = 409
    code = "job_conflict"

    def __init__(self, request_id: str) -> None:
        super().__init__(f"Job with requestId {request_id!r} is already in progress")
        self.request_id = request_id


class QueueFull(AppError):
    """⏳ Черга очікування переповнена; клієнт має повторити пізніше."""

    status_code = 503
    code = "queue_full"

    def __init__(self, retry_after_s: int) -> None:
        super().__init__("Too many pending jobs, retry later")
        self.retry_after_s = retry_after_s


__all__ = [
    "AppError",
    "UnsupportedSource",
    "IdentifierNotFound",
    "InvalidRequestId",
    "FetchError",
    "ExtractionError",
    "ParseError",
    "DownloadError",
    "UploadError",
    "NotificationError",
    "CleanupError",
    "JobConflict",
    "QueueFull",
]
