# 📊 auction_relay/shared/metrics.py
"""
📊 Метрики Prometheus для задач, скачувань, вивантажень і сповіщень.

🔹 Усі лічильники зареєстровані в глобальному `REGISTRY` і віддаються через `/metrics`.
🔹 Хелпери `inc_*` ніколи не ламають пайплайн через збій метрик.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter, Gauge						# 📈 Примітиви Prometheus

# 🔠 Системні імпорти
import logging
from typing import Callable

# 🧩 Внутрішні модулі проєкту
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.metrics")


# ================================
# 📈 МЕТРИКИ
# ================================
JOBS_TOTAL = Counter(
    "relay_jobs_total",
    "Завершені задачі за результатом",
    ["outcome"],
)
JOBS_ACTIVE = Gauge(
    "relay_jobs_active",
    "Задачі всередині важкого ланцюжка (admission gate)",
)
JOBS_PENDING = Gauge(
    "relay_jobs_pending",
    "Задачі, що чекають слот",
)
DOWNLOADS_TOTAL = Counter(
    "relay_downloads_total",
    "Скачування зображень за результатом",
    ["outcome"],
)
UPLOADS_TOTAL = Counter(
    "relay_uploaded_objects_total",
    "Об'єкти, вивантажені у сховище",
)
NOTIFICATIONS_TOTAL = Counter(
    "relay_notifications_total",
    "Сповіщення шлюзу за результатом",
    ["outcome"],
)


def _safe(action: Callable[[], object]) -> None:
    try:
        action()
    except Exception:  # noqa: BLE001
        logger.debug("📉 Metric update failed", exc_info=True)			# 🤫 Метрики не валять пайплайн


def inc_job(outcome: str) -> None:
    _safe(lambda: JOBS_TOTAL.labels(outcome=outcome).inc())


def inc_download(outcome: str) -> None:
    _safe(lambda: DOWNLOADS_TOTAL.labels(outcome=outcome).inc())


def inc_uploaded(count: int = 1) -> None:
    _safe(lambda: UPLOADS_TOTAL.inc(count))


def inc_notification(outcome: str) -> None:
    _safe(lambda: NOTIFICATIONS_TOTAL.labels(outcome=outcome).inc())


def set_gate(active: int, pending: int) -> None:
    _safe(lambda: (JOBS_ACTIVE.set(active), JOBS_PENDING.set(pending)))


__all__ = [
    "JOBS_TOTAL",
    "JOBS_ACTIVE",
    "JOBS_PENDING",
    "DOWNLOADS_TOTAL",
    "UPLOADS_TOTAL",
    "NOTIFICATIONS_TOTAL",
    "inc_job",
    "inc_download",
    "inc_uploaded",
    "inc_notification",
    "set_gate",
]
