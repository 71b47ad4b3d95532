# 🚦 auction_relay/api/dispatcher.py
"""
🚦 RequestDispatcher - admission gate для важкого ланцюжка задач.

🔹 `asyncio.Semaphore(N)` обмежує кількість задач усередині ланцюжка (типово 2).
🔹 Слот звільняється одразу після завершення/помилки, до відповіді клієнту.
🔹 Черга очікування обмежена: понад `max_pending` → `QueueFull` (503 + Retry-After).
🔹 Повторний requestId, що ще виконується → `JobConflict` (409), без очікування.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                          # 🔄 Семафор
import logging                                                          # 🧾 Логування подій
from typing import Awaitable, Callable, Generic, Set, TypeVar           # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.domain.auction.entities import validate_request_id
from auction_relay.shared.errors import AppError, JobConflict, QueueFull
from auction_relay.shared.metrics import inc_job, set_gate
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.dispatcher")

T = TypeVar("T")
JobRunner = Callable[[str, str], Awaitable[T]]


class RequestDispatcher(Generic[T]):
    """🚦 Пропускає задачі у ланцюжок з обмеженням паралелізму та ізоляцією за requestId."""

    def __init__(
        self,
        runner: JobRunner,
        *,
        max_concurrent: int = 2,
        max_pending: int = 8,
        retry_after_s: int = 5,
    ) -> None:
        """
        ⚙️ Ініціалізує гейт.

        Args:
            runner: Корутина `(request_id, url) -> результат`, що виконує ланцюжок.
            max_concurrent: Розмір семафора.
            max_pending: Скільки задач може чекати на слот (0 - без черги).
            retry_after_s: Значення Retry-After для відмови через переповнену чергу.
        """
        self._runner = runner
        self.max_concurrent = max(1, int(max_concurrent))
        self.max_pending = max(0, int(max_pending))
        self.retry_after_s = max(1, int(retry_after_s))
        self._sem = asyncio.Semaphore(self.max_concurrent)				# 🚦 Admission gate
        self._in_flight: Set[str] = set()								# 🆔 requestId, що зараз обробляються
        self.active = 0													# 🔢 Усередині ланцюжка
        self.pending = 0												# ⏳ Чекають слот
        self.peak_active = 0											# 📈 Максимум одночасних

    def is_in_flight(self, request_id: str) -> bool:
        return request_id in self._in_flight

    async def submit(self, request_id: str, url: str) -> T:
        """
        ▶️ Запускає задачу та чекає її завершення.

        Raises:
            InvalidRequestId / JobConflict / QueueFull: задачу відхилено до старту.
            AppError: помилка самого ланцюжка.
        """
        validate_request_id(request_id)
        if request_id in self._in_flight:
            logger.warning("🚫 [%s] вже виконується - відхиляємо", request_id)
            inc_job("conflict")
            raise JobConflict(request_id)
        if self._sem.locked() and self.pending >= self.max_pending:
            logger.warning("⏳ [%s] черга заповнена (pending=%d)", request_id, self.pending)
            inc_job("rejected")
            raise QueueFull(self.retry_after_s)

        self._in_flight.add(request_id)
        try:
            await self._acquire_slot()
            try:
                self.active += 1
                self.peak_active = max(self.peak_active, self.active)
                set_gate(self.active, self.pending)
                result = await self._runner(request_id, url)
            finally:
                self.active -= 1
                self._sem.release()										# 🔓 Слот не тримається під час відповіді
                set_gate(self.active, self.pending)
        except AppError as exc:
            logger.warning("❌ [%s] %s", request_id, exc, extra=exc.to_log_extra())
            inc_job("failed")
            raise
        except Exception:
            logger.exception("🔥 [%s] неочікуваний збій задачі", request_id)
            inc_job("crashed")
            raise
        finally:
            self._in_flight.discard(request_id)

        inc_job("ok")
        return result

    async def _acquire_slot(self) -> None:
        self.pending += 1
        set_gate(self.active, self.pending)
        try:
            await self._sem.acquire()
        finally:
            self.pending -= 1


__all__ = ["RequestDispatcher"]
