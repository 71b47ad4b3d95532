# 📣 auction_relay/infrastructure/notify/gateway_notifier.py
"""
📣 GatewayNotifier - повідомляє downstream-шлюз про фінальний шлях у сховищі.

🔹 POST JSON `{"final_image_path", "requestId"}` + заголовок `requestId`.
🔹 Не-2xx, мережеві збої та зламаний URL шлюзу лише логуються (`NotificationError`), без ретраїв.
🔹 Таймаут `gateway.timeout_s` задається на кожен запит, окремо від спільного клієнта.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                    # 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import logging

# 🧩 Внутрішні модулі проєкту
from auction_relay.shared.errors import NotificationError
from auction_relay.shared.metrics import inc_notification
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.notify")

DEFAULT_GATEWAY_URL = "http://localhost:3031/path"
DEFAULT_TIMEOUT_S = 10.0


class GatewayNotifier:
    """📣 Реалізація `INotifier` поверх httpx."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        url: str = DEFAULT_GATEWAY_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self._client = client
        self._url = url
        self.timeout = httpx.Timeout(float(timeout_s))

    async def notify(self, request_id: str, final_image_path: str) -> bool:
        """Повертає True, якщо шлюз відповів 2xx; інакше логує і повертає False."""
        payload = {"final_image_path": final_image_path, "requestId": request_id}
        try:
            response = await self._client.post(
                self._url,
                json=payload,
                headers={"requestId": request_id},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            error = NotificationError("Gateway is unreachable", details=str(exc))
            outcome = "failed"
        except (httpx.InvalidURL, ValueError) as exc:                  # 🔗 Зламаний gateway.url
            error = NotificationError(f"Invalid gateway URL {self._url!r}", details=str(exc))
            outcome = "failed"
        else:
            if response.is_success:
                logger.info("📣 Gateway notified: %s (request=%s)", final_image_path, request_id)
                inc_notification("ok")
                return True
            error = NotificationError(
                f"Gateway rejected notification: HTTP {response.status_code}",
                http_status=response.status_code,
                details=response.text[:200] or None,
            )
            outcome = "rejected"

        logger.warning("📣 %s (request=%s)", error, request_id, extra=error.to_log_extra())
        inc_notification(outcome)
        return False


__all__ = ["DEFAULT_GATEWAY_URL", "DEFAULT_TIMEOUT_S", "GatewayNotifier"]
