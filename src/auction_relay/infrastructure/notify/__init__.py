# 📣 auction_relay/infrastructure/notify/__init__.py
"""📣 Сповіщення downstream-шлюзу."""

from .gateway_notifier import DEFAULT_GATEWAY_URL, GatewayNotifier

__all__ = ["DEFAULT_GATEWAY_URL", "GatewayNotifier"]
