# 🌐 auction_relay/api/__init__.py
"""
🌐 HTTP-шар: admission gate, маршрути та фабрика застосунку (`auction_relay.api.app`).
"""

from __future__ import annotations

from .dispatcher import RequestDispatcher
from .routes import UrlJobRequest, router

__all__ = ["RequestDispatcher", "UrlJobRequest", "router"]
