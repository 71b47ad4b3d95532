# 🔗 auction_relay/infrastructure/url/__init__.py
"""
🔗 Стратегії резолвінгу URL маркетплейсів та диспетчер над ними.

🔹 Кожна родина джерел - окрема реалізація `IAuctionUrlStrategy`.
🔹 Додавання родини не вимагає змін у спільному коді.
"""

from __future__ import annotations

from .fromjapan_strategy import FromJapanUrlStrategy
from .resolver import AuctionIdResolver

__all__ = ["AuctionIdResolver", "FromJapanUrlStrategy"]
