# 🧭 auction_relay/infrastructure/url/resolver.py
"""
🧭 `AuctionIdResolver` - диспетчер по закритому набору стратегій URL.

🔹 Перша стратегія, що `supports()` URL, повертає канонічний ID.
🔹 Невідома родина → `UnsupportedSource` (ловиться на рівні запиту, а не процесу).
🔹 Нова родина = ще одна стратегія у списку, без змін тут.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Iterable, List

# 🧩 Внутрішні модулі проєкту
from auction_relay.domain.auction.entities import AuctionReference
from auction_relay.domain.auction.interfaces import IAuctionUrlStrategy
from auction_relay.shared.errors import IdentifierNotFound, UnsupportedSource
from auction_relay.shared.utils.logger import LOG_NAME

__all__ = ["AuctionIdResolver"]

logger = logging.getLogger(f"{LOG_NAME}.url")


class AuctionIdResolver:
    """🧭 Визначає родину джерела та делегує резолвінг відповідній стратегії."""

    def __init__(self, strategies: Iterable[IAuctionUrlStrategy]) -> None:
        self._strategies: List[IAuctionUrlStrategy] = list(strategies)
        logger.debug("🧭 Resolver init: %s", [s.family.value for s in self._strategies])

    def resolve(self, raw_url: str) -> AuctionReference:
        """
        Перетворює сирий URL на `AuctionReference`.

        Raises:
            IdentifierNotFound: URL порожній або ID не знайдено.
            UnsupportedSource: жодна стратегія не підтримує URL.
        """
        url = (raw_url or "").strip()
        if not url:
            raise IdentifierNotFound(raw_url or "")

        for strategy in self._strategies:
            if strategy.supports(url):
                auction_id = strategy.resolve(url)
                return AuctionReference(
                    raw_url=url,
                    canonical_id=auction_id,
                    source_family=strategy.family,
                )

        logger.info("🚫 Непідтримуване джерело: %s", url)
        raise UnsupportedSource(url)
