# 🔗 auction_relay/infrastructure/url/fromjapan_strategy.py
"""
🔗 `FromJapanUrlStrategy` - стратегія резолвінгу URL посередника FromJapan.

🔹 Родина визначається підрядком хоста (`fromjapan.co`) або маркером шляху `/input/`.
🔹 ID лоту - все після маркера `/input/`, без query/fragment і хвостових `/`.
🔹 Жодних мережевих чи файлових побічних ефектів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                  # 🧾 Діагностика
from typing import Any, Optional                                # 🧰 Анотації типів

# 🧩 Внутрішні модулі проєкту
from auction_relay.domain.auction.entities import SourceFamily
from auction_relay.shared.errors import IdentifierNotFound
from auction_relay.shared.utils.logger import LOG_NAME

__all__ = ["FromJapanUrlStrategy"]

logger = logging.getLogger(f"{LOG_NAME}.url")

_DEFAULT_HOST_MARKER = "fromjapan.co"
_DEFAULT_PATH_MARKER = "/input/"


# ================================
# 🔗 СТРАТЕГІЯ ДЛЯ FROMJAPAN
# ================================
class FromJapanUrlStrategy:
    """Реалізація `IAuctionUrlStrategy` для посилань виду `…/auction/yahoo/input/<id>/`."""

    family = SourceFamily.FROM_JAPAN

    def __init__(self, config: Optional[Any] = None) -> None:
        get = config.get if config is not None else (lambda _key, default=None: default)
        self._host_marker: str = get("source.fromjapan.host_marker", _DEFAULT_HOST_MARKER)
        self._path_marker: str = get("source.fromjapan.path_marker", _DEFAULT_PATH_MARKER)

    def supports(self, url: str) -> bool:
        """True, якщо URL містить маркер хоста FromJapan або маркер шляху `/input/`."""
        if not url:
            return False
        return self._host_marker in url or self._path_marker in url

    def resolve(self, url: str) -> str:
        """
        Витягує ID лоту з URL.

        Raises:
            IdentifierNotFound: маркера шляху немає або після нього порожньо.
        """
        _, marker, tail = url.partition(self._path_marker)
        if not marker:
            logger.debug("🔍 Маркер '%s' відсутній у %s", self._path_marker, url)
            raise IdentifierNotFound(url)

        for sep in ("?", "#"):                                  # ✂️ query/fragment не частина ID
            tail = tail.split(sep, 1)[0]
        auction_id = tail.rstrip("/")
        if not auction_id:
            raise IdentifierNotFound(url)

        logger.debug("🔗 %s → %s", url, auction_id)
        return auction_id
