# 🧾 auction_relay/infrastructure/parsers/next_data_extractor.py
"""
🧾 NextDataExtractor - витяг вбудованого JSON стану сторінки та списку фото лоту.

🔹 Знаходить `<script id="__NEXT_DATA__">` через CSS-селектор BeautifulSoup.
🔹 Жорсткі помилки: немає елемента → `ExtractionError`; невалідний JSON → `ParseError`.
🔹 М'яка політика: будь-яке відхилення форми даних → порожній список фото.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from bs4 import BeautifulSoup	# 🥣 DOM-дерево сторінки
from bs4.element import Tag	# 🧱 Тип елементів BeautifulSoup

# 🔠 Системні імпорти
import json	# 🧮 Розбір вбудованих даних
import logging	# 🧾 Логування
from dataclasses import dataclass	# 🧱 Схема підструктури
from typing import Any, Mapping, Optional, Tuple	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from auction_relay.shared.errors import ExtractionError, ParseError	# 🚨 Жорсткі помилки
from auction_relay.shared.utils.logger import LOG_NAME	# 🏷️ Базовий логер

# ================================
# 🧾 ЛОГЕР ТА КОНСТАНТИ
# ================================
logger = logging.getLogger(f"{LOG_NAME}.parser.next_data")
DEFAULT_SELECTOR = "script#__NEXT_DATA__"
IMAGES_PATH: Tuple[str, ...] = ("props", "pageProps", "initialState", "itempage", "item", "item", "img")	# 🧭 Шлях до масиву фото


# ================================
# 📐 СХЕМА ПІДСТРУКТУРИ
# ================================
@dataclass(frozen=True, slots=True)
class ListingImages:
    """📐 Декодований список фото лоту (порожній, якщо форма не збіглася)."""

    urls: Tuple[str, ...]
    structure_found: bool

    @classmethod
    def from_blob(cls, blob: Any) -> "ListingImages":
        """Обходить `IMAGES_PATH` без припущень про типи; будь-який збій → порожній результат."""
        node: Any = blob
        for key in IMAGES_PATH:
            if not isinstance(node, Mapping) or key not in node:
                logger.debug("🧭 Вузол '%s' відсутній у вбудованих даних.", key)
                return cls(urls=(), structure_found=False)
            node = node[key]

        if not isinstance(node, list):
            logger.debug("🧭 `img` має тип %s замість list.", type(node).__name__)
            return cls(urls=(), structure_found=False)

        urls = []
        for idx, descriptor in enumerate(node):
            image = descriptor.get("image") if isinstance(descriptor, Mapping) else None
            if isinstance(image, str) and image.strip():
                urls.append(image.strip())
            else:
                logger.debug("🖼️ Дескриптор #%d без поля image - пропускаємо.", idx)
        return cls(urls=tuple(urls), structure_found=True)


# ================================
# 🏛️ ЕКСТРАКТОР
# ================================
class NextDataExtractor:
    """🏛️ Отримує JSON зі сторінки та перетворює його на список URL фото."""

    def __init__(self, selector: Optional[str] = None) -> None:
        self._selector = selector or DEFAULT_SELECTOR

    def extract_blob(self, html: str) -> Any:
        """
        Повертає розібраний JSON зі script-елемента.

        Raises:
            ExtractionError: елемент не знайдено.
            ParseError: вміст не є JSON.
        """
        soup = BeautifulSoup(html or "", "html.parser")
        script = soup.select_one(self._selector)
        if not isinstance(script, Tag):
            logger.warning("⚠️ Елемент '%s' не знайдено на сторінці.", self._selector)
            raise ExtractionError(f"Script element not found: {self._selector}")

        raw = script.string if script.string is not None else script.get_text()
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("⚠️ Невалідний JSON у '%s': %s", self._selector, exc)
            raise ParseError("Embedded page data is not valid JSON", details=str(exc)) from exc

    def images(self, blob: Any) -> ListingImages:
        return ListingImages.from_blob(blob)

    def image_urls(self, html: str) -> Tuple[str, ...]:
        """HTML → впорядкований кортеж URL фото (порожній при неочікуваній формі)."""
        return self.images(self.extract_blob(html)).urls


__all__ = ["DEFAULT_SELECTOR", "IMAGES_PATH", "ListingImages", "NextDataExtractor"]
