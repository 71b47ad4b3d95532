# 🧾 auction_relay/infrastructure/parsers/__init__.py
"""
🧾 Завантаження сторінки лоту та витяг вбудованих даних.
"""

from __future__ import annotations

from .listing_fetcher import ListingFetcher
from .next_data_extractor import ListingImages, NextDataExtractor

__all__ = ["ListingFetcher", "ListingImages", "NextDataExtractor"]
