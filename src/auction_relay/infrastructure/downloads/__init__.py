# 📥 auction_relay/infrastructure/downloads/__init__.py
"""📥 Скачування фото лоту в робочий каталог задачі."""

from .image_downloader import ImageDownloader

__all__ = ["ImageDownloader"]
