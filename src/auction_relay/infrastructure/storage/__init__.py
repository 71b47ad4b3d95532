# 🪣 auction_relay/infrastructure/storage/__init__.py
"""
🪣 Об'єктне сховище: S3-адаптер, видача номерів папок і аплоадер партій.
"""

from __future__ import annotations

from .folder_allocator import ReservingFolderAllocator, ScanFolderAllocator, next_folder_number
from .s3_storage import S3ObjectStorage
from .uploader import StorageUploader

__all__ = [
    "ReservingFolderAllocator",
    "S3ObjectStorage",
    "ScanFolderAllocator",
    "StorageUploader",
    "next_folder_number",
]
