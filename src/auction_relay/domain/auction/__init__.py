# 🧱 auction_relay/domain/auction/__init__.py
"""
🧱 Домен аукціонних лотів: сутності та контракти адаптерів.
"""

from __future__ import annotations

from .entities import (
    AuctionReference,
    FolderAllocation,
    ImageRecord,
    JobResult,
    RequestContext,
    SourceFamily,
    UploadManifest,
    image_file_name,
    validate_request_id,
)
from .interfaces import IAuctionUrlStrategy, IFolderAllocator, INotifier, IObjectStorage

__all__ = [
    "AuctionReference",
    "FolderAllocation",
    "ImageRecord",
    "JobResult",
    "RequestContext",
    "SourceFamily",
    "UploadManifest",
    "image_file_name",
    "validate_request_id",
    "IAuctionUrlStrategy",
    "IFolderAllocator",
    "INotifier",
    "IObjectStorage",
]
