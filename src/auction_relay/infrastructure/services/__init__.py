# 🛠️ auction_relay/infrastructure/services/__init__.py
"""
🛠️ Сервіси прикладного рівня: оркестрація задачі над інфраструктурними адаптерами.
"""

from __future__ import annotations

from .auction_job_service import AuctionJobService

__all__ = ["AuctionJobService"]
