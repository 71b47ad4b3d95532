# 🛰️ auction_relay/__init__.py
"""
🛰️ auction-relay - сервіс, що забирає фото аукціонного лоту та вивантажує їх у S3.
"""

__version__ = "1.0.0"
