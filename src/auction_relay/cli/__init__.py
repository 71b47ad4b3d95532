# 🖥️ auction_relay/cli/__init__.py
"""
🖥️ Точки входу командного рядка: HTTP-сервер та окремий аплоадер.
"""
