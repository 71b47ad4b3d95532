# ⚙️ auction_relay/config/__init__.py
"""
⚙️ Пакет Config - централізована конфігурація та DI-контейнер.
"""

from .config_service import ConfigService

__all__ = ["ConfigService", "Container"]


def __getattr__(name: str):
    if name == "Container":
        from .setup.container import Container  # локальний імпорт → немає циклу

        return Container
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
