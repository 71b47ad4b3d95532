# 🌐 auction_relay/api/app.py
"""
🌐 Фабрика FastAPI-застосунку.

🔹 Один DI-контейнер на застосунок, диспетчер доступний через `app.state.dispatcher`.
🔹 `AppError` → plain-text відповідь із власним HTTP-статусом.
🔹 `/metrics` - Prometheus-експозиція.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from prometheus_client import make_asgi_app

# 🔠 Системні імпорти
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

# 🧩 Внутрішні модулі проєкту
from auction_relay import __version__
from auction_relay.config.config_service import ConfigService
from auction_relay.config.setup.container import Container
from auction_relay.shared.errors import AppError, QueueFull
from auction_relay.shared.utils.logger import LOG_NAME
from .routes import router

logger = logging.getLogger(f"{LOG_NAME}.api")


# ================================
# 🚨 ОБРОБНИКИ ПОМИЛОК
# ================================
async def app_error_handler(request: Request, exc: AppError) -> PlainTextResponse:
    headers = {}
    if isinstance(exc, QueueFull):
        headers["Retry-After"] = str(exc.retry_after_s)
    logger.info("↩️ %s %s → %d %s", request.method, request.url.path, exc.status_code, exc.code)
    return PlainTextResponse(exc.message, status_code=exc.status_code, headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("🔥 Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse("Internal server error", status_code=500)


# ================================
# 🏗️ ФАБРИКА
# ================================
def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Збирає застосунок.

    Args:
        container: Готовий контейнер (тести); інакше будується з `ConfigService()`.
    """
    container = container or Container(ConfigService())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("🚀 auction-relay %s запущено (files_root=%s)", __version__, container.files_root)
        try:
            yield
        finally:
            await container.aclose()
            logger.info("🛑 auction-relay зупинено")

    app = FastAPI(title="auction-relay", version=__version__, lifespan=lifespan)
    app.state.container = container
    app.state.dispatcher = container.dispatcher

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)
    app.mount("/metrics", make_asgi_app())
    return app


__all__ = ["create_app", "app_error_handler"]
