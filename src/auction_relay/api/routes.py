# 🛣️ auction_relay/api/routes.py
"""
🛣️ HTTP-ендпоінти сервісу.

🔹 `POST /url` - синхронна задача: відповідь лише після завершення ланцюжка.
🔹 `GET /health` - стан admission gate.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from fastapi import APIRouter, Header, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

# 🔠 Системні імпорти
import logging
from typing import Any, Dict

# 🧩 Внутрішні модулі проєкту
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.api")

router = APIRouter()


class UrlJobRequest(BaseModel):
    """Тіло запиту `POST /url`."""

    url: str


@router.post("/url", response_class=PlainTextResponse)
async def submit_url(
    body: UrlJobRequest,
    request: Request,
    request_id: str = Header(..., alias="requestId"),
) -> PlainTextResponse:
    """Приймає URL лоту, скачує фото у `files/{requestId}` і підтверджує результат."""
    dispatcher = request.app.state.dispatcher
    logger.info("📨 [%s] POST /url %s", request_id, body.url)
    result = await dispatcher.submit(request_id, body.url)

    if result.soft_empty:
        return PlainTextResponse("Expected JSON structure not found; no images downloaded", status_code=200)
    message = f"Downloaded {len(result.images)} image(s) for requestId {request_id}"
    if result.manifest is not None:
        message += f"; uploaded to {result.manifest.final_path_template}"
    return PlainTextResponse(message, status_code=200)


@router.get("/health")
async def health(request: Request) -> Dict[str, Any]:
    dispatcher = request.app.state.dispatcher
    return {"status": "ok", "active": dispatcher.active, "pending": dispatcher.pending}


__all__ = ["router", "UrlJobRequest"]
