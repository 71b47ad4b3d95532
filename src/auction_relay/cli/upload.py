# 📤 auction_relay/cli/upload.py
"""
📤 Окремий аплоадер: `auction-relay-upload <request_id>`.

🔹 Вивантажує `files/{request_id}` у S3, сповіщає шлюз і прибирає локальні файли.
🔹 Коди виходу: 0 - успіх, 1 - помилка вивантаження, 2 - неправильні аргументи.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import argparse															# 🧾 Розбір аргументів
import asyncio															# 🔄 Запуск корутини
import logging															# 🧾 Логування
import sys																# 🧵 stderr
from typing import List, Optional										# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.config.config_service import ConfigService
from auction_relay.config.setup.container import Container, bootstrap_logging
from auction_relay.domain.auction.entities import UploadManifest
from auction_relay.shared.errors import AppError
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.cli.upload")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="auction-relay-upload",
        description="Upload the staged images of one request to S3 and notify the gateway.",
    )
    parser.add_argument("request_id", help="requestId whose files/{requestId} directory is uploaded")
    return parser


async def _run(container: Container, request_id: str) -> UploadManifest:
    try:
        return await container.uploader.upload(request_id)
    finally:
        await container.aclose()


def format_manifest(request_id: str, manifest: UploadManifest) -> str:
    if manifest.file_count == 0:
        return f"Nothing to upload for requestId {request_id}"
    return (
        f"Uploaded {manifest.file_count} file(s) for requestId {request_id} "
        f"to folder {manifest.folder_number}: {manifest.final_path_template}"
    )


def main(argv: Optional[List[str]] = None, *, container: Optional[Container] = None) -> int:
    """▶️ Точка входу; `SystemExit(2)` від argparse, якщо `request_id` не передано."""
    args = build_parser().parse_args(argv)

    if container is None:
        config = ConfigService()
        bootstrap_logging(config)
        container = Container(config)

    try:
        manifest = asyncio.run(_run(container, args.request_id))
    except AppError as exc:
        logger.error("❌ Upload failed for %s: %s", args.request_id, exc, extra=exc.to_log_extra())
        print(exc.message, file=sys.stderr)
        return 1

    print(format_manifest(args.request_id, manifest))
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
