# 🚀 auction_relay/cli/server.py
"""
🚀 `auction-relay` - запуск HTTP-сервера (uvicorn) з хостом і портом із конфігурації.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import uvicorn															# 🦄 ASGI-сервер

# 🔠 Системні імпорти
import argparse
import logging
from typing import List, Optional

# 🧩 Внутрішні модулі проєкту
from auction_relay.api.app import create_app
from auction_relay.config.config_service import ConfigService
from auction_relay.config.setup.container import Container, bootstrap_logging
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.cli.server")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="auction-relay", description="Run the auction image relay HTTP server.")
    parser.add_argument("--host", default=None, help="override server.host")
    parser.add_argument("--port", type=int, default=None, help="override server.port")
    args = parser.parse_args(argv)

    config = ConfigService()
    bootstrap_logging(config)

    host = args.host or config.get("server.host", "0.0.0.0")
    port = args.port or config.get_int("server.port", 8000)
    app = create_app(Container(config))

    logger.info("🌐 Слухаємо %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
