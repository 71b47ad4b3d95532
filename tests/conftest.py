# tests/conftest.py
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

# 1) Гасимо автопідхоплення сторонніх плагінів
os.environ.setdefault("PYTEST_DISABLE_PLUGIN_AUTOLOAD", "1")

# 2) Додаємо src у sys.path, щоб працював імпорт "auction_relay.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from auction_relay.config.config_service import ConfigService  # noqa: E402
from auction_relay.infrastructure.storage.s3_storage import parse_folder_number  # noqa: E402


# ─────────────────────────────────────────────────────────────────────
# 🔧 Тестові заглушки
# ─────────────────────────────────────────────────────────────────────
class FakeStorage:
    """In-memory сховище з IObjectStorage-інтерфейсом; `list_delay` відкриває вікно для гонок."""

    def __init__(self, bucket: str = "test-bucket", existing: Sequence[int] = (), list_delay: float = 0.0):
        self.bucket = bucket
        self.objects: Dict[str, bytes] = {f"images/{n}/image0.jpg": b"x" for n in existing}
        self.put_order: List[Tuple[str, str]] = []
        self.list_delay = list_delay

    async def list_folder_numbers(self, prefix: str) -> List[int]:
        snapshot = list(self.objects)
        if self.list_delay:
            await asyncio.sleep(self.list_delay)
        numbers = set()
        for key in snapshot:
            if key.startswith(prefix):
                folder = key[len(prefix):].split("/", 1)[0] + "/"
                number = parse_folder_number(folder, "")
                if number is not None:
                    numbers.add(number)
        return sorted(numbers)

    async def put_file(self, key: str, path: Path) -> None:
        self.objects[key] = Path(path).read_bytes()
        self.put_order.append((key, Path(path).name))

    async def create_if_absent(self, key: str) -> bool:
        if key in self.objects:
            return False
        self.objects[key] = b""
        return True


class RecordingNotifier:
    def __init__(self, result: bool = True):
        self.calls: List[Tuple[str, str]] = []
        self.result = result

    async def notify(self, request_id: str, final_image_path: str) -> bool:
        self.calls.append((request_id, final_image_path))
        return self.result


def listing_html(images: Optional[Sequence[object]] = None, *, blob: Optional[dict] = None) -> str:
    """Сторінка лоту з `__NEXT_DATA__`; `images=None` без `blob` → структура без фото."""
    if blob is None:
        if images is None:
            blob = {"props": {"pageProps": {}}}
        else:
            blob = {
                "props": {
                    "pageProps": {
                        "initialState": {"itempage": {"item": {"item": {"img": list(images)}}}}
                    }
                }
            }
    return (
        "<html><head></head><body>"
        f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(blob)}</script>'
        "</body></html>"
    )


# ─────────────────────────────────────────────────────────────────────
# 🔧 Фікстури
# ─────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _fresh_config():
    ConfigService.reset()
    yield
    ConfigService.reset()


@pytest.fixture()
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
