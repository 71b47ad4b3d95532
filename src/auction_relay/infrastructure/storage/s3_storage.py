# 🪣 auction_relay/infrastructure/storage/s3_storage.py
"""
🪣 S3ObjectStorage - асинхронний фасад над boto3 для вивантаження партій фото.

🔹 Усі виклики boto3 блокувальні, тому виконуються у `asyncio.to_thread`.
🔹 `list_folder_numbers` імітує лістинг каталогу через `Delimiter="/"`.
🔹 `create_if_absent` - умовний PUT (`IfNoneMatch="*"`) для атомарного резерву ключа.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import boto3                                                    # 🪣 AWS SDK
from botocore.exceptions import BotoCoreError, ClientError      # 🚨 Винятки SDK

# 🔠 Системні імпорти
import asyncio                                                  # 🧵 to_thread
import logging                                                  # 🧾 Логування
from pathlib import Path                                        # 🛤️ Локальні файли
from typing import Any, List, Optional                          # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from auction_relay.shared.errors import UploadError
from auction_relay.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.storage.s3")

_PRECONDITION_CODES = frozenset({"PreconditionFailed", "412", "ConditionalRequestConflict"})


def parse_folder_number(common_prefix: str, prefix: str) -> Optional[int]:
    """`images/12/` → 12; усе нечислове → None."""
    segment = common_prefix[len(prefix):] if common_prefix.startswith(prefix) else common_prefix
    segment = segment.strip("/")
    if not segment.isdigit():
        return None
    return int(segment)


class S3ObjectStorage:
    """🪣 Реалізація `IObjectStorage` поверх boto3-клієнта."""

    def __init__(self, bucket: str, *, client: Any = None, region: Optional[str] = None) -> None:
        self.bucket = bucket
        self._client = client if client is not None else boto3.client("s3", region_name=region)

    # ================================
    # 📂 ЛІСТИНГ
    # ================================
    async def list_folder_numbers(self, prefix: str) -> List[int]:
        return await asyncio.to_thread(self._list_folder_numbers_sync, prefix)

    def _list_folder_numbers_sync(self, prefix: str) -> List[int]:
        numbers: List[int] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix, Delimiter="/"):
                for entry in page.get("CommonPrefixes") or []:
                    number = parse_folder_number(entry.get("Prefix", ""), prefix)
                    if number is not None:
                        numbers.append(number)
        except (BotoCoreError, ClientError) as exc:
            logger.error("❌ Не вдалося отримати перелік %s/%s: %s", self.bucket, prefix, exc)
            raise UploadError(f"Failed to list s3://{self.bucket}/{prefix}", key=prefix, details=str(exc)) from exc
        logger.debug("📂 %s/%s → %s", self.bucket, prefix, numbers)
        return numbers

    # ================================
    # 📤 ЗАПИС
    # ================================
    async def put_file(self, key: str, path: Path) -> None:
        await asyncio.to_thread(self._put_file_sync, key, Path(path))

    def _put_file_sync(self, key: str, path: Path) -> None:
        try:
            body = path.read_bytes()
            response = self._client.put_object(Bucket=self.bucket, Key=key, Body=body)
        except OSError as exc:
            raise UploadError(f"Failed to read local file {path}", key=key, details=str(exc)) from exc
        except (BotoCoreError, ClientError) as exc:
            logger.error("❌ PUT s3://%s/%s: %s", self.bucket, key, exc)
            raise UploadError(f"Failed to upload s3://{self.bucket}/{key}", key=key, details=str(exc)) from exc
        logger.info("📤 File uploaded successfully: %s (ETag=%s)", key, (response or {}).get("ETag"))

    async def create_if_absent(self, key: str) -> bool:
        return await asyncio.to_thread(self._create_if_absent_sync, key)

    def _create_if_absent_sync(self, key: str) -> bool:
        try:
            self._client.put_object(Bucket=self.bucket, Key=key, Body=b"", IfNoneMatch="*")
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            status = str(exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode", ""))
            if code in _PRECONDITION_CODES or status == "412":
                logger.debug("🔒 Ключ уже існує: %s", key)
                return False
            raise UploadError(f"Failed to reserve s3://{self.bucket}/{key}", key=key, details=str(exc)) from exc
        except BotoCoreError as exc:
            raise UploadError(f"Failed to reserve s3://{self.bucket}/{key}", key=key, details=str(exc)) from exc
        return True


__all__ = ["S3ObjectStorage", "parse_folder_number"]
