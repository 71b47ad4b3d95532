# ⚙️ auction_relay/config/config_service.py
"""
⚙️ config_service.py - Сервіс для доступу до статичної конфігурації.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з пакетного config.yaml, опційного override-файлу та .env.
- Надає єдиний метод .get() для доступу до будь-якого параметра за крапковим ключем.
- Працює як Singleton; `reset()` дозволяє перечитати конфіг (тести, CLI).
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import copy                                 # 🧬 Незалежні копії дефолтів
import logging                              # 🧾 Логування
import os                                   # 📁 Доступ до змінних середовища
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Dict, Optional      # 🧩 Типізація

logger = logging.getLogger("auction_relay.config")

# ============================
# 🧾 КОНСТАНТИ
# ============================
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"   # 📘 Конфіг, що постачається з пакетом
OVERRIDE_ENV = "AUCTION_RELAY_CONFIG"                          # 📄 Шлях до користувацького YAML

# 🔁 ENV → крапковий ключ конфігурації
ENV_KEYS: Dict[str, str] = {
    "AWS_S3_BUCKET": "storage.bucket",
    "AUCTION_RELAY_FILES_ROOT": "files.root",
    "AUCTION_RELAY_GATEWAY_URL": "gateway.url",
    "AUCTION_RELAY_HOST": "server.host",
    "AUCTION_RELAY_PORT": "server.port",
    "AUCTION_RELAY_LOG_LEVEL": "logging.level",
    "AUCTION_RELAY_ALLOCATOR": "storage.allocator",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх конфігураційних параметрів сервісу.
    Пріоритет джерел: config.yaml → $AUCTION_RELAY_CONFIG → змінні оточення.
    """

    _instance: Optional["ConfigService"] = None

    def __new__(cls, overrides: Optional[Dict[str, Any]] = None):
        # ✅ Singleton: конфігурація зчитується один раз; overrides створюють окремий екземпляр
        if overrides is not None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            instance._deep_update(instance._config, overrides)
            return instance
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = {}
            cls._instance._load_all_configs()
            logger.debug("🔄 Singleton ConfigService створено")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """♻️ Скидає singleton - наступний виклик перечитає всі джерела."""
        cls._instance = None

    def _load_all_configs(self) -> None:
        """📥 Завантажує всі джерела конфігурації в один словник."""

        # --- 1. Пакетний YAML ---
        self._deep_update(self._config, self._read_yaml(DEFAULT_CONFIG_PATH))

        # --- 2. Override-файл ---
        load_dotenv()  # 🔐 .env потрібен уже тут: шлях override може бути у ньому
        override_path = os.getenv(OVERRIDE_ENV)
        if override_path:
            self._deep_update(self._config, self._read_yaml(Path(override_path)))

        # --- 3. Змінні оточення ---
        env_vars = {key: os.getenv(env) for env, key in ENV_KEYS.items() if os.getenv(env)}
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.debug("✅ Конфігурацію завантажено: %s", sorted(self._config))

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити %s: %s", path, e)
            return {}
        return copy.deepcopy(data) if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'storage.bucket').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_int(self, key: str, default: int) -> int:
        """🔢 Як `get`, але з приведенням до int (рядки з ENV)."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("⚠️ '%s'=%r не є цілим - беремо %s", key, value, default)
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'storage.bucket' → {'storage': {'bucket': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує два словники."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value
