"""
Загрузчик конфигурации из YAML.

Предоставляет доступ к настройкам через точку:
    config.validation.allow_fqdn
    config.output.default_format
    config.logging.level

Приоритет: переменные окружения > YAML файл > значения по умолчанию.
"""

import os
import logging
from typing import Any, Optional

import yaml

from .core.config_schema import AppConfig, validate_config
from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Файлы, которые ищутся если путь не указан явно
SEARCH_PATHS = [
    "requisition_engine.yaml",
    "config.yaml",
    "config.yml",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: str, key: str) -> bool:
    """Разбирает булево значение переменной окружения."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value {value!r}", key=key)


class ConfigSection:
    """Секция конфигурации с доступом через точку."""

    def __init__(self, data: dict = None):
        self._data = data or {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return super().__getattribute__(name)
        value = self._data.get(name)
        if isinstance(value, dict):
            return ConfigSection(value)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Получить значение с дефолтом."""
        return self._data.get(key, default)

    def __repr__(self) -> str:
        return f"ConfigSection({self._data})"


class Config:
    """
    Главный класс конфигурации.

    Пример:
        config.validation.allow_fqdn   # True
        config.output.default_format   # "yaml"
        config.app_config()            # AppConfig (pydantic)
    """

    def __init__(self):
        self.config_file: Optional[str] = None
        self._data = self._get_defaults()

    def _get_defaults(self) -> dict:
        """Значения по умолчанию (совпадают с AppConfig)."""
        return AppConfig().model_dump()

    def _load_yaml(self, config_file: Optional[str] = None) -> None:
        """Загружает настройки из YAML файла."""
        if config_file and not os.path.exists(config_file):
            raise ConfigError("Configuration file not found", config_file=config_file)

        if not config_file:
            for path in SEARCH_PATHS:
                if os.path.exists(path):
                    config_file = path
                    break

        if not config_file:
            return

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read configuration: {e}", config_file=config_file) from e

        if not isinstance(yaml_data, dict):
            raise ConfigError("Configuration must be a mapping", config_file=config_file)

        # Пустая секция (`validation:` без значений) = значения по умолчанию
        for section, value in list(yaml_data.items()):
            if not isinstance(self._data.get(section), dict):
                continue
            if value is None:
                del yaml_data[section]
            elif not isinstance(value, dict):
                raise ConfigError(
                    f"Section {section} must be a mapping", config_file=config_file, key=section
                )

        # Мержим с дефолтами
        self._merge_dict(self._data, yaml_data)
        self.config_file = config_file
        logger.debug(f"Конфигурация загружена из {config_file}")

    def _load_env(self) -> None:
        """Загружает настройки из переменных окружения."""
        allow_fqdn = os.getenv("REQUISITION_ALLOW_FQDN")
        if allow_fqdn:
            self._data["validation"]["allow_fqdn"] = _parse_bool(allow_fqdn, "REQUISITION_ALLOW_FQDN")

        timeout = os.getenv("REQUISITION_RESOLVE_TIMEOUT")
        if timeout:
            try:
                self._data["validation"]["resolve_timeout"] = float(timeout)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid timeout value {timeout!r}", key="REQUISITION_RESOLVE_TIMEOUT"
                ) from e

    def _merge_dict(self, base: dict, override: dict) -> None:
        """Рекурсивно мержит словари."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_dict(base[key], value)
            else:
                base[key] = value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return super().__getattribute__(name)
        value = self._data.get(name)
        if isinstance(value, dict):
            return ConfigSection(value)
        return value

    def app_config(self) -> AppConfig:
        """
        Возвращает проверенную конфигурацию.

        Raises:
            ConfigError: Значения не проходят схему
        """
        return validate_config(self._data, config_file=self.config_file)

    def reload(self, config_file: Optional[str] = None) -> None:
        """Перезагружает конфигурацию."""
        self.config_file = None
        self._data = self._get_defaults()
        self._load_yaml(config_file)
        self._load_env()


# Глобальный экземпляр
config = Config()


def load_config(config_file: Optional[str] = None) -> Config:
    """
    Загружает конфигурацию из файла.

    Args:
        config_file: Путь к YAML файлу (опционально)

    Returns:
        Config: Объект конфигурации

    Raises:
        ConfigError: Файл не найден, не читается или содержит ошибки
    """
    config.reload(config_file)
    config.app_config()
    return config
