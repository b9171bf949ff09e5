"""
Pydantic схемы для валидации конфигурации.

Валидация происходит при загрузке конфигурации.
Ошибки валидации выбрасывают ConfigError.

ValidationConfig передаётся валидатору явно (без глобального состояния):
    validator = RequisitionValidator(config=ValidationConfig(allow_fqdn=False))

Пример использования:
    from requisition_engine.core.config_schema import validate_config

    config_dict = yaml.safe_load(open("config.yaml"))
    validated = validate_config(config_dict)  # raises ConfigError on failure
"""

from typing import Optional
from pydantic import BaseModel, Field

from .constants import DEFAULT_RESOLVE_TIMEOUT
from .exceptions import ConfigError


class ValidationConfig(BaseModel):
    """Настройки валидации requisition."""
    # Разрешить FQDN вместо IP-адреса на интерфейсах (будет заменён на адрес)
    allow_fqdn: bool = True
    resolve_timeout: float = Field(default=DEFAULT_RESOLVE_TIMEOUT, gt=0, le=300)
    prefer_ipv4: bool = True


class OutputConfig(BaseModel):
    """Настройки вывода."""
    default_format: str = Field(default="yaml", pattern="^(yaml|json)$")
    indent: int = Field(default=2, ge=0, le=8)


class LoggingConfig(BaseModel):
    """Настройки логирования."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: str = Field(default="size", pattern="^(size|time|none)$")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)  # min 1KB
    backup_count: int = Field(default=5, ge=1, le=100)
    when: str = "midnight"
    interval: int = Field(default=1, ge=1)


class AppConfig(BaseModel):
    """Полная конфигурация приложения."""
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    debug: bool = False


def validate_config(config_dict: dict, config_file: Optional[str] = None) -> AppConfig:
    """
    Валидирует словарь конфигурации.

    Args:
        config_dict: Словарь из YAML
        config_file: Путь к файлу (для сообщения об ошибке)

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: При ошибке валидации
    """
    try:
        return AppConfig(**config_dict)
    except Exception as e:
        # Форматируем ошибку Pydantic в читаемый вид
        error_msg = str(e)
        key = None
        if hasattr(e, "errors"):
            errors = e.errors()
            if errors:
                first_error = errors[0]
                key = ".".join(str(x) for x in first_error.get("loc", []))
                msg = first_error.get("msg", "Unknown error")
                error_msg = f"{key}: {msg}"

        raise ConfigError(
            message=f"Ошибка валидации конфигурации: {error_msg}",
            config_file=config_file or "config.yaml",
            key=key,
        ) from e


def get_default_config() -> AppConfig:
    """Возвращает конфигурацию по умолчанию."""
    return AppConfig()
