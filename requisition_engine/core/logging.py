"""
Логирование проверки requisition.

Модули движка пишут через StructuredLogger с именованными полями
(requisition, node, ip). CLI настраивает вывод один раз из секции
logging конфигурации:

    setup_logging_from_config(LogConfig.from_dict(app_config.logging.model_dump()))

    log = get_logger(__name__).bind(requisition="Routers")
    log.debug("Узел проверен", node="core-01")

Строка в JSON режиме:
    {"timestamp": "...", "level": "DEBUG", "message": "Узел проверен",
     "logger": "requisition_engine.core.domain.validation",
     "requisition": "Routers", "node": "core-01"}
"""

import json
import logging
import logging.handlers
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class RotationType(str, Enum):
    """Ротация файла логов."""
    SIZE = "size"
    TIME = "time"
    NONE = "none"


@dataclass
class LogConfig:
    """
    Настройки вывода логов (секция logging конфигурации).

    file_path=None означает только консоль. Для rotation=size
    используются max_bytes/backup_count, для time - when/interval.
    """
    level: int = logging.INFO
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: RotationType = RotationType.SIZE
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    when: str = "midnight"
    interval: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogConfig":
        """Строит LogConfig из словаря (уровень и ротация могут быть строками)."""
        defaults = cls()
        level = data.get("level", defaults.level)
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = defaults.level

        values = {
            name: data[name]
            for name in ("json_format", "console", "file_path", "max_bytes", "backup_count", "when", "interval")
            if name in data
        }
        return cls(level=level, rotation=RotationType(data.get("rotation", defaults.rotation)), **values)


# Атрибуты LogRecord, которые не являются полями сообщения
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Поля, переданные через extra."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class JSONFormatter(logging.Formatter):
    """Одна JSON строка на запись: timestamp, level, message, logger и extra поля."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        entry.update(_record_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """
    Консольный формат: TIMESTAMP - LEVEL - MESSAGE (requisition=X, node=Y)

    Выводятся только поля из FIELDS, в этом порядке.
    """

    FIELDS = ("requisition", "node", "ip")

    def format(self, record: logging.LogRecord) -> str:
        line = "{} - {:<8} - {}".format(
            datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S"),
            record.levelname,
            record.getMessage(),
        )
        context = ", ".join(
            f"{name}={getattr(record, name)}" for name in self.FIELDS if getattr(record, name, None)
        )
        if context:
            line += f" ({context})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger:
    """Логгер с именованными полями: logger.info("...", node="core-01", ip="10.0.0.1")."""

    def __init__(self, name: str, fields: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(name)
        self._fields = fields or {}

    def _log(self, level: int, message: str, fields: Dict[str, Any]) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra={**self._fields, **fields})

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, fields)

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Новый логгер, добавляющий fields к каждой записи."""
        return StructuredLogger(self._logger.name, {**self._fields, **fields})


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """StructuredLogger для модуля (кэшируется по имени)."""
    return _loggers.setdefault(name, StructuredLogger(name))


def _file_handler(config: LogConfig) -> logging.Handler:
    Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
    if config.rotation == RotationType.SIZE:
        return logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    if config.rotation == RotationType.TIME:
        return logging.handlers.TimedRotatingFileHandler(
            config.file_path,
            when=config.when,
            interval=config.interval,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    return logging.FileHandler(config.file_path, encoding="utf-8")


def setup_logging_from_config(config: LogConfig) -> None:
    """
    Заменяет handlers root логгера на консоль и/или файл.

    Если задан файл, JSON (при json_format) пишется в файл,
    а консоль остаётся human-readable.

    Args:
        config: LogConfig
    """
    chosen = JSONFormatter() if config.json_format else HumanFormatter()

    handlers: List[logging.Handler] = []
    if config.console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(HumanFormatter() if config.file_path else chosen)
        handlers.append(console)
    if config.file_path:
        file_handler = _file_handler(config)
        file_handler.setFormatter(chosen)
        handlers.append(file_handler)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        handler.setLevel(config.level)
        root.addHandler(handler)
    root.setLevel(config.level)
