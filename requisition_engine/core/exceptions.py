"""
Типизированные исключения для Requisition Engine.

Иерархия:
    RequisitionEngineError (базовый)
    ├── RequisitionValidationError (отклонённые входные данные)
    │   ├── MissingFieldError (пустое обязательное поле)
    │   ├── InvalidCharacterError (запрещённые символы в имени)
    │   ├── InvalidEnumError (status / snmp-primary вне допустимых значений)
    │   ├── InvalidAddressError (не IP-адрес и не резолвится)
    │   ├── DuplicateKeyError (повтор среди соседних элементов)
    │   ├── MutualExclusionError (взаимоисключающие поля)
    │   └── SelfReferenceError (узел ссылается сам на себя)
    ├── ResolutionError (ошибка DNS резолвинга)
    ├── ParseError (некорректный входной документ)
    └── ConfigError (конфигурация)

Пример использования:
    from requisition_engine.core.exceptions import RequisitionValidationError

    try:
        validator.validate_requisition(requisition)
    except DuplicateKeyError as e:
        logger.error(f"Дубликат: {e.key} - {e.message}")
    except RequisitionValidationError as e:
        logger.error(f"Requisition отклонён: {e}")
"""

import copy
from typing import Optional, Any


class RequisitionEngineError(Exception):
    """
    Базовое исключение для всех ошибок Requisition Engine.

    Attributes:
        message: Описание ошибки
        details: Дополнительные детали (dict)
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        """Сериализация для логов/отчётов."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# === Validation Errors ===

class RequisitionValidationError(RequisitionEngineError):
    """
    Входные данные не прошли валидацию.

    Attributes:
        entity: Тип сущности (requisition, node, interface, service, asset, category, meta-data)
        field: Поле с ошибкой
        value: Значение которое не прошло валидацию
    """

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[dict] = None,
    ):
        self.entity = entity
        self.field = field
        self.value = value
        details = details or {}
        if entity:
            details["entity"] = entity
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]  # Ограничиваем размер
        super().__init__(message, details)

    def with_context(self, prefix: str, **context: Any) -> "RequisitionValidationError":
        """
        Возвращает копию ошибки того же класса с префиксом сообщения.

        Используется на уровне requisition: ошибка узла дополняется
        именем requisition и меткой узла, но тип ошибки не меняется.

        Args:
            prefix: Префикс сообщения
            **context: Дополнительные детали (requisition, node)

        Returns:
            RequisitionValidationError: Новая ошибка того же класса
        """
        wrapped = copy.copy(self)
        wrapped.message = f"{prefix}: {self.message}"
        wrapped.details = {**self.details, **{k: v for k, v in context.items() if v}}
        wrapped.args = (wrapped.message,)
        return wrapped


class MissingFieldError(RequisitionValidationError):
    """
    Обязательное поле пустое.

    Пример:
        raise MissingFieldError("Foreign ID cannot be empty", entity="node", field="foreign_id")
    """
    pass


class InvalidCharacterError(RequisitionValidationError):
    """
    Имя содержит запрещённые символы.

    Attributes:
        characters: Найденные запрещённые символы
    """

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        characters: str = "",
        details: Optional[dict] = None,
    ):
        self.characters = characters
        details = details or {}
        if characters:
            details["characters"] = characters
        super().__init__(message, entity, field, value, details)


class InvalidEnumError(RequisitionValidationError):
    """
    Значение вне допустимого набора (status, snmp-primary).

    Пример:
        raise InvalidEnumError("Invalid status for interface 10.0.0.1: 2",
                               entity="interface", field="status", value=2)
    """
    pass


class InvalidAddressError(RequisitionValidationError):
    """
    IP-адрес интерфейса не литерал и не резолвится.

    Attributes:
        reason: INVALID_LITERAL (резолвинг запрещён) или RESOLUTION_FAILED
    """

    INVALID_LITERAL = "invalid_literal"
    RESOLUTION_FAILED = "resolution_failed"

    def __init__(
        self,
        message: str,
        value: Optional[Any] = None,
        reason: str = INVALID_LITERAL,
        details: Optional[dict] = None,
    ):
        self.reason = reason
        details = details or {}
        details["reason"] = reason
        super().__init__(message, "interface", "ip_address", value, details)


class DuplicateKeyError(RequisitionValidationError):
    """
    Ключ повторяется среди соседних элементов.

    Attributes:
        key: Повторяющееся значение (имя сервиса, IP, foreign ID)

    Пример:
        raise DuplicateKeyError("Duplicate Foreign ID n1 on requisition Test",
                                entity="requisition", field="foreign_id", key="n1")
    """

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        field: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.key = key
        super().__init__(message, entity, field, key, details)


class MutualExclusionError(RequisitionValidationError):
    """Заданы оба взаимоисключающих поля (parent foreign ID и parent node label)."""
    pass


class SelfReferenceError(RequisitionValidationError):
    """Узел указан родителем самого себя."""
    pass


# === Resolution Errors ===

class ResolutionError(RequisitionEngineError):
    """
    Не удалось получить адрес по имени хоста.

    Attributes:
        hostname: Имя хоста
        timeout_seconds: Значение таймаута (если ошибка по таймауту)
    """

    def __init__(
        self,
        message: str,
        hostname: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        details: Optional[dict] = None,
    ):
        self.hostname = hostname
        self.timeout_seconds = timeout_seconds
        details = details or {}
        if hostname:
            details["hostname"] = hostname
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details)


# === Parse Errors ===

class ParseError(RequisitionEngineError):
    """
    Входной документ не удалось разобрать в дерево requisition.

    Attributes:
        source: Путь к файлу или "-" для STDIN
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.source = source
        details = details or {}
        if source:
            details["source"] = source
        super().__init__(message, details)


# === Config Errors ===

class ConfigError(RequisitionEngineError):
    """
    Ошибка конфигурации.

    Attributes:
        config_file: Путь к файлу конфигурации
        key: Ключ конфигурации с ошибкой

    Пример:
        raise ConfigError("Missing required field", config_file="config.yaml", key="validation.allow_fqdn")
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.config_file = config_file
        self.key = key
        details = details or {}
        if config_file:
            details["config_file"] = config_file
        if key:
            details["key"] = key
        super().__init__(message, details)


# === Utility Functions ===

def format_error_for_log(error: Exception) -> str:
    """
    Форматирует ошибку для вывода в лог.

    Args:
        error: Исключение

    Returns:
        str: Отформатированная строка ошибки
    """
    if isinstance(error, RequisitionEngineError):
        if error.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in error.details.items())
            return f"{error.__class__.__name__}: {error.message} ({details_str})"
        return f"{error.__class__.__name__}: {error.message}"
    return f"{error.__class__.__name__}: {error}"
