"""
Core модули Requisition Engine.

Содержит:
- models: дерево requisition (dataclasses) и статистика
- domain: валидация и нормализация
- resolver: резолвинг FQDN в адреса
- exceptions: типизированные исключения
- config_schema: Pydantic схемы конфигурации
- logging: Structured Logging (JSON/Human-readable)
- constants: константы (запрещённые символы, коды статуса)
"""

from .constants import (
    FORBIDDEN_CHARACTERS,
    STATUS_MANAGED,
    STATUS_NOT_MONITORED,
    SNMP_PRIMARY,
    SNMP_SECONDARY,
    SNMP_NOT_ELIGIBLE,
    DEFAULT_META_DATA_CONTEXT,
)
from .exceptions import (
    RequisitionEngineError,
    RequisitionValidationError,
    MissingFieldError,
    InvalidCharacterError,
    InvalidEnumError,
    InvalidAddressError,
    DuplicateKeyError,
    MutualExclusionError,
    SelfReferenceError,
    ResolutionError,
    ParseError,
    ConfigError,
    format_error_for_log,
)
from .config_schema import (
    AppConfig,
    ValidationConfig,
    LoggingConfig,
    OutputConfig,
    validate_config,
)
from .logging import (
    get_logger,
    setup_logging_from_config,
    StructuredLogger,
    JSONFormatter,
    HumanFormatter,
    LogConfig,
    RotationType,
)
from .models import (
    Requisition,
    RequisitionNode,
    RequisitionInterface,
    RequisitionMonitoredService,
    RequisitionAsset,
    RequisitionCategory,
    RequisitionMetaData,
    RequisitionsList,
    RequisitionStats,
    RequisitionsStats,
)
from .resolver import (
    AddressResolver,
    SocketResolver,
    StaticResolver,
    is_literal_address,
)
from .domain import (
    RequisitionValidator,
    ValidationResult,
    check,
    normalize,
    validate_in_place,
)

__all__ = [
    # Constants
    "FORBIDDEN_CHARACTERS",
    "STATUS_MANAGED",
    "STATUS_NOT_MONITORED",
    "SNMP_PRIMARY",
    "SNMP_SECONDARY",
    "SNMP_NOT_ELIGIBLE",
    "DEFAULT_META_DATA_CONTEXT",
    # Exceptions
    "RequisitionEngineError",
    "RequisitionValidationError",
    "MissingFieldError",
    "InvalidCharacterError",
    "InvalidEnumError",
    "InvalidAddressError",
    "DuplicateKeyError",
    "MutualExclusionError",
    "SelfReferenceError",
    "ResolutionError",
    "ParseError",
    "ConfigError",
    "format_error_for_log",
    # Config
    "AppConfig",
    "ValidationConfig",
    "LoggingConfig",
    "OutputConfig",
    "validate_config",
    # Structured Logging
    "get_logger",
    "setup_logging_from_config",
    "StructuredLogger",
    "JSONFormatter",
    "HumanFormatter",
    "LogConfig",
    "RotationType",
    # Data Models
    "Requisition",
    "RequisitionNode",
    "RequisitionInterface",
    "RequisitionMonitoredService",
    "RequisitionAsset",
    "RequisitionCategory",
    "RequisitionMetaData",
    "RequisitionsList",
    "RequisitionStats",
    "RequisitionsStats",
    # Resolver
    "AddressResolver",
    "SocketResolver",
    "StaticResolver",
    "is_literal_address",
    # Domain Layer
    "RequisitionValidator",
    "ValidationResult",
    "check",
    "normalize",
    "validate_in_place",
]
