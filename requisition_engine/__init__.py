"""
Requisition Engine - проверка и нормализация requisition для provisioning.

Requisition описывает инвентарь мониторинга:
requisition -> узлы -> интерфейсы -> сервисы (+ категории, assets, meta-data).

Модуль:
- Проверяет структуру дерева (обязательные поля, запрещённые символы)
- Проверяет инварианты уровней (уникальность, единственный primary)
- Заполняет значения по умолчанию
- Заменяет FQDN на интерфейсах адресами

Примеры использования:
    # CLI
    python -m requisition_engine validate routers.yaml
    python -m requisition_engine validate routers.json --format json --no-fqdn

    # Python API
    from requisition_engine import Requisition, ValidationConfig, normalize

    requisition = Requisition.from_dict(data)
    normalized = normalize(requisition, config=ValidationConfig(allow_fqdn=False))
"""

__version__ = "1.0.0"

from .core.models import (
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
from .core.config_schema import ValidationConfig
from .core.exceptions import RequisitionEngineError, RequisitionValidationError
from .core.resolver import AddressResolver, SocketResolver, StaticResolver
from .core.domain import RequisitionValidator, ValidationResult, check, normalize

__all__ = [
    "__version__",
    # Models
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
    # Validation
    "ValidationConfig",
    "RequisitionValidator",
    "ValidationResult",
    "check",
    "normalize",
    # Resolver
    "AddressResolver",
    "SocketResolver",
    "StaticResolver",
    # Errors
    "RequisitionEngineError",
    "RequisitionValidationError",
]
