"""
Нормализация requisition без изменения исходных данных.

RequisitionValidator работает на месте. Для вызывающего кода, который
не хочет, чтобы его объект менялся, здесь чистые обёртки:
- normalize(): копия -> проверка копии -> нормализованная копия
- check(): то же самое, но результат вместо исключения

Использование:
    from requisition_engine.core.domain import normalize, check

    normalized = normalize(requisition)      # raises RequisitionValidationError
    result = check(requisition)
    if not result.valid:
        print(result.error)
"""

import copy
from dataclasses import dataclass
from typing import Any, Optional

from ..config_schema import ValidationConfig
from ..exceptions import RequisitionValidationError
from ..models import (
    Requisition,
    RequisitionAsset,
    RequisitionCategory,
    RequisitionInterface,
    RequisitionMetaData,
    RequisitionMonitoredService,
    RequisitionNode,
)
from ..resolver import AddressResolver
from .validation import RequisitionValidator

# Тип сущности -> метод валидатора
_VALIDATORS = {
    Requisition: "validate_requisition",
    RequisitionNode: "validate_node",
    RequisitionInterface: "validate_interface",
    RequisitionMonitoredService: "validate_service",
    RequisitionAsset: "validate_asset",
    RequisitionCategory: "validate_category",
    RequisitionMetaData: "validate_meta_data",
}


@dataclass
class ValidationResult:
    """
    Результат проверки.

    Attributes:
        valid: Прошла ли проверка
        entity: Нормализованная копия (None если не прошла)
        error: Первая найденная ошибка (None если прошла)
    """
    valid: bool
    entity: Any = None
    error: Optional[RequisitionValidationError] = None

    def to_dict(self) -> dict:
        """Сериализация для отчётов."""
        result = {"valid": self.valid}
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


def validate_in_place(
    entity: Any,
    config: Optional[ValidationConfig] = None,
    resolver: Optional[AddressResolver] = None,
) -> None:
    """
    Проверяет сущность любого уровня на месте.

    Raises:
        TypeError: Неизвестный тип сущности
        RequisitionValidationError: Сущность невалидна
    """
    method = _VALIDATORS.get(type(entity))
    if method is None:
        raise TypeError(f"Cannot validate object of type {type(entity).__name__}")
    validator = RequisitionValidator(config=config, resolver=resolver)
    getattr(validator, method)(entity)


def normalize(
    entity: Any,
    config: Optional[ValidationConfig] = None,
    resolver: Optional[AddressResolver] = None,
) -> Any:
    """
    Возвращает проверенную и нормализованную копию сущности.

    Исходный объект не изменяется.

    Args:
        entity: Requisition или любая дочерняя сущность
        config: ValidationConfig
        resolver: Резолвер имён (для FQDN на интерфейсах)

    Returns:
        Копия с заполненными значениями по умолчанию

    Raises:
        RequisitionValidationError: Сущность невалидна
    """
    normalized = copy.deepcopy(entity)
    validate_in_place(normalized, config=config, resolver=resolver)
    return normalized


def check(
    entity: Any,
    config: Optional[ValidationConfig] = None,
    resolver: Optional[AddressResolver] = None,
) -> ValidationResult:
    """Как normalize(), но возвращает ValidationResult вместо исключения."""
    try:
        normalized = normalize(entity, config=config, resolver=resolver)
    except RequisitionValidationError as e:
        return ValidationResult(valid=False, error=e)
    return ValidationResult(valid=True, entity=normalized)
