"""
Domain Layer для Requisition Engine.

Правила проверки и нормализации дерева requisition.
Не зависит от CLI, формата файлов и транспорта.

- RequisitionValidator: проверка на месте (fail-fast)
- normalize / check: чистые обёртки, возвращают копию

Использование:
    from requisition_engine.core.domain import normalize

    normalized = normalize(requisition, config=ValidationConfig(allow_fqdn=False))
"""

from .validation import RequisitionValidator, first_duplicate
from .normalizer import ValidationResult, check, normalize, validate_in_place

__all__ = [
    "RequisitionValidator",
    "first_duplicate",
    "ValidationResult",
    "check",
    "normalize",
    "validate_in_place",
]
