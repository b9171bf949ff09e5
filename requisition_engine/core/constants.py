"""
Константы Requisition Engine.

Значения, которые разделяют модели, валидаторы и CLI:
- Запрещённые символы в именах и Foreign ID
- Коды статуса интерфейса
- Флаги SNMP primary
- Значения по умолчанию
"""

from typing import FrozenSet


# Символы, недопустимые в именах (requisition, foreign ID, service, asset, category)
FORBIDDEN_CHARACTERS: FrozenSet[str] = frozenset("/\\?:&*'\"")

# Порядок как в сообщениях об ошибке
FORBIDDEN_CHARACTERS_DISPLAY = "/, \\, ?, :, &, *, ', \""


# === Статус интерфейса ===

STATUS_UNSET = 0
STATUS_MANAGED = 1
STATUS_NOT_MONITORED = 3

VALID_STATUSES: FrozenSet[int] = frozenset({STATUS_MANAGED, STATUS_NOT_MONITORED})


# === SNMP primary ===

SNMP_PRIMARY = "P"
SNMP_SECONDARY = "S"
SNMP_NOT_ELIGIBLE = "N"

VALID_SNMP_PRIMARY: FrozenSet[str] = frozenset({SNMP_PRIMARY, SNMP_SECONDARY, SNMP_NOT_ELIGIBLE})


# === Meta-data ===

DEFAULT_META_DATA_CONTEXT = "requisition"


# === Резолвинг адресов ===

DEFAULT_RESOLVE_TIMEOUT = 5.0


def find_forbidden_characters(value: str) -> str:
    """
    Возвращает запрещённые символы, найденные в строке.

    Args:
        value: Проверяемая строка

    Returns:
        str: Найденные символы в порядке появления (пустая строка если чисто)

    Examples:
        >>> find_forbidden_characters("web-01")
        ''
        >>> find_forbidden_characters("a/b:c")
        '/:'
    """
    return "".join(ch for ch in value if ch in FORBIDDEN_CHARACTERS)
