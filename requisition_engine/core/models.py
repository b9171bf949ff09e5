"""
Data Models для Requisition Engine.

Дерево requisition в виде dataclasses:

    Requisition
    └── RequisitionNode
        ├── RequisitionInterface
        │   ├── RequisitionMonitoredService
        │   │   └── RequisitionMetaData
        │   └── RequisitionMetaData
        ├── RequisitionCategory
        ├── RequisitionAsset
        └── RequisitionMetaData

Каждый родитель владеет своими детьми (без общих ссылок и циклов).

Сериализация поддерживает два стиля ключей:
- yaml: ipAddress, foreignID, nodes, metaData ...
- json: ip-addr, foreign-id, node, meta-data ... (формат REST API)

Использование:
    from requisition_engine.core.models import Requisition

    # Создание из dict (YAML или JSON документ)
    requisition = Requisition.from_dict(yaml.safe_load(text))

    # Проверка с нормализацией на месте
    requisition.is_valid()

    # Сериализация обратно в dict
    data = requisition.to_dict(style="json")
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional, List, Any, Dict, Tuple, Type, TypeVar

from .exceptions import ParseError

STYLE_YAML = "yaml"
STYLE_JSON = "json"

T = TypeVar("T")


# === Helpers ===

def _check_style(style: str) -> None:
    if style not in (STYLE_YAML, STYLE_JSON):
        raise ValueError(f"Unknown serialization style: {style}")


def _key(keys: Tuple[str, str], style: str) -> str:
    """Выбирает ключ (yaml, json) для стиля."""
    _check_style(style)
    return keys[0] if style == STYLE_YAML else keys[1]


def _get(data: Dict[str, Any], keys: Tuple[str, ...], default: Any = None) -> Any:
    """Возвращает значение первого найденного ключа."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _str(data: Dict[str, Any], *keys: str) -> str:
    """Строковое поле; числа из YAML (foreignID: 123) приводятся к строке."""
    value = _get(data, keys, "")
    if isinstance(value, (dict, list)):
        raise ParseError(f"Field {keys[0]} must be a scalar, got {type(value).__name__}")
    if isinstance(value, bool):
        raise ParseError(f"Field {keys[0]} must be a string, got bool")
    return str(value)


def _status(value: Any) -> int:
    """Код статуса: целое число или строка из цифр ("1"), пусто = 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and re.fullmatch(r"\s*(?:[+-]?\d+)?\s*", value):
        return int(value) if value.strip() else 0
    raise ParseError(f"Invalid status value: {value!r}")


def _mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ParseError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _children(data: Dict[str, Any], keys: Tuple[str, ...], cls: Type[T]) -> List[T]:
    """
    Разбирает список дочерних элементов.

    Одиночный mapping вместо списка принимается как список из одного элемента
    (так выглядят документы, сконвертированные из XML).
    """
    value = _get(data, keys)
    if value is None:
        return []
    if isinstance(value, dict):
        value = [value]
    if not isinstance(value, list):
        raise ParseError(f"Field {keys[0]} must be a list, got {type(value).__name__}")
    return [cls.from_dict(item) for item in value]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Разбирает отметку времени.

    Принимает datetime/date, ISO-8601 строку или epoch в миллисекундах
    (так время отдаёт REST API).

    Examples:
        >>> parse_timestamp(0)
        datetime.datetime(1970, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp("2024-03-01T10:00:00+00:00").year
        2024
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        raise ParseError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ParseError(f"Invalid timestamp: {value!r}") from e
    raise ParseError(f"Invalid timestamp: {value!r}")


def format_timestamp(value: Optional[datetime], style: str) -> Any:
    """Время в формате стиля: ISO строка (yaml) или epoch ms (json)."""
    if value is None:
        return None
    if style == STYLE_JSON:
        return int(value.timestamp() * 1000)
    return value.isoformat()


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Убирает пустые значения (omitempty)."""
    return {k: v for k, v in data.items() if v is not None and v != "" and v != [] and v != 0}


def _validator(config, resolver):
    from .domain.validation import RequisitionValidator
    return RequisitionValidator(config=config, resolver=resolver)


# === Entities ===

@dataclass
class RequisitionMetaData:
    """
    Запись meta-data.

    Attributes:
        key: Ключ
        value: Значение
        context: Контекст (по умолчанию "requisition")
    """
    key: str = ""
    value: str = ""
    context: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionMetaData":
        """Создаёт RequisitionMetaData из словаря."""
        data = _mapping(data, "meta-data")
        return cls(
            key=_str(data, "key"),
            value=_str(data, "value"),
            context=_str(data, "context"),
        )

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        """Конвертирует в словарь."""
        _check_style(style)
        result = {"key": self.key, "value": self.value}
        if self.context:
            result["context"] = self.context
        return result

    def is_valid(self, config=None, resolver=None) -> None:
        """Проверяет запись (заполняет context по умолчанию)."""
        _validator(config, resolver).validate_meta_data(self)


@dataclass
class RequisitionMonitoredService:
    """
    Мониторируемый сервис IP интерфейса.

    Attributes:
        name: Имя сервиса (ICMP, SNMP, HTTP ...)
        meta_data: Meta-data сервиса
    """
    name: str = ""
    meta_data: List[RequisitionMetaData] = field(default_factory=list)

    KEYS = {
        "name": ("name", "service-name"),
        "meta_data": ("metaData", "meta-data"),
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionMonitoredService":
        """Создаёт RequisitionMonitoredService из словаря."""
        data = _mapping(data, "monitored-service")
        return cls(
            name=_str(data, *cls.KEYS["name"]),
            meta_data=_children(data, cls.KEYS["meta_data"], RequisitionMetaData),
        )

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        """Конвертирует в словарь."""
        result = {_key(self.KEYS["name"], style): self.name}
        if self.meta_data:
            result[_key(self.KEYS["meta_data"], style)] = [m.to_dict(style) for m in self.meta_data]
        return result

    def add_meta_data(self, key: str, value: str) -> None:
        """Добавляет meta-data к сервису."""
        self.meta_data.append(RequisitionMetaData(key=key, value=value))

    def is_valid(self, config=None, resolver=None) -> None:
        """Проверяет сервис и его meta-data."""
        _validator(config, resolver).validate_service(self)


@dataclass
class RequisitionAsset:
    """Поле asset узла (name=value)."""
    name: str = ""
    value: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionAsset":
        """Создаёт RequisitionAsset из словаря."""
        data = _mapping(data, "asset")
        return cls(name=_str(data, "name"), value=_str(data, "value"))

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        """Конвертирует в словарь."""
        _check_style(style)
        return {"name": self.name, "value": self.value}

    def is_valid(self, config=None, resolver=None) -> None:
        _validator(config, resolver).validate_asset(self)


@dataclass
class RequisitionCategory:
    """Категория узла."""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionCategory":
        """Создаёт RequisitionCategory из словаря."""
        data = _mapping(data, "category")
        return cls(name=_str(data, "name"))

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        """Конвертирует в словарь."""
        _check_style(style)
        return {"name": self.name}

    def is_valid(self, config=None, resolver=None) -> None:
        _validator(config, resolver).validate_category(self)


@dataclass
class RequisitionInterface:
    """
    IP интерфейс узла.

    Attributes:
        ip_address: IP-адрес (или FQDN, если разрешён резолвинг)
        description: Описание
        snmp_primary: P (primary), S (secondary), N (not eligible)
        status: 1 (managed), 3 (not monitored), 0 = не задан
        services: Мониторируемые сервисы
        meta_data: Meta-data интерфейса
    """
    ip_address: str = ""
    description: str = ""
    snmp_primary: str = ""
    status: int = 0
    services: List[RequisitionMonitoredService] = field(default_factory=list)
    meta_data: List[RequisitionMetaData] = field(default_factory=list)

    KEYS = {
        "ip_address": ("ipAddress", "ip-addr"),
        "description": ("description", "descr"),
        "snmp_primary": ("snmpPrimary", "snmp-primary"),
        "status": ("status", "status"),
        "services": ("services", "monitored-service"),
        "meta_data": ("metaData", "meta-data"),
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionInterface":
        """Создаёт RequisitionInterface из словаря."""
        data = _mapping(data, "interface")
        status = _status(_get(data, ("status",), 0))
        return cls(
            ip_address=_str(data, "ipAddress", "ip-addr"),
            description=_str(data, "description", "descr"),
            snmp_primary=_str(data, "snmpPrimary", "snmp-primary"),
            status=status,
            services=_children(data, ("services", "monitored-service"), RequisitionMonitoredService),
            meta_data=_children(data, ("metaData", "meta-data"), RequisitionMetaData),
        )

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        """Конвертирует в словарь (пустые поля не выводятся)."""
        result = _compact({
            _key(self.KEYS["ip_address"], style): self.ip_address,
            _key(self.KEYS["description"], style): self.description,
            _key(self.KEYS["snmp_primary"], style): self.snmp_primary,
            _key(self.KEYS["status"], style): self.status,
        })
        if self.services:
            result[_key(self.KEYS["services"], style)] = [s.to_dict(style) for s in self.services]
        if self.meta_data:
            result[_key(self.KEYS["meta_data"], style)] = [m.to_dict(style) for m in self.meta_data]
        return result

    def add_meta_data(self, key: str, value: str) -> None:
        """Добавляет meta-data к интерфейсу."""
        self.meta_data.append(RequisitionMetaData(key=key, value=value))

    def get_service(self, name: str) -> Optional[RequisitionMonitoredService]:
        """Возвращает сервис по имени."""
        for service in self.services:
            if service.name == name:
                return service
        return None

    def is_valid(self, config=None, resolver=None) -> None:
        """Проверяет интерфейс (нормализует status, snmp_primary и адрес на месте)."""
        _validator(config, resolver).validate_interface(self)


@dataclass
class RequisitionNode:
    """
    Узел requisition.

    Attributes:
        node_label: Метка узла (по умолчанию = foreign_id)
        foreign_id: Уникальный ID узла внутри requisition
        location: Location (minion)
        city: Город
        building: Здание
        parent_foreign_source: Requisition родителя
        parent_foreign_id: Foreign ID родителя
        parent_node_label: Метка родителя (взаимоисключается с parent_foreign_id)
        interfaces: IP интерфейсы
        categories: Категории
        assets: Asset поля
        meta_data: Meta-data узла
    """
    node_label: str = ""
    foreign_id: str = ""
    location: str = ""
    city: str = ""
    building: str = ""
    parent_foreign_source: str = ""
    parent_foreign_id: str = ""
    parent_node_label: str = ""
    interfaces: List[RequisitionInterface] = field(default_factory=list)
    categories: List[RequisitionCategory] = field(default_factory=list)
    assets: List[RequisitionAsset] = field(default_factory=list)
    meta_data: List[RequisitionMetaData] = field(default_factory=list)

    KEYS = {
        "node_label": ("nodeLabel", "node-label"),
        "foreign_id": ("foreignID", "foreign-id"),
        "location": ("location", "location"),
        "city": ("city", "city"),
        "building": ("building", "building"),
        "parent_foreign_source": ("parentForeignSource", "parent-foreign-source"),
        "parent_foreign_id": ("parentForeignID", "parent-foreign-id"),
        "parent_node_label": ("parentNodeLabel", "parent-node-label"),
        "interfaces": ("interfaces", "interface"),
        "categories": ("categories", "category"),
        "assets": ("assets", "asset"),
        "meta_data": ("metaData", "meta-data"),
    }

    SCALARS = (
        "node_label",
        "foreign_id",
        "location",
        "city",
        "building",
        "parent_foreign_source",
        "parent_foreign_id",
        "parent_node_label",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionNode":
        """Создаёт RequisitionNode из словаря."""
        data = _mapping(data, "node")
        scalars = {name: _str(data, *cls.KEYS[name]) for name in cls.SCALARS}
        return cls(
            **scalars,
            interfaces=_children(data, cls.KEYS["interfaces"], RequisitionInterface),
            categories=_children(data, cls.KEYS["categories"], RequisitionCategory),
            assets=_children(data, cls.KEYS["assets"], RequisitionAsset),
            meta_data=_children(data, cls.KEYS["meta_data"], RequisitionMetaData),
        )

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        """Конвертирует в словарь (пустые поля не выводятся)."""
        result = _compact({
            _key(self.KEYS[name], style): getattr(self, name) for name in self.SCALARS
        })
        for name in ("interfaces", "categories", "assets", "meta_data"):
            items = getattr(self, name)
            if items:
                result[_key(self.KEYS[name], style)] = [item.to_dict(style) for item in items]
        return result

    def add_meta_data(self, key: str, value: str) -> None:
        """Добавляет meta-data к узлу."""
        self.meta_data.append(RequisitionMetaData(key=key, value=value))

    def get_interface(self, ip_address: str) -> Optional[RequisitionInterface]:
        """Возвращает интерфейс по IP-адресу."""
        for intf in self.interfaces:
            if intf.ip_address == ip_address:
                return intf
        return None

    def is_valid(self, config=None, resolver=None) -> None:
        """Проверяет узел и все дочерние элементы (с нормализацией на месте)."""
        _validator(config, resolver).validate_node(self)


@dataclass
class Requisition:
    """
    Requisition: именованный набор узлов для provisioning.

    Attributes:
        name: Имя (foreign source)
        date_stamp: Время изменения
        last_import: Время последнего импорта
        nodes: Узлы
    """
    name: str = ""
    date_stamp: Optional[datetime] = None
    last_import: Optional[datetime] = None
    nodes: List[RequisitionNode] = field(default_factory=list)

    KEYS = {
        "name": ("name", "foreign-source"),
        "date_stamp": ("dateStamp", "date-stamp"),
        "last_import": ("lastImport", "last-import"),
        "nodes": ("nodes", "node"),
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Requisition":
        """Создаёт Requisition из словаря."""
        data = _mapping(data, "requisition")
        return cls(
            name=_str(data, *cls.KEYS["name"]),
            date_stamp=parse_timestamp(_get(data, cls.KEYS["date_stamp"])),
            last_import=parse_timestamp(_get(data, cls.KEYS["last_import"])),
            nodes=_children(data, cls.KEYS["nodes"], RequisitionNode),
        )

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        """Конвертирует в словарь (пустые поля не выводятся)."""
        result = _compact({
            _key(self.KEYS["name"], style): self.name,
            _key(self.KEYS["date_stamp"], style): format_timestamp(self.date_stamp, style),
            _key(self.KEYS["last_import"], style): format_timestamp(self.last_import, style),
        })
        if self.nodes:
            result[_key(self.KEYS["nodes"], style)] = [n.to_dict(style) for n in self.nodes]
        return result

    def get_node(self, foreign_id: str) -> Optional[RequisitionNode]:
        """Возвращает узел по foreign ID."""
        for node in self.nodes:
            if node.foreign_id == foreign_id:
                return node
        return None

    def stats(self) -> "RequisitionStats":
        """Статистика requisition (количество узлов, foreign ID)."""
        return RequisitionStats(
            name=self.name,
            count=len(self.nodes),
            foreign_ids=[n.foreign_id for n in self.nodes],
            last_import=self.last_import,
        )

    def is_valid(self, config=None, resolver=None) -> None:
        """Проверяет requisition целиком (с нормализацией на месте)."""
        _validator(config, resolver).validate_requisition(self)


# === Statistics ===

@dataclass
class RequisitionsList:
    """Список имён requisition."""
    count: int = 0
    foreign_sources: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionsList":
        data = _mapping(data, "requisitions list")
        names = [str(n) for n in _get(data, ("foreignSources", "foreign-source"), [])]
        return cls(count=int(data.get("count", len(names))), foreign_sources=names)

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        return {
            "count": self.count,
            _key(("foreignSources", "foreign-source"), style): list(self.foreign_sources),
        }


@dataclass
class RequisitionStats:
    """
    Статистика одного requisition.

    Attributes:
        name: Имя requisition
        count: Количество узлов
        foreign_ids: Foreign ID узлов
        last_import: Время последнего импорта
    """
    name: str = ""
    count: int = 0
    foreign_ids: List[str] = field(default_factory=list)
    last_import: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionStats":
        data = _mapping(data, "requisition stats")
        ids = [str(i) for i in _get(data, ("foreignID", "foreign-id"), [])]
        return cls(
            name=_str(data, "name"),
            count=int(data.get("count", len(ids))),
            foreign_ids=ids,
            last_import=parse_timestamp(_get(data, ("lastImport", "last-imported"))),
        )

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        result = {
            "name": self.name,
            "count": self.count,
            _key(("foreignID", "foreign-id"), style): list(self.foreign_ids),
        }
        if self.last_import:
            result[_key(("lastImport", "last-imported"), style)] = format_timestamp(self.last_import, style)
        return result


@dataclass
class RequisitionsStats:
    """Статистика всех requisition."""
    count: int = 0
    foreign_sources: List[RequisitionStats] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequisitionsStats":
        data = _mapping(data, "requisitions stats")
        items = _get(data, ("foreignSources", "foreign-source"), [])
        stats = [RequisitionStats.from_dict(item) for item in items]
        return cls(count=int(data.get("count", len(stats))), foreign_sources=stats)

    def to_dict(self, style: str = STYLE_YAML) -> Dict[str, Any]:
        return {
            "count": self.count,
            _key(("foreignSources", "foreign-source"), style): [s.to_dict(style) for s in self.foreign_sources],
        }

    def get_requisition_stats(self, foreign_source: str) -> RequisitionStats:
        """
        Статистика requisition по имени.

        Returns:
            RequisitionStats: Найденная статистика или пустая, если имя неизвестно
        """
        for stats in self.foreign_sources:
            if stats.name == foreign_source:
                return stats
        return RequisitionStats()
