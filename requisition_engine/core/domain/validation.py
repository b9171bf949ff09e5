"""
Валидация дерева requisition.

Проверки выполняются сверху вниз за один проход, каждый уровень
сначала проверяет своих детей, затем инварианты уровня
(уникальность среди соседей, взаимоисключающие поля).

Правила:
- fail-fast: первая ошибка прерывает проверку и поднимается наверх
- значения по умолчанию заполняются на месте во время проверки
  (status=1, snmp_primary="N", context="requisition", node_label=foreign_id)
- FQDN на интерфейсе заменяется первым полученным адресом
- на уровне requisition ошибка узла дополняется именем requisition
  и меткой узла (тип ошибки сохраняется)

Использование:
    from requisition_engine.core.domain import RequisitionValidator

    validator = RequisitionValidator(config=ValidationConfig(allow_fqdn=False))
    validator.validate_requisition(requisition)  # raises RequisitionValidationError
"""

from collections import Counter
from typing import Iterable, Optional

from ..config_schema import ValidationConfig
from ..constants import (
    DEFAULT_META_DATA_CONTEXT,
    FORBIDDEN_CHARACTERS_DISPLAY,
    SNMP_NOT_ELIGIBLE,
    SNMP_PRIMARY,
    STATUS_MANAGED,
    STATUS_UNSET,
    VALID_SNMP_PRIMARY,
    VALID_STATUSES,
    find_forbidden_characters,
)
from ..exceptions import (
    DuplicateKeyError,
    InvalidAddressError,
    InvalidCharacterError,
    InvalidEnumError,
    MissingFieldError,
    MutualExclusionError,
    RequisitionValidationError,
    ResolutionError,
    SelfReferenceError,
)
from ..logging import get_logger
from ..models import (
    Requisition,
    RequisitionAsset,
    RequisitionCategory,
    RequisitionInterface,
    RequisitionMetaData,
    RequisitionMonitoredService,
    RequisitionNode,
)
from ..resolver import AddressResolver, get_default_resolver, is_literal_address

logger = get_logger(__name__)


def _require(value: str, message: str, entity: str, field: str) -> None:
    """Пустое обязательное поле -> MissingFieldError."""
    if not value:
        raise MissingFieldError(message, entity=entity, field=field)


def _check_characters(value: str, what: str, entity: str, field: str) -> None:
    """Запрещённые символы в имени -> InvalidCharacterError."""
    found = find_forbidden_characters(value)
    if found:
        raise InvalidCharacterError(
            f"Invalid characters on {what} {value}: {FORBIDDEN_CHARACTERS_DISPLAY}",
            entity=entity,
            field=field,
            value=value,
            characters=found,
        )


def first_duplicate(values: Iterable[str]) -> Optional[str]:
    """
    Первое значение (в порядке объявления), встречающееся больше одного раза.

    Examples:
        >>> first_duplicate(["a", "b", "a"])
        'a'
        >>> first_duplicate(["a", "b"]) is None
        True
    """
    counts = Counter(values)
    for value, count in counts.items():
        if count > 1:
            return value
    return None


class RequisitionValidator:
    """
    Валидатор сущностей requisition.

    Все методы validate_* проверяют объект на месте: заполняют
    значения по умолчанию и выбрасывают RequisitionValidationError
    при первой найденной проблеме.

    Attributes:
        config: ValidationConfig (allow_fqdn, resolve_timeout)
        resolver: Резолвер имён (по умолчанию SocketResolver из config)
    """

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        resolver: Optional[AddressResolver] = None,
    ):
        self.config = config or ValidationConfig()
        self._resolver = resolver

    @property
    def resolver(self) -> AddressResolver:
        """Резолвер создаётся только когда понадобился."""
        if self._resolver is None:
            self._resolver = get_default_resolver(self.config)
        return self._resolver

    # === Field-level ===

    def validate_meta_data(self, meta: RequisitionMetaData) -> None:
        """Проверяет meta-data; пустой context заменяется на "requisition"."""
        if not meta.context:
            meta.context = DEFAULT_META_DATA_CONTEXT
        _require(meta.key, "Meta-data key cannot be empty", "meta-data", "key")
        _require(
            meta.value,
            f"Meta-data value for key {meta.key} cannot be empty",
            "meta-data",
            "value",
        )

    def validate_service(self, service: RequisitionMonitoredService) -> None:
        """Проверяет имя сервиса и его meta-data."""
        _require(service.name, "Service name cannot be empty", "service", "name")
        _check_characters(service.name, "service name", "service", "name")
        for meta in service.meta_data:
            self.validate_meta_data(meta)

    def validate_asset(self, asset: RequisitionAsset) -> None:
        """Проверяет asset: имя без запрещённых символов, непустое значение."""
        _require(asset.name, "Asset name cannot be empty", "asset", "name")
        _check_characters(asset.name, "asset name", "asset", "name")
        _require(asset.value, f"Asset value for {asset.name} cannot be empty", "asset", "value")

    def validate_category(self, category: RequisitionCategory) -> None:
        """Проверяет имя категории."""
        _require(category.name, "Category name cannot be empty", "category", "name")
        _check_characters(category.name, "category name", "category", "name")

    # === Interface ===

    def validate_interface(self, intf: RequisitionInterface) -> None:
        """
        Проверяет интерфейс.

        Порядок:
        1. ip_address не пустой
        2. status (0 -> 1), допустимы 1 и 3
        3. snmp_primary ("" -> "N"), допустимы P, S, N
        4. ip_address - литеральный адрес или резолвится (если allow_fqdn)
        5. сервисы, затем уникальность имён сервисов
        6. meta-data
        """
        _require(intf.ip_address, "IP Address cannot be empty", "interface", "ip_address")

        if intf.status == STATUS_UNSET:
            intf.status = STATUS_MANAGED
        if intf.status not in VALID_STATUSES:
            raise InvalidEnumError(
                f"Invalid status for interface {intf.ip_address}: {intf.status}",
                entity="interface",
                field="status",
                value=intf.status,
            )

        if not intf.snmp_primary:
            intf.snmp_primary = SNMP_NOT_ELIGIBLE
        if intf.snmp_primary not in VALID_SNMP_PRIMARY:
            raise InvalidEnumError(
                f"Invalid snmp-primary for interface {intf.ip_address}: {intf.snmp_primary}",
                entity="interface",
                field="snmp_primary",
                value=intf.snmp_primary,
            )

        self._validate_address(intf)
        self._validate_services(intf)

        for meta in intf.meta_data:
            self.validate_meta_data(meta)

    def _validate_address(self, intf: RequisitionInterface) -> None:
        """Литеральный адрес оставляем как есть, FQDN заменяем первым адресом."""
        address = intf.ip_address
        if is_literal_address(address):
            return

        if not self.config.allow_fqdn:
            raise InvalidAddressError(
                f"{address} is not a valid IPv4 or IPv6 address",
                value=address,
                reason=InvalidAddressError.INVALID_LITERAL,
            )

        try:
            addresses = self.resolver.resolve(address)
        except ResolutionError as e:
            logger.warning(f"Не удалось получить адрес для {address}: {e}", ip=address)
            raise InvalidAddressError(
                f"Cannot get address from {address} (invalid IP or FQDN); {e}",
                value=address,
                reason=InvalidAddressError.RESOLUTION_FAILED,
            ) from e

        if not addresses:
            raise InvalidAddressError(
                f"Cannot get address from {address} (invalid IP or FQDN); no addresses returned",
                value=address,
                reason=InvalidAddressError.RESOLUTION_FAILED,
            )

        logger.info(f"{address} translates to {addresses[0]}.", ip=addresses[0])
        intf.ip_address = addresses[0]

    def _validate_services(self, intf: RequisitionInterface) -> None:
        for service in intf.services:
            self.validate_service(service)

        duplicate = first_duplicate(s.name for s in intf.services)
        if duplicate is not None:
            raise DuplicateKeyError(
                f"Service {duplicate} is defined more than once on interface {intf.ip_address}",
                entity="interface",
                field="services",
                key=duplicate,
            )

    # === Node ===

    def validate_node(self, node: RequisitionNode) -> None:
        """
        Проверяет узел и всё, чем он владеет.

        Порядок:
        1. foreign_id не пустой и без запрещённых символов
        2. node_label по умолчанию = foreign_id
        3. parent_foreign_id и parent_node_label взаимоисключаются
        4. узел не может быть родителем самого себя
        5. интерфейсы, затем единственный primary и уникальность IP
        6. категории, assets, meta-data
        """
        _require(node.foreign_id, "Foreign ID cannot be empty", "node", "foreign_id")
        _check_characters(node.foreign_id, "Foreign ID", "node", "foreign_id")

        if not node.node_label:
            node.node_label = node.foreign_id

        if node.parent_foreign_id and node.parent_node_label:
            raise MutualExclusionError(
                "Cannot set both parent foreign ID and parent node label "
                f"on node {node.node_label}, choose one",
                entity="node",
                field="parent_foreign_id",
            )

        if node.parent_node_label == node.node_label:
            raise SelfReferenceError(
                "The parent node cannot be the node itself. "
                "The parent-node-label has to be different than the node-label",
                entity="node",
                field="parent_node_label",
                value=node.parent_node_label,
            )
        if node.parent_foreign_id == node.foreign_id:
            raise SelfReferenceError(
                "The parent node cannot be the node itself. "
                "The parent-foreign-id has to be different than the foreign-id",
                entity="node",
                field="parent_foreign_id",
                value=node.parent_foreign_id,
            )

        self._validate_interfaces(node)

        for category in node.categories:
            self.validate_category(category)
        for asset in node.assets:
            self.validate_asset(asset)
        for meta in node.meta_data:
            self.validate_meta_data(meta)

        logger.debug("Узел проверен", node=node.node_label)

    def _validate_interfaces(self, node: RequisitionNode) -> None:
        for intf in node.interfaces:
            self.validate_interface(intf)

        primary_count = sum(1 for i in node.interfaces if i.snmp_primary == SNMP_PRIMARY)
        if primary_count > 1:
            raise DuplicateKeyError(
                f"Node {node.node_label} cannot have more than one primary interface",
                entity="node",
                field="snmp_primary",
                key=SNMP_PRIMARY,
            )

        duplicate = first_duplicate(i.ip_address for i in node.interfaces)
        if duplicate is not None:
            raise DuplicateKeyError(
                f"IP Address {duplicate} is defined more than once on node {node.node_label}",
                entity="node",
                field="ip_address",
                key=duplicate,
            )

    # === Requisition ===

    def validate_requisition(self, requisition: Requisition) -> None:
        """
        Проверяет requisition целиком.

        Ошибка узла поднимается с префиксом
        "Problem on node <label> on requisition <name>" и тем же типом.
        """
        name = requisition.name
        _require(name, "Requisition name cannot be empty", "requisition", "name")
        _check_characters(name, "requisition name", "requisition", "name")
        log = logger.bind(requisition=name)

        for node in requisition.nodes:
            try:
                self.validate_node(node)
            except RequisitionValidationError as e:
                raise e.with_context(
                    f"Problem on node {node.node_label} on requisition {name}",
                    requisition=name,
                    node=node.node_label,
                ) from e

        duplicate = first_duplicate(n.foreign_id for n in requisition.nodes)
        if duplicate is not None:
            raise DuplicateKeyError(
                f"Duplicate Foreign ID {duplicate} on requisition {name}",
                entity="requisition",
                field="foreign_id",
                key=duplicate,
            )

        log.debug(f"Requisition проверен: {len(requisition.nodes)} узлов")
