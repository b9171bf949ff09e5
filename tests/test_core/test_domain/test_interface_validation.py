"""
Тесты проверки интерфейсов.

Проверяет:
- Значения по умолчанию (status=1, snmp_primary=N)
- Допустимые status и snmp_primary
- Литеральные адреса и резолвинг FQDN
- Уникальность сервисов
"""

import pytest
from unittest.mock import MagicMock

from requisition_engine.core.config_schema import ValidationConfig
from requisition_engine.core.domain import RequisitionValidator
from requisition_engine.core.exceptions import (
    DuplicateKeyError,
    InvalidAddressError,
    InvalidCharacterError,
    InvalidEnumError,
    MissingFieldError,
    ResolutionError,
)
from requisition_engine.core.models import (
    RequisitionInterface,
    RequisitionMetaData,
    RequisitionMonitoredService,
)
from requisition_engine.core.resolver import AddressResolver


@pytest.mark.unit
class TestInterfaceDefaults:
    """Значения по умолчанию."""

    def test_defaults_filled(self):
        intf = RequisitionInterface(ip_address="10.0.0.1")
        RequisitionValidator().validate_interface(intf)

        assert intf.status == 1
        assert intf.snmp_primary == "N"
        assert intf.ip_address == "10.0.0.1"

    def test_explicit_values_kept(self):
        intf = RequisitionInterface(ip_address="10.0.0.1", status=3, snmp_primary="P")
        RequisitionValidator().validate_interface(intf)

        assert intf.status == 3
        assert intf.snmp_primary == "P"

    def test_ipv6_literal(self):
        intf = RequisitionInterface(ip_address="2001:db8::1")
        RequisitionValidator(config=ValidationConfig(allow_fqdn=False)).validate_interface(intf)
        assert intf.ip_address == "2001:db8::1"


@pytest.mark.unit
class TestInterfaceFields:
    """Проверка полей интерфейса."""

    def test_empty_ip(self):
        with pytest.raises(MissingFieldError, match="IP Address cannot be empty"):
            RequisitionValidator().validate_interface(RequisitionInterface())

    @pytest.mark.parametrize("status", [2, 4, -1, 99])
    def test_invalid_status(self, status):
        intf = RequisitionInterface(ip_address="10.0.0.1", status=status)
        with pytest.raises(InvalidEnumError, match=f"Invalid status for interface 10.0.0.1: {status}") as exc:
            RequisitionValidator().validate_interface(intf)
        assert exc.value.field == "status"

    @pytest.mark.parametrize("flag", ["X", "p", "primary", "Y"])
    def test_invalid_snmp_primary(self, flag):
        intf = RequisitionInterface(ip_address="10.0.0.1", snmp_primary=flag)
        with pytest.raises(InvalidEnumError, match="Invalid snmp-primary for interface 10.0.0.1"):
            RequisitionValidator().validate_interface(intf)

    def test_status_checked_before_snmp_primary(self):
        intf = RequisitionInterface(ip_address="10.0.0.1", status=2, snmp_primary="X")
        with pytest.raises(InvalidEnumError) as exc:
            RequisitionValidator().validate_interface(intf)
        assert exc.value.field == "status"
        # snmp_primary ещё не трогали
        assert intf.snmp_primary == "X"

    def test_enum_checked_before_address(self, strict_config):
        """Невалидный status сообщается раньше, чем невалидный адрес."""
        intf = RequisitionInterface(ip_address="not-an-ip", status=5)
        with pytest.raises(InvalidEnumError):
            RequisitionValidator(config=strict_config).validate_interface(intf)


@pytest.mark.unit
class TestInterfaceAddress:
    """Литеральные адреса и резолвинг FQDN."""

    def test_hostname_rejected_without_fqdn(self, strict_config):
        intf = RequisitionInterface(ip_address="not-an-ip")
        with pytest.raises(InvalidAddressError, match="not-an-ip is not a valid IPv4 or IPv6 address") as exc:
            RequisitionValidator(config=strict_config).validate_interface(intf)

        assert exc.value.reason == InvalidAddressError.INVALID_LITERAL
        assert intf.ip_address == "not-an-ip"

    def test_resolver_not_called_without_fqdn(self, strict_config):
        resolver = MagicMock(spec=AddressResolver)
        intf = RequisitionInterface(ip_address="router.example.com")
        with pytest.raises(InvalidAddressError):
            RequisitionValidator(config=strict_config, resolver=resolver).validate_interface(intf)
        resolver.resolve.assert_not_called()

    def test_hostname_resolved(self, static_resolver):
        intf = RequisitionInterface(ip_address="router.example.com")
        RequisitionValidator(resolver=static_resolver).validate_interface(intf)

        assert intf.ip_address == "192.0.2.10"
        assert static_resolver.calls == ["router.example.com"]

    def test_literal_not_resolved(self, static_resolver):
        intf = RequisitionInterface(ip_address="10.0.0.1")
        RequisitionValidator(resolver=static_resolver).validate_interface(intf)
        assert static_resolver.calls == []

    def test_resolution_failed(self, static_resolver):
        intf = RequisitionInterface(ip_address="unknown.example.com")
        with pytest.raises(InvalidAddressError, match="Cannot get address from unknown.example.com") as exc:
            RequisitionValidator(resolver=static_resolver).validate_interface(intf)

        assert exc.value.reason == InvalidAddressError.RESOLUTION_FAILED
        assert isinstance(exc.value.__cause__, ResolutionError)
        assert intf.ip_address == "unknown.example.com"

    def test_empty_resolver_result(self):
        resolver = MagicMock(spec=AddressResolver)
        resolver.resolve.return_value = []
        intf = RequisitionInterface(ip_address="empty.example.com")
        with pytest.raises(InvalidAddressError) as exc:
            RequisitionValidator(resolver=resolver).validate_interface(intf)
        assert exc.value.reason == InvalidAddressError.RESOLUTION_FAILED


@pytest.mark.unit
class TestInterfaceServices:
    """Сервисы и meta-data интерфейса."""

    def test_distinct_services(self):
        intf = RequisitionInterface(
            ip_address="10.0.0.1",
            services=[RequisitionMonitoredService(name="ICMP"), RequisitionMonitoredService(name="SNMP")],
        )
        RequisitionValidator().validate_interface(intf)

    def test_duplicate_services(self):
        intf = RequisitionInterface(
            ip_address="10.0.0.1",
            services=[
                RequisitionMonitoredService(name="ICMP"),
                RequisitionMonitoredService(name="SNMP"),
                RequisitionMonitoredService(name="ICMP"),
            ],
        )
        with pytest.raises(DuplicateKeyError, match="Service ICMP is defined more than once on interface 10.0.0.1") as exc:
            RequisitionValidator().validate_interface(intf)
        assert exc.value.key == "ICMP"

    def test_invalid_service_reported_before_duplicate(self):
        """Ошибка отдельного сервиса важнее дубликата."""
        intf = RequisitionInterface(
            ip_address="10.0.0.1",
            services=[
                RequisitionMonitoredService(name="ICMP"),
                RequisitionMonitoredService(name="ICMP"),
                RequisitionMonitoredService(name="HTTP:80"),
            ],
        )
        with pytest.raises(InvalidCharacterError):
            RequisitionValidator().validate_interface(intf)

    def test_meta_data_validated(self):
        intf = RequisitionInterface(ip_address="10.0.0.1", meta_data=[RequisitionMetaData(value="x")])
        with pytest.raises(MissingFieldError, match="Meta-data key"):
            RequisitionValidator().validate_interface(intf)

    def test_meta_data_context_defaulted(self):
        intf = RequisitionInterface(ip_address="10.0.0.1")
        intf.add_meta_data("role", "uplink")
        RequisitionValidator().validate_interface(intf)
        assert intf.meta_data[0].context == "requisition"


@pytest.mark.unit
def test_resolver_error_propagates_as_invalid_address():
    """Любая ResolutionError превращается в InvalidAddressError."""

    class FailingResolver(AddressResolver):
        def resolve(self, hostname):
            raise ResolutionError(f"lookup {hostname}: timed out", hostname=hostname, timeout_seconds=1)

    intf = RequisitionInterface(ip_address="slow.example.com")
    with pytest.raises(InvalidAddressError, match="timed out"):
        RequisitionValidator(resolver=FailingResolver()).validate_interface(intf)
