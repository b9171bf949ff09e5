"""
Тесты чистой нормализации (normalize / check / validate_in_place).
"""

import pytest

from requisition_engine.core.config_schema import ValidationConfig
from requisition_engine.core.domain import check, normalize, validate_in_place
from requisition_engine.core.exceptions import DuplicateKeyError, InvalidAddressError
from requisition_engine.core.models import (
    Requisition,
    RequisitionInterface,
    RequisitionMetaData,
    RequisitionNode,
)


@pytest.mark.unit
class TestNormalize:
    """normalize() возвращает копию и не трогает исходный объект."""

    def test_returns_normalized_copy(self, make_requisition):
        original = make_requisition({"n1": ["10.0.0.1"]})
        normalized = normalize(original)

        assert normalized is not original
        assert normalized.nodes[0].node_label == "n1"
        assert normalized.nodes[0].interfaces[0].status == 1
        # исходник без изменений
        assert original.nodes[0].node_label == ""
        assert original.nodes[0].interfaces[0].status == 0
        assert original.nodes[0].interfaces[0].snmp_primary == ""

    def test_hostname_rewritten_only_in_copy(self, make_requisition, static_resolver):
        original = make_requisition({"n1": ["router.example.com"]})
        normalized = normalize(original, resolver=static_resolver)

        assert normalized.nodes[0].interfaces[0].ip_address == "192.0.2.10"
        assert original.nodes[0].interfaces[0].ip_address == "router.example.com"

    def test_hostname_rejected_when_disabled(self, make_requisition, static_resolver):
        original = make_requisition({"n1": ["router.example.com"]})
        with pytest.raises(InvalidAddressError):
            normalize(original, config=ValidationConfig(allow_fqdn=False), resolver=static_resolver)
        assert static_resolver.calls == []

    def test_child_entities(self):
        meta = normalize(RequisitionMetaData(key="a", value="b"))
        assert meta.context == "requisition"

        intf = normalize(RequisitionInterface(ip_address="10.0.0.1"))
        assert intf.snmp_primary == "N"

        node = normalize(RequisitionNode(foreign_id="n1"))
        assert node.node_label == "n1"

    def test_unknown_type(self):
        with pytest.raises(TypeError, match="Cannot validate object of type dict"):
            normalize({"name": "Test"})


@pytest.mark.unit
class TestCheck:
    """check() возвращает результат вместо исключения."""

    def test_valid(self, make_requisition):
        result = check(make_requisition({"n1": ["10.0.0.1"]}))

        assert result.valid is True
        assert result.error is None
        assert result.entity.nodes[0].interfaces[0].snmp_primary == "N"
        assert result.to_dict() == {"valid": True}

    def test_invalid(self, make_requisition):
        result = check(make_requisition({"n1": ["10.0.0.1"], "n2": []}, name="Dup/Name"))

        assert result.valid is False
        assert result.entity is None
        data = result.to_dict()
        assert data["valid"] is False
        assert data["error"]["error_type"] == "InvalidCharacterError"

    def test_duplicate_error_result(self):
        requisition = Requisition.from_dict({"name": "Test", "nodes": [{"foreignID": "n1"}, {"foreignID": "n1"}]})
        result = check(requisition)
        assert isinstance(result.error, DuplicateKeyError)


@pytest.mark.unit
def test_validate_in_place_mutates(make_requisition):
    requisition = make_requisition({"n1": ["10.0.0.1"]})
    validate_in_place(requisition)
    assert requisition.nodes[0].node_label == "n1"
