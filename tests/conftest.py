"""
Pytest configuration и общие fixtures для тестов.

Предоставляет переиспользуемые fixtures:
- static_resolver: резолвер с фиксированной таблицей имён (без DNS)
- strict_config: ValidationConfig без резолвинга FQDN
- make_requisition: фабрика requisition из компактного описания
- sample_requisition_data: документ requisition в YAML стиле
"""

import logging

import pytest
from typing import Dict, Any

from requisition_engine.core.config_schema import ValidationConfig
from requisition_engine.core.logging import HumanFormatter, JSONFormatter
from requisition_engine.core.models import Requisition
from requisition_engine.core.resolver import StaticResolver


@pytest.fixture
def static_resolver() -> StaticResolver:
    """Резолвер, знающий несколько имён."""
    return StaticResolver({
        "router.example.com": ["192.0.2.10", "192.0.2.11"],
        "v6only.example.com": ["2001:db8::10"],
        "dup.example.com": ["10.0.0.1"],
    })


@pytest.fixture
def strict_config() -> ValidationConfig:
    """Конфигурация без резолвинга FQDN."""
    return ValidationConfig(allow_fqdn=False)


@pytest.fixture
def sample_requisition_data() -> Dict[str, Any]:
    """
    Документ requisition в YAML стиле ключей.

    Returns:
        Dict: Один узел с двумя интерфейсами, категорией, asset и meta-data
    """
    return {
        "name": "Routers",
        "nodes": [
            {
                "foreignID": "core-01",
                "location": "Default",
                "city": "Berlin",
                "interfaces": [
                    {
                        "ipAddress": "10.0.0.1",
                        "description": "mgmt",
                        "snmpPrimary": "P",
                        "services": [
                            {"name": "ICMP"},
                            {"name": "SNMP", "metaData": [{"key": "port", "value": "161"}]},
                        ],
                    },
                    {"ipAddress": "10.0.0.2", "status": 3},
                ],
                "categories": [{"name": "Production"}],
                "assets": [{"name": "vendor", "value": "Cisco"}],
                "metaData": [{"key": "owner", "value": "noc", "context": "custom"}],
            },
            {
                "foreignID": "core-02",
                "nodeLabel": "Core 02",
                "parentForeignID": "core-01",
                "interfaces": [{"ipAddress": "10.0.1.1"}],
            },
        ],
    }


@pytest.fixture
def make_requisition():
    """
    Фабрика requisition.

    Usage:
        req = make_requisition({"n1": ["10.0.0.1"], "n2": ["10.0.0.2"]})
    """
    def _make(nodes: Dict[str, list], name: str = "Test") -> Requisition:
        return Requisition.from_dict({
            "name": name,
            "nodes": [
                {"foreignID": fid, "interfaces": [{"ipAddress": ip} for ip in ips]}
                for fid, ips in nodes.items()
            ],
        })
    return _make


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Убирает handlers, созданные setup_logging*, после теста."""
    level = logging.getLogger().level
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (JSONFormatter, HumanFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
