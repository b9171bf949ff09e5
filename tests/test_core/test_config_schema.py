"""
Тесты Pydantic схемы конфигурации.
"""

import pytest

from requisition_engine.core.config_schema import (
    AppConfig,
    ValidationConfig,
    get_default_config,
    validate_config,
)
from requisition_engine.core.exceptions import ConfigError


@pytest.mark.unit
class TestValidationConfig:

    def test_defaults(self):
        cfg = ValidationConfig()
        assert cfg.allow_fqdn is True
        assert cfg.resolve_timeout == 5.0
        assert cfg.prefer_ipv4 is True

    @pytest.mark.parametrize("timeout", [0, -1, 301])
    def test_timeout_bounds(self, timeout):
        with pytest.raises(ValueError):
            ValidationConfig(resolve_timeout=timeout)


@pytest.mark.unit
class TestValidateConfig:

    def test_empty(self):
        assert validate_config({}) == get_default_config()

    def test_sections(self):
        cfg = validate_config({
            "validation": {"allow_fqdn": False, "resolve_timeout": 1.5},
            "output": {"default_format": "json"},
            "logging": {"level": "DEBUG", "json_format": True},
        })
        assert isinstance(cfg, AppConfig)
        assert cfg.validation.allow_fqdn is False
        assert cfg.validation.resolve_timeout == 1.5
        assert cfg.output.default_format == "json"
        assert cfg.logging.level == "DEBUG"

    def test_invalid_format(self):
        with pytest.raises(ConfigError, match="output.default_format") as exc:
            validate_config({"output": {"default_format": "xml"}}, config_file="my.yaml")
        assert exc.value.config_file == "my.yaml"
        assert exc.value.key == "output.default_format"

    def test_invalid_log_level(self):
        with pytest.raises(ConfigError, match="logging.level"):
            validate_config({"logging": {"level": "VERBOSE"}})
