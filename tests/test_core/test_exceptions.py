"""
Тесты иерархии исключений.
"""

import pytest

from requisition_engine.core.exceptions import (
    ConfigError,
    DuplicateKeyError,
    InvalidAddressError,
    InvalidCharacterError,
    MissingFieldError,
    ParseError,
    RequisitionEngineError,
    RequisitionValidationError,
    ResolutionError,
    format_error_for_log,
)


@pytest.mark.unit
class TestValidationErrors:

    def test_hierarchy(self):
        for cls in (MissingFieldError, InvalidCharacterError, InvalidAddressError, DuplicateKeyError):
            assert issubclass(cls, RequisitionValidationError)
        assert issubclass(RequisitionValidationError, RequisitionEngineError)
        assert not issubclass(ResolutionError, RequisitionValidationError)

    def test_details(self):
        error = InvalidCharacterError(
            "Invalid characters on category name a/b", entity="category", field="name",
            value="a/b", characters="/",
        )
        assert error.details == {"entity": "category", "field": "name", "value": "a/b", "characters": "/"}
        assert str(error) == "Invalid characters on category name a/b"

    def test_to_dict(self):
        error = DuplicateKeyError("Duplicate Foreign ID n1 on requisition Test", entity="requisition", key="n1")
        assert error.to_dict() == {
            "error_type": "DuplicateKeyError",
            "message": "Duplicate Foreign ID n1 on requisition Test",
            "details": {"entity": "requisition", "value": "n1"},
        }

    def test_with_context_keeps_type(self):
        error = InvalidAddressError("bad is not valid", value="bad", reason=InvalidAddressError.INVALID_LITERAL)
        wrapped = error.with_context("Problem on node n1 on requisition Test", requisition="Test", node="n1")

        assert type(wrapped) is InvalidAddressError
        assert wrapped.reason == InvalidAddressError.INVALID_LITERAL
        assert str(wrapped) == "Problem on node n1 on requisition Test: bad is not valid"
        assert wrapped.details["node"] == "n1"
        # оригинал не изменился
        assert str(error) == "bad is not valid"
        assert "node" not in error.details

    def test_value_truncated(self):
        error = MissingFieldError("x", value="a" * 500)
        assert len(error.details["value"]) == 100


@pytest.mark.unit
class TestOtherErrors:

    def test_parse_error(self):
        error = ParseError("Invalid YAML", source="routers.yaml")
        assert error.details == {"source": "routers.yaml"}

    def test_config_error(self):
        error = ConfigError("bad", config_file="c.yaml", key="validation.allow_fqdn")
        assert error.key == "validation.allow_fqdn"

    def test_format_error_for_log(self):
        assert format_error_for_log(ParseError("Invalid YAML", source="a.yaml")) == (
            "ParseError: Invalid YAML (source='a.yaml')"
        )
        assert format_error_for_log(ValueError("boom")) == "ValueError: boom"
