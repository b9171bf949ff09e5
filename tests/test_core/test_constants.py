"""
Тесты констант и проверки запрещённых символов.
"""

import pytest

from requisition_engine.core.constants import (
    FORBIDDEN_CHARACTERS,
    FORBIDDEN_CHARACTERS_DISPLAY,
    find_forbidden_characters,
)


@pytest.mark.unit
class TestForbiddenCharacters:

    def test_set(self):
        assert FORBIDDEN_CHARACTERS == set("/\\?:&*'\"")

    def test_display_lists_every_character(self):
        for ch in FORBIDDEN_CHARACTERS:
            assert ch in FORBIDDEN_CHARACTERS_DISPLAY

    @pytest.mark.parametrize("value,expected", [
        ("web-01", ""),
        ("node_1.example", ""),
        ("a/b", "/"),
        ("a:b&c", ":&"),
        ('say "x"', '""'),
        ("", ""),
    ])
    def test_find(self, value, expected):
        assert find_forbidden_characters(value) == expected
