"""Tests for request_builder.tag.

Tests cover:
- Name extraction, whitespace trimming, empty and dash names
- ignore and omitempty modifiers, in any position
- Degenerate input (None, empty string)
"""

import pytest

from request_builder.tag import Tag


class TestTagParse:
    def test_name_only(self) -> None:
        tag = Tag.parse("X-Header")
        assert tag == Tag(name="X-Header", ignore=False, omit_empty=False)

    def test_name_is_trimmed(self) -> None:
        assert Tag.parse("  query1 , omitempty ").name == "query1"

    def test_omitempty(self) -> None:
        tag = Tag.parse("query1,omitempty")
        assert tag.omit_empty is True
        assert tag.ignore is False

    def test_dash_modifier_sets_ignore(self) -> None:
        tag = Tag.parse("query1,-")
        assert tag.name == "query1"
        assert tag.ignore is True

    def test_dash_name_sets_ignore(self) -> None:
        tag = Tag.parse("-")
        assert tag.name == "-"
        assert tag.ignore is True

    def test_modifiers_in_any_order(self) -> None:
        tag = Tag.parse("q,omitempty,-")
        assert tag.ignore is True
        assert tag.omit_empty is True

    def test_modifier_must_match_exactly(self) -> None:
        tag = Tag.parse("q,omitEmpty,--")
        assert tag.ignore is False
        assert tag.omit_empty is False

    @pytest.mark.parametrize("raw", ["", None, 42, ",omitempty"])
    def test_degenerate_input_has_empty_name(self, raw) -> None:
        assert Tag.parse(raw).name == ""


class TestTagExcluded:
    @pytest.mark.parametrize(
        "raw, excluded",
        [
            ("name", False),
            ("name,omitempty", False),
            ("name,-", True),
            ("-", True),
            ("", True),
            (",omitempty", True),
        ],
    )
    def test_excluded(self, raw: str, excluded: bool) -> None:
        assert Tag.parse(raw).excluded is excluded
