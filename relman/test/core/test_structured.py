"""Tests for relman.core.structured module."""

from __future__ import annotations

from relman.core.structured import as_str_dict, get_nested_str, get_str, get_table


class TestStructured:
    def test_as_str_dict(self) -> None:
        assert as_str_dict({"a": 1}) == {"a": 1}
        assert as_str_dict({1: "a"}) is None
        assert as_str_dict(["a"]) is None

    def test_get_str_strips_and_rejects_blank(self) -> None:
        table: dict[str, object] = {"name": "  widget ", "blank": "   ", "number": 3}
        assert get_str(table, "name") == "widget"
        assert get_str(table, "blank") is None
        assert get_str(table, "number") is None
        assert get_str(table, "missing") is None

    def test_get_table(self) -> None:
        assert get_table({"tree": {"sha": "t1"}}, "tree") == {"sha": "t1"}
        assert get_table({"tree": "t1"}, "tree") is None

    def test_get_nested_str(self) -> None:
        doc: dict[str, object] = {"package": {"name": "widget", "version": "0.3.1"}}
        assert get_nested_str(doc, "package", "version") == "0.3.1"
        assert get_nested_str(doc, "workspace", "package", "version") is None
        assert get_nested_str({"package": "x"}, "package", "version") is None
