"""Tests for CLI formatting utilities."""

from blockcanvas.cli._format import SCHEMA_VERSION, format_point, json_envelope, print_table


class TestFormatPoint:
    def test_none(self):
        assert format_point(None) == "—"

    def test_integral(self):
        assert format_point((120, 20.0)) == "(120, 20)"

    def test_fractional(self):
        assert format_point((2.5, -1)) == "(2.5, -1)"


class TestJsonEnvelope:
    def test_structure(self):
        envelope = json_envelope("inspect", {"nodes": []})
        assert envelope["schema_version"] == SCHEMA_VERSION
        assert envelope["command"] == "inspect"
        assert envelope["data"] == {"nodes": []}
        assert "generated_at" in envelope


class TestPrintTable:
    def test_empty_rows(self):
        assert print_table(["Id", "Kind"], []) == []

    def test_alignment(self):
        lines = print_table(["Id", "Kind"], [["1", "add"], ["12", "source"]])
        assert lines[0] == "  Id  Kind  "
        assert lines[1] == "  ──  ──────"
        assert lines[2] == "   1  add   "
        assert lines[3] == "  12  source"
