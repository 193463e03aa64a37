"""Tests for block kind declarations."""

from __future__ import annotations

import logging

import pytest

from blockcanvas import BlockSchema, PortSide, SchemaError, load_schema
from blockcanvas.schema import dump_schema, get_block, has_port, param_index, port_index
from conftest import SCHEMA


class TestPortSide:
    def test_opposite(self):
        assert PortSide.INPUT.opposite is PortSide.OUTPUT
        assert PortSide.OUTPUT.opposite is PortSide.INPUT


class TestBlockSchema:
    def test_ports_by_side(self):
        block = SCHEMA["add"]
        assert block.ports(PortSide.INPUT) == ("a", "b")
        assert block.ports(PortSide.OUTPUT) == ("sum",)

    def test_port_rows_is_taller_side(self):
        assert SCHEMA["add"].port_rows == 2
        assert BlockSchema().port_rows == 0


class TestLookups:
    def test_unknown_kind_is_empty(self):
        assert get_block(SCHEMA, "nope") == BlockSchema()

    def test_port_index_int_passes_through(self):
        assert port_index(SCHEMA, "add", PortSide.INPUT, 1) == 1

    def test_port_index_by_name(self):
        assert port_index(SCHEMA, "add", PortSide.INPUT, "b") == 1

    def test_unknown_port_name_resolves_to_zero(self, caplog):
        with caplog.at_level(logging.WARNING, logger="blockcanvas.schema"):
            assert port_index(SCHEMA, "add", PortSide.INPUT, "zzz") == 0
        assert "no input port named 'zzz'" in caplog.text

    def test_param_index(self):
        assert param_index(SCHEMA, "add", "scale") == 0
        assert param_index(SCHEMA, "add", "missing") is None
        assert param_index(SCHEMA, "nope", "scale") is None

    def test_has_port(self):
        assert has_port(SCHEMA, "add", PortSide.INPUT, "a")
        assert has_port(SCHEMA, "add", PortSide.INPUT, 1)
        assert not has_port(SCHEMA, "add", PortSide.INPUT, 2)
        assert not has_port(SCHEMA, "add", PortSide.OUTPUT, "a")
        assert not has_port(SCHEMA, "add", PortSide.INPUT, -1)


class TestLoadSchema:
    def test_loads_declarations(self):
        schema = load_schema({"add": {"inputs": ["a", "b"], "outputs": ["sum"], "params": ["k"], "label": "Add"}})
        assert schema["add"] == BlockSchema(("a", "b"), ("sum",), ("k",), "Add")

    def test_missing_sections_default_empty(self):
        assert load_schema({"noop": {}})["noop"] == BlockSchema()

    def test_block_schema_passes_through(self):
        assert load_schema(SCHEMA) == SCHEMA

    def test_not_a_mapping(self):
        with pytest.raises(SchemaError, match="mapping of kinds"):
            load_schema(["add"])  # type: ignore[arg-type]

    def test_unknown_field(self):
        with pytest.raises(SchemaError, match="Block kind 'add': unknown fields: colour"):
            load_schema({"add": {"colour": "red"}})

    def test_duplicate_port_names(self):
        with pytest.raises(SchemaError) as exc_info:
            load_schema({"add": {"inputs": ["a", "a"]}})
        assert exc_info.value.kind == "add"
        assert "duplicate inputs: a" in str(exc_info.value)

    def test_string_instead_of_list(self):
        with pytest.raises(SchemaError, match="must be a list of names"):
            load_schema({"add": {"inputs": "ab"}})

    def test_dump_inverts_load(self):
        data = {"add": {"inputs": ["a"], "outputs": ["sum"], "params": [], "label": "Add"}}
        assert dump_schema(load_schema(data)) == data
