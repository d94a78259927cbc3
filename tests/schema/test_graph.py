# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the definition graph."""

import pytest

from kindgen.schema import (
    Alias,
    DefinitionGraph,
    SchemaParseError,
    UnresolvedReference,
    iter_refs,
    key_to_ref,
    parse_schema_document,
    ref_to_key,
)

# ###############
# Entries and aliases
# ###############


class TestDefinitionGraph:
    def test_insertion_order(self) -> None:
        graph = DefinitionGraph({"b": {"type": "string"}, "a": {"type": "integer"}})
        graph.put("c", {"type": "boolean"})

        assert list(graph) == ["b", "a", "c"]
        assert graph.keys() == ["b", "a", "c"]
        assert len(graph) == 3
        assert "a" in graph
        assert "z" not in graph

    def test_pure_ref_is_stored_as_alias(self) -> None:
        graph = DefinitionGraph({"target": {"type": "string"}, "pointer": key_to_ref("target")})

        assert graph.is_alias("pointer")
        assert graph.node("pointer") == Alias("target")
        assert not graph.is_alias("target")

    def test_ref_with_siblings_is_a_shape(self) -> None:
        graph = DefinitionGraph({"t": {"type": "string"}, "p": {"$ref": "#/definitions/t", "description": "x"}})
        assert not graph.is_alias("p")

    def test_resolve_follows_alias_chain(self) -> None:
        graph = DefinitionGraph(
            {
                "a": key_to_ref("b"),
                "b": key_to_ref("c"),
                "c": {"type": "string"},
            }
        )

        assert graph.resolve_key("a") == "c"
        assert graph.resolve("a") == {"type": "string"}
        assert graph.resolve_key("c") == "c"

    def test_missing_key(self) -> None:
        graph = DefinitionGraph()
        with pytest.raises(UnresolvedReference, match="'nope'"):
            graph.resolve("nope")
        with pytest.raises(UnresolvedReference):
            graph.node("nope")

    def test_dangling_alias(self) -> None:
        graph = DefinitionGraph({"a": key_to_ref("gone")})

        with pytest.raises(UnresolvedReference) as exc_info:
            graph.resolve_key("a")

        assert exc_info.value.key == "gone"
        assert exc_info.value.referrer == "a"

    def test_alias_cycle(self) -> None:
        graph = DefinitionGraph({"a": key_to_ref("b"), "b": key_to_ref("a")})

        with pytest.raises(UnresolvedReference, match="alias cycle"):
            graph.resolve_key("a")

    def test_alias_requires_target(self) -> None:
        graph = DefinitionGraph({"a": {"type": "string"}})

        with pytest.raises(UnresolvedReference):
            graph.alias("a", "missing")
        assert not graph.is_alias("a")

    def test_alias_replaces_entry(self) -> None:
        graph = DefinitionGraph({"a": {"type": "string"}, "b": {"type": "integer"}})

        graph.alias("a", "b")

        assert graph.resolve("a") == {"type": "integer"}

    def test_put_copies_mapping(self) -> None:
        shape = {"type": "string"}
        graph = DefinitionGraph({"a": shape})
        shape["type"] = "integer"

        assert graph.resolve("a") == {"type": "string"}

    def test_put_rejects_non_mapping(self) -> None:
        with pytest.raises(SchemaParseError, match="'a' must be a JSON object"):
            DefinitionGraph({"a": ["not", "a", "shape"]})

    def test_items_snapshot_allows_mutation(self) -> None:
        graph = DefinitionGraph({"a": {"type": "string"}})

        for key, _ in graph.items():
            graph.put(f"{key}2", {"type": "integer"})

        assert graph.keys() == ["a", "a2"]

    def test_referrers(self) -> None:
        graph = DefinitionGraph(
            {
                "leaf": {"type": "string"},
                "one": {"properties": {"x": key_to_ref("leaf")}},
                "two": {"items": [key_to_ref("leaf")]},
                "three": {"properties": {"y": {"type": "string"}}},
                "alias": key_to_ref("leaf"),
            }
        )

        assert graph.referrers("leaf") == ["one", "two"]


# ###############
# References
# ###############


class TestReferences:
    def test_ref_round_trip(self) -> None:
        assert key_to_ref("io.k8s.api.apps.v1.Deployment") == {"$ref": "#/definitions/io.k8s.api.apps.v1.Deployment"}
        assert ref_to_key("#/definitions/io.k8s.api.apps.v1.Deployment") == "io.k8s.api.apps.v1.Deployment"

    def test_ref_without_prefix(self) -> None:
        assert ref_to_key("Quantity") == "Quantity"

    def test_non_string_ref(self) -> None:
        with pytest.raises(SchemaParseError):
            ref_to_key(42)  # type: ignore[arg-type]

    def test_iter_refs_in_document_order(self) -> None:
        schema = {
            "properties": {
                "a": key_to_ref("A"),
                "b": {"type": "array", "items": key_to_ref("B")},
                "c": {"anyOf": [key_to_ref("C1"), {"type": "string"}, key_to_ref("C2")]},
                "d": {"additionalProperties": key_to_ref("D")},
            }
        }

        assert list(iter_refs(schema)) == ["A", "B", "C1", "C2", "D"]

    def test_iter_refs_of_scalar(self) -> None:
        assert list(iter_refs("string")) == []


# ###############
# Documents
# ###############


class TestParseSchemaDocument:
    def test_parses_definitions(self) -> None:
        graph = parse_schema_document(
            b'{"definitions": {"a.v1.A": {"type": "string"}, "b": {"$ref": "#/definitions/a.v1.A"}}}'
        )

        assert graph.keys() == ["a.v1.A", "b"]
        assert graph.is_alias("b")

    def test_accepts_text(self) -> None:
        assert len(parse_schema_document('{"definitions": {}}')) == 0

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            (b"not json", "Invalid JSON"),
            (b"[]", "must be a JSON object"),
            (b'{"swagger": "2.0"}', "no 'definitions'"),
            (b'{"definitions": []}', "no 'definitions'"),
            (b'{"definitions": {"a": 1}}', "must be a JSON object"),
            (b"\xff\xfe\x00", "Invalid JSON"),
        ],
    )
    def test_invalid_documents(self, data: bytes, message: str) -> None:
        with pytest.raises(SchemaParseError, match=message):
            parse_schema_document(data)
