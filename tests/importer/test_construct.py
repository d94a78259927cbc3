# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for wrapper generation and reachability expansion."""

from typing import Any

import pytest

from kindgen.importer.construct import emit_header, expand_reachable, generate_construct
from kindgen.importer.naming import render_type_name, resolve_api_object_names
from kindgen.importer.scanner import X_GROUP_VERSION_KIND, find_api_object_definitions
from kindgen.render import CodeMaker, TypeGenerator
from kindgen.schema import DefinitionGraph, UnresolvedReference

# ###############
# Helpers
# ###############


def _ref(key: str) -> dict[str, str]:
    return {"$ref": f"#/definitions/{key}"}


def _struct(**properties: Any) -> dict[str, Any]:
    return {"type": "object", "properties": properties}


def _api_object(group: str, version: str, kind: str, **properties: Any) -> dict[str, Any]:
    schema = _struct(apiVersion={"type": "string"}, kind={"type": "string"}, metadata={"type": "object"}, **properties)
    schema[X_GROUP_VERSION_KIND] = [{"group": group, "version": version, "kind": kind}]
    return schema


def _generate(graph: DefinitionGraph, *, exclude: tuple[str, ...] = (), prefix: str = "Kube") -> TypeGenerator:
    definitions = find_api_object_definitions(graph, prefix)
    type_generator = TypeGenerator(graph, exclude=exclude, render_type_name=render_type_name)
    resolve_api_object_names(graph, definitions)
    for definition in definitions:
        generate_construct(type_generator, definition)
    return type_generator


# ###############
# Wrapper generation
# ###############


class TestGenerateConstruct:
    def test_widget_end_to_end(self) -> None:
        """A single API object yields the wrapper, its properties and the reachable spec."""
        graph = DefinitionGraph(
            {
                "grp/v1.Widget": _api_object("grp", "v1", "Widget", spec=_ref("grp/v1.WidgetSpec")),
                "grp/v1.WidgetSpec": _struct(replicas={"type": "integer"}),
            }
        )

        type_generator = _generate(graph)

        assert type_generator.registered == {
            "KubeWidgetProps": "KubeWidgetProps",
            "KubeWidget": "grp/v1.Widget",
            "WidgetSpec": "grp/v1.WidgetSpec",
        }
        assert type_generator.type_name_for("grp/v1.Widget") == "KubeWidgetProps"

        source = type_generator.render()
        assert "class KubeWidget(pydantic.BaseModel):" in source
        assert "class KubeWidgetProps(pydantic.BaseModel):" in source
        assert "class WidgetSpec(pydantic.BaseModel):" in source
        assert "props: KubeWidgetProps" in source
        assert "API_VERSION: typing.ClassVar[str] = 'grp/v1'" in source
        assert "KIND: typing.ClassVar[str] = 'Widget'" in source
        assert "spec: WidgetSpec | None = pydantic.Field(default=None)" in source

    def test_returns_construct_name(self) -> None:
        graph = DefinitionGraph({"grp/v1.Widget": _api_object("grp", "v1", "Widget")})
        [definition] = find_api_object_definitions(graph, "Kube")
        type_generator = TypeGenerator(graph, render_type_name=render_type_name)
        resolve_api_object_names(graph, [definition])

        assert generate_construct(type_generator, definition) == "KubeWidget"

    def test_core_group_api_version(self) -> None:
        graph = DefinitionGraph({"io.k8s.api.core.v1.Pod": _api_object("", "v1", "Pod")})

        source = _generate(graph).render()

        assert "API_VERSION: typing.ClassVar[str] = 'v1'" in source

    def test_object_description_becomes_docstring(self) -> None:
        schema = _api_object("grp", "v1", "Widget")
        schema["description"] = "A widget."
        graph = DefinitionGraph({"grp/v1.Widget": schema})

        source = _generate(graph).render()

        assert '"""A widget.' in source
        assert "Kind: Widget (grp/v1)" in source

    def test_shared_type_is_rendered_once(self) -> None:
        """Two objects reaching the same type register it once."""
        graph = DefinitionGraph(
            {
                "grp/v1.Widget": _api_object("grp", "v1", "Widget", spec=_ref("grp/v1.Shared")),
                "grp/v1.Gadget": _api_object("grp", "v1", "Gadget", spec=_ref("grp/v1.Shared")),
                "grp/v1.Shared": _struct(name={"type": "string"}),
            }
        )

        source = _generate(graph).render()

        assert source.count("class Shared(pydantic.BaseModel):") == 1
        assert source.count("Shared.model_rebuild()") == 1

    def test_references_between_api_objects(self) -> None:
        """A reference to another API object is typed with that object's properties model."""
        graph = DefinitionGraph(
            {
                "grp/v1.Widget": _api_object("grp", "v1", "Widget"),
                "grp/v1.WidgetList": _struct(items={"type": "array", "items": _ref("grp/v1.Widget")}),
                "grp/v1.Holder": _api_object("grp", "v1", "Holder", widgets=_ref("grp/v1.WidgetList")),
            }
        )

        type_generator = _generate(graph)

        assert "WidgetList" in type_generator.registered
        assert "items: list[KubeWidgetProps] | None" in type_generator.render()

    def test_unknown_reference(self) -> None:
        graph = DefinitionGraph({"grp/v1.Widget": _api_object("grp", "v1", "Widget", spec=_ref("grp/v1.Missing"))})

        with pytest.raises(UnresolvedReference, match="grp/v1.Missing"):
            _generate(graph)


# ###############
# Reachability
# ###############


class TestExpandReachable:
    def test_excluded_key_becomes_placeholder(self) -> None:
        """An excluded key renders as typing.Any and its references are not followed."""
        graph = DefinitionGraph(
            {
                "grp/v1.Widget": _api_object("grp", "v1", "Widget", spec=_ref("grp/v1.Spec")),
                "grp/v1.Spec": _struct(child=_ref("grp/v1.Excluded")),
                "grp/v1.Excluded": _struct(deep=_ref("grp/v1.Deep")),
                "grp/v1.Deep": _struct(value={"type": "string"}),
            }
        )

        type_generator = _generate(graph, exclude=("grp/v1.Excluded",))

        assert type_generator.is_placeholder("Excluded")
        assert "Deep" not in type_generator.registered
        source = type_generator.render()
        assert "Excluded = typing.Any" in source
        assert "class Excluded" not in source

    def test_excluded_through_alias(self) -> None:
        graph = DefinitionGraph(
            {
                "root.v1.Root": _struct(child=_ref("root.v1.Pointer")),
                "root.v1.Pointer": _ref("root.v1.Target"),
                "root.v1.Target": _struct(value={"type": "string"}),
            }
        )
        type_generator = TypeGenerator(graph, exclude=["root.v1.Target"], render_type_name=render_type_name)

        expand_reachable(type_generator, ["root.v1.Root"])

        assert type_generator.is_placeholder("Target")

    @pytest.mark.parametrize("order", [["Direct", "Indirect"], ["Indirect", "Direct"]])
    def test_excluded_alias_does_not_depend_on_visit_order(self, order: list[str]) -> None:
        """Excluding an alias hides its target however the target is reached."""
        refs = {"Direct": _ref("root.v1.Target"), "Indirect": _ref("root.v1.Pointer")}
        graph = DefinitionGraph(
            {
                "root.v1.Root": _struct(**{name.lower(): refs[name] for name in order}),
                "root.v1.Pointer": _ref("root.v1.Target"),
                "root.v1.Target": _struct(value={"type": "string"}),
            }
        )
        type_generator = TypeGenerator(graph, exclude=["root.v1.Pointer"], render_type_name=render_type_name)

        expand_reachable(type_generator, ["root.v1.Root"])

        assert type_generator.is_placeholder("Target")
        assert "class Target" not in type_generator.render()

    def test_cycles_terminate(self) -> None:
        graph = DefinitionGraph(
            {
                "x.v1.A": _struct(b=_ref("x.v1.B")),
                "x.v1.B": _struct(a=_ref("x.v1.A"), me=_ref("x.v1.B")),
            }
        )
        type_generator = TypeGenerator(graph, render_type_name=render_type_name)

        expanded = expand_reachable(type_generator, ["x.v1.A"])

        assert expanded == ["x.v1.A", "x.v1.B"]
        assert set(type_generator.registered) == {"A", "B"}

    def test_second_expansion_is_idempotent(self) -> None:
        graph = DefinitionGraph(
            {
                "x.v1.A": _struct(b=_ref("x.v1.B")),
                "x.v1.B": _struct(value={"type": "integer"}),
            }
        )
        type_generator = TypeGenerator(graph, render_type_name=render_type_name)

        expand_reachable(type_generator, ["x.v1.A"])
        first = type_generator.render()
        assert expand_reachable(type_generator, ["x.v1.A", "x.v1.B"]) == []

        assert type_generator.render() == first

    def test_unreachable_types_are_not_rendered(self) -> None:
        graph = DefinitionGraph(
            {
                "x.v1.A": _struct(value={"type": "string"}),
                "x.v1.Orphan": _struct(value={"type": "string"}),
            }
        )
        type_generator = TypeGenerator(graph, render_type_name=render_type_name)

        expand_reachable(type_generator, ["x.v1.A"])

        assert "Orphan" not in type_generator.registered


# ###############
# Header
# ###############


def test_emit_header() -> None:
    code = CodeMaker()
    emit_header(code, "k8s@1.25.0")
    text = code.to_string()

    assert text.startswith("# generated by kindgen from k8s@1.25.0\n")
    assert "from __future__ import annotations\n" in text
    assert "import pydantic\n" in text
