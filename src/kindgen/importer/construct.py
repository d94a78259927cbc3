# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generation of wrapper models for API objects and the types they reach."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from kindgen.importer.naming import get_construct_type_name, get_props_type_name
from kindgen.model.api_objects import ApiObjectDefinition
from kindgen.render.code import CodeMaker
from kindgen.render.type_generator import TypeGenerator
from kindgen.schema.graph import iter_refs

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def emit_header(code: CodeMaker, source: str) -> None:
    """Write the banner and imports shared by every generated module."""
    code.line(f"# generated by kindgen from {source}")
    code.line("# Do not edit by hand; re-run `kindgen import` instead.")
    code.line()
    code.line("from __future__ import annotations")
    code.line()
    code.line("import typing")
    code.line()
    code.line("import pydantic")


def generate_construct(type_generator: TypeGenerator, definition: ApiObjectDefinition) -> str:
    """Register the wrapper model of *definition* and everything it reaches.

    The wrapper exposes a single ``props`` field typed with the properties
    model.  The properties model is the object's shape as stored in the
    graph, so the names must already have been resolved (see
    :func:`~kindgen.importer.naming.resolve_api_object_names`).

    Returns:
        The wrapper model's name.
    """
    construct_name = get_construct_type_name(definition)
    props_name = get_props_type_name(definition)
    graph = type_generator.graph

    props_key = graph.resolve_key(definition.fqn)
    type_generator.emit_type(props_name, graph.resolve(props_key), props_key)
    type_generator.emit_custom_type(
        construct_name,
        lambda code: _emit_construct_class(code, definition, construct_name, props_name),
        definition.fqn,
    )
    expand_reachable(type_generator, iter_refs(graph.resolve(props_key)), visited={props_key})
    return construct_name


def expand_reachable(
    type_generator: TypeGenerator,
    roots: Iterable[str],
    *,
    visited: set[str] | None = None,
) -> list[str]:
    """Register every definition reachable from *roots*.

    Keys are resolved through aliases before they are queued.  An excluded
    key is registered as a placeholder and its references are not followed.
    A key whose shape is already registered is not walked again, since its
    references were queued when it was first registered.

    Returns:
        The resolved keys registered with their full shape, in visiting order.
    """
    graph = type_generator.graph
    visited = set() if visited is None else visited
    queue: deque[str] = deque()
    expanded: list[str] = []

    def enqueue(key: str) -> None:
        resolved = graph.resolve_key(key)
        if resolved in visited:
            return
        visited.add(resolved)
        if type_generator.is_excluded(key):
            logger.debug("Excluding %s", resolved)
            type_generator.emit_placeholder(resolved)
            return
        if type_generator.is_registered(type_generator.type_name_for(resolved), resolved):
            return
        queue.append(resolved)

    for root in roots:
        enqueue(root)

    while queue:
        key = queue.popleft()
        type_generator.emit_definition(key)
        expanded.append(key)
        for ref in iter_refs(graph.resolve(key)):
            enqueue(ref)

    return expanded


# ################
# Implementation
# ################


def _emit_construct_class(
    code: CodeMaker,
    definition: ApiObjectDefinition,
    construct_name: str,
    props_name: str,
) -> None:
    gvk = definition.gvk
    description = definition.json_schema.get("description")
    code.open(f"class {construct_name}(pydantic.BaseModel):")
    if isinstance(description, str) and description.strip():
        code.docstring(f"{description.strip()}\n\nKind: {gvk.kind} ({gvk.api_version})")
    else:
        code.docstring(f"Kind: {gvk.kind} ({gvk.api_version})")
    code.line()
    code.line(f"API_VERSION: typing.ClassVar[str] = {gvk.api_version!r}")
    code.line(f"KIND: typing.ClassVar[str] = {gvk.kind!r}")
    code.line()
    code.line(f"props: {props_name}")
    code.line()
    code.line("@classmethod")
    code.open(f"def manifest(cls, props: {props_name}) -> dict[str, typing.Any]:")
    code.docstring("Return the manifest for *props* with ``apiVersion`` and ``kind`` filled in.")
    code.line("return cls(props=props).to_json()")
    code.close()
    code.line()
    code.open("def to_json(self) -> dict[str, typing.Any]:")
    code.line('body = self.props.model_dump(mode="json", by_alias=True, exclude_none=True)')
    code.line('manifest: dict[str, typing.Any] = {"apiVersion": self.API_VERSION, "kind": self.KIND}')
    code.line("manifest.update((key, value) for key, value in body.items() if key not in manifest)")
    code.line("return manifest")
    code.close()
    code.close()
