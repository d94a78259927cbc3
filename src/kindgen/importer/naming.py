# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type names for API objects and the graph rewrite that keeps them apart.

Each API object yields two names: the wrapper model (``KubeDeployment``) and
its properties model (``KubeDeploymentProps``).  The upstream definition of
the object would otherwise render under the wrapper's name, so its key is
rewritten into an alias of the properties key before any code is generated.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from kindgen.importer.identifiers import parse_api_type_name
from kindgen.model.api_objects import ApiObjectDefinition
from kindgen.schema.graph import DefinitionGraph

# ###############
# Public Interface
# ###############

PROPS_SUFFIX = "Props"


class NameCollision(Exception):
    """Raised when two derived type names coincide, or clash with an existing type."""

    def __init__(self, name: str, first: str, second: str) -> None:
        super().__init__(f"Type name '{name}' is derived from both '{first}' and '{second}'")
        self.name = name
        self.first = first
        self.second = second


@dataclass(frozen=True)
class DerivedNames:
    """The wrapper and properties names derived for one API object."""

    construct_name: str
    props_name: str


def to_pascal_case(text: str) -> str:
    """Convert ``v1beta1`` or ``my-group_name`` to ``V1Beta1`` / ``MyGroupName``."""
    words = [w for w in re.split(r"[^0-9A-Za-z]+|(?<=\d)(?=[A-Za-z])|(?<=[a-z])(?=\d)", text) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def get_type_name(custom: bool, kind: str, version: str) -> str:
    """Return the type name for *kind* at *version*.

    Built-in ``v1`` types and custom types keep the bare kind; other versions
    get a PascalCase postfix (``HorizontalPodAutoscalerV2``).  Kinds that end
    in a digit get a ``Ver`` infix so the version stays readable.
    """
    postfix = "" if version == "v1" or custom else to_pascal_case(version)
    if not postfix:
        return kind
    infix = "Ver" if kind[-1:].isdigit() else ""
    return f"{kind}{infix}{postfix}"


def render_type_name(key: str) -> str:
    """Name a definition key: versioned keys may get a version postfix, others keep their basename."""
    parsed = parse_api_type_name(key)
    if parsed.version is None:
        return parsed.basename
    return get_type_name(False, parsed.basename, parsed.version.raw)


def get_construct_type_name(definition: ApiObjectDefinition) -> str:
    """Return the wrapper model name, e.g. ``KubeDeployment``."""
    name = definition.prefix + get_type_name(definition.custom, definition.kind, definition.version)
    return name[:1].upper() + name[1:]


def get_props_type_name(definition: ApiObjectDefinition) -> str:
    """Return the properties model name, e.g. ``KubeDeploymentProps``."""
    return get_construct_type_name(definition) + PROPS_SUFFIX


def derive_names(definition: ApiObjectDefinition) -> DerivedNames:
    return DerivedNames(
        construct_name=get_construct_type_name(definition),
        props_name=get_props_type_name(definition),
    )


def resolve_api_object_names(
    graph: DefinitionGraph,
    definitions: Iterable[ApiObjectDefinition],
    name_for_key: Callable[[str], str] = render_type_name,
) -> dict[str, DerivedNames]:
    """Derive names for every API object and rewrite *graph* accordingly.

    All names are checked before the graph is touched.  Afterwards the
    original shape of each object is stored under its properties key and the
    original key becomes an alias of it, so existing references now land on
    the properties model.

    Args:
        graph: The definition graph; mutated in place.
        definitions: Every API object found by the scanner.
        name_for_key: Maps a definition key to its rendered type name.

    Returns:
        A mapping from each object's original key to its derived names.

    Raises:
        NameCollision: If a derived name is used twice, matches the rendered
            name of another definition, or if a properties key already exists
            in the graph.
    """
    definitions = list(definitions)
    object_keys = {d.fqn for d in definitions}
    owners: dict[str, str] = {}

    for key in graph:
        if key in object_keys or graph.is_alias(key):
            continue
        owners.setdefault(name_for_key(key), key)

    result: dict[str, DerivedNames] = {}
    for definition in definitions:
        names = derive_names(definition)
        for name in (names.construct_name, names.props_name):
            if name in owners:
                raise NameCollision(name, owners[name], definition.fqn)
            owners[name] = definition.fqn
        if names.props_name in graph:
            raise NameCollision(names.props_name, names.props_name, definition.fqn)
        result[definition.fqn] = names

    for definition in definitions:
        props_key = result[definition.fqn].props_name
        graph.put(props_key, graph.resolve(definition.fqn))
        graph.alias(definition.fqn, props_key)

    return result
