# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Discovery of API objects in a definition graph."""

from __future__ import annotations

from typing import Any

from kindgen.importer.identifiers import parse_api_type_name
from kindgen.model.api_objects import ApiObjectDefinition, GroupVersionKind
from kindgen.schema.graph import Alias, DefinitionGraph

# ###############
# Public Interface
# ###############

X_GROUP_VERSION_KIND = "x-kubernetes-group-version-kind"


class MissingVersionForApiObject(Exception):
    """Raised when a definition classified as an API object has no version in its key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unable to parse version for type: {key}")
        self.key = key


class DuplicateApiObject(Exception):
    """Raised when two definitions declare the same group/version/kind."""

    def __init__(self, gvk: GroupVersionKind, first: str, second: str) -> None:
        super().__init__(f"API object {gvk.api_version}/{gvk.kind} is defined by both '{first}' and '{second}'")
        self.gvk = gvk


def find_api_object_definitions(graph: DefinitionGraph, prefix: str) -> list[ApiObjectDefinition]:
    """Return every API object in *graph*, in the graph's iteration order.

    An API object is a definition with the ``x-kubernetes-group-version-kind``
    annotation and a ``metadata`` property.

    Raises:
        MissingVersionForApiObject: If an API object's key has no version
            segment.  Nothing is returned in that case.
        DuplicateApiObject: If two keys declare the same group/version/kind.
        InvalidIdentifierFormat: If an API object's key is malformed.
    """
    result: list[ApiObjectDefinition] = []
    seen: dict[GroupVersionKind, str] = {}

    for key, node in graph.items():
        if isinstance(node, Alias):
            continue
        object_name = try_get_object_name(node)
        if object_name is None:
            continue

        identifier = parse_api_type_name(key)
        if identifier.version is None:
            raise MissingVersionForApiObject(key)

        if object_name in seen:
            raise DuplicateApiObject(object_name, seen[object_name], key)
        seen[object_name] = key

        result.append(
            ApiObjectDefinition(
                fqn=identifier.fullname,
                group=object_name.group,
                kind=object_name.kind,
                version=object_name.version,
                json_schema=node,
                prefix=prefix,
                custom=False,  # not a CRD
            )
        )

    return result


def try_get_object_name(definition: dict[str, Any]) -> GroupVersionKind | None:
    """Return the group/version/kind of *definition* if it is an API object.

    Only the first annotated triple is considered.  Definitions without a
    ``metadata`` property (``DeleteOptions`` and friends) are plain data
    types even when annotated.
    """
    object_names = definition.get(X_GROUP_VERSION_KIND)
    if not object_names or not isinstance(object_names, list):
        return None

    properties = definition.get("properties")
    if not isinstance(properties, dict) or "metadata" not in properties:
        return None

    return GroupVersionKind.model_validate(object_names[0])
