# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""The definition graph: named JSON-schema shapes and the aliases between them.

A graph entry is either a concrete shape (a JSON-schema mapping) or an
:class:`Alias` pointing at another key.  Shapes refer to each other with the
usual ``{"$ref": "#/definitions/<key>"}`` marker.  Every reader resolves keys
through :meth:`DefinitionGraph.resolve_key`, and only :meth:`DefinitionGraph.put`
and :meth:`DefinitionGraph.alias` change the table.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

# ###############
# Public Interface
# ###############

REF_PREFIX = "#/definitions/"


class SchemaParseError(Exception):
    """Raised when a schema document cannot be turned into a definition graph."""


class UnresolvedReference(Exception):
    """Raised when an indirection points at a key that is not in the graph."""

    def __init__(self, key: str, referrer: str | None = None) -> None:
        message = f"Unresolved definition reference '{key}'"
        if referrer is not None:
            message += f" (from '{referrer}')"
        super().__init__(message)
        self.key = key
        self.referrer = referrer


@dataclass(frozen=True)
class Alias:
    """A graph entry that defines no shape itself and points at *target*."""

    target: str


Node = Alias | dict[str, Any]


class DefinitionGraph:
    """An owned, insertion-ordered table of definition nodes."""

    def __init__(self, definitions: Mapping[str, Any] | None = None) -> None:
        self._nodes: dict[str, Node] = {}
        for key, node in (definitions or {}).items():
            self.put(key, node)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def keys(self) -> list[str]:
        return list(self._nodes)

    def items(self) -> Iterator[tuple[str, Node]]:
        """Iterate over raw entries in insertion order (aliases are not followed)."""
        return iter(list(self._nodes.items()))

    def node(self, key: str) -> Node:
        """Return the raw entry stored under *key*."""
        try:
            return self._nodes[key]
        except KeyError:
            raise UnresolvedReference(key) from None

    def is_alias(self, key: str) -> bool:
        return isinstance(self._nodes.get(key), Alias)

    def resolve_key(self, key: str) -> str:
        """Follow aliases starting at *key* and return the key of the concrete shape.

        Raises:
            UnresolvedReference: If *key* or any alias target is missing, or if
                the aliases form a cycle.
        """
        seen: list[str] = []
        current = key
        while True:
            if current not in self._nodes:
                raise UnresolvedReference(current, seen[-1] if seen else None)
            node = self._nodes[current]
            if not isinstance(node, Alias):
                return current
            if current in seen:
                raise UnresolvedReference(key, f"alias cycle {' -> '.join(seen + [current])}")
            seen.append(current)
            current = node.target

    def resolve(self, key: str) -> dict[str, Any]:
        """Return the concrete shape that *key* ultimately stands for."""
        node = self._nodes[self.resolve_key(key)]
        assert not isinstance(node, Alias)
        return node

    def put(self, key: str, node: Any) -> None:
        """Add or replace the entry under *key*.

        A mapping that consists of nothing but a ``$ref`` is stored as an
        :class:`Alias`, so that pure indirections always take the alias form.
        """
        if isinstance(node, Alias):
            self._nodes[key] = node
            return
        if not isinstance(node, Mapping):
            raise SchemaParseError(f"Definition '{key}' must be a JSON object, got {type(node).__name__}")
        if set(node) == {"$ref"}:
            self._nodes[key] = Alias(ref_to_key(node["$ref"]))
            return
        self._nodes[key] = dict(node)

    def alias(self, key: str, target: str) -> None:
        """Replace the entry under *key* with an indirection to *target*."""
        if target not in self._nodes:
            raise UnresolvedReference(target, key)
        self._nodes[key] = Alias(target)

    def referrers(self, key: str) -> list[str]:
        """Return the keys of all concrete shapes that reference *key* directly."""
        return [
            name
            for name, node in self._nodes.items()
            if not isinstance(node, Alias) and key in set(iter_refs(node))
        ]


def ref_to_key(ref: str) -> str:
    """Strip the ``#/definitions/`` prefix from a ``$ref`` value."""
    if not isinstance(ref, str):
        raise SchemaParseError(f"Reference must be a string, got {ref!r}")
    if ref.startswith(REF_PREFIX):
        return ref[len(REF_PREFIX) :]
    return ref


def key_to_ref(key: str) -> dict[str, str]:
    """Build a ``$ref`` indirection pointing at *key*."""
    return {"$ref": f"{REF_PREFIX}{key}"}


def iter_refs(schema: Any) -> Iterator[str]:
    """Yield the key of every ``$ref`` found anywhere inside *schema*, in document order."""
    stack = [schema]
    while stack:
        current = stack.pop()
        if isinstance(current, Mapping):
            ref = current.get("$ref")
            if isinstance(ref, str):
                yield ref_to_key(ref)
            # Reversed so the pops come out in document order.
            stack.extend(reversed([v for k, v in current.items() if k != "$ref"]))
        elif isinstance(current, list):
            stack.extend(reversed(current))


def parse_schema_document(data: bytes | str) -> DefinitionGraph:
    """Parse a JSON schema document with a top-level ``definitions`` map.

    Raises:
        SchemaParseError: If the document is not valid JSON, has no
            ``definitions`` mapping, or contains a non-object definition.
    """
    try:
        document = json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise SchemaParseError(f"Invalid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise SchemaParseError("Schema document must be a JSON object")

    definitions = document.get("definitions")
    if not isinstance(definitions, dict):
        raise SchemaParseError("Schema document has no 'definitions' object")

    return DefinitionGraph(definitions)
