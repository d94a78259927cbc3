# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rendering of JSON-schema definitions into pydantic models.

The :class:`TypeGenerator` keeps a registry of named types.  Object shapes
with properties become ``pydantic.BaseModel`` subclasses; every other shape
becomes a type alias.  Nothing is rendered until it is registered through
one of the ``emit_*`` methods, and :meth:`TypeGenerator.render` turns the
registry into module source in a deterministic order:

1. models, in registration order;
2. type aliases, each after the aliases it refers to;
3. ``model_rebuild()`` calls that resolve forward references.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from kindgen.render.code import CodeMaker
from kindgen.schema.graph import DefinitionGraph, ref_to_key

# ###############
# Public Interface
# ###############

ANY_TYPE = "typing.Any"


class TypeCollisionError(Exception):
    """Raised when two different definitions are registered under one type name."""

    def __init__(self, name: str, first: str, second: str) -> None:
        super().__init__(f"Type '{name}' is already registered for '{first}', cannot register '{second}'")
        self.name = name
        self.first = first
        self.second = second


class InvalidTypeName(Exception):
    """Raised when a rendered type name is not a usable Python identifier."""

    def __init__(self, name: str, fqn: str) -> None:
        super().__init__(f"Cannot use '{name}' (from '{fqn}') as a type name")
        self.name = name


def default_render_type_name(key: str) -> str:
    """Use the last dotted segment of *key* as its type name."""
    return key.rsplit(".", 1)[-1]


class TypeGenerator:
    """Registers named types from a definition graph and renders them as Python.

    Args:
        definitions: The definition graph; ``$ref`` keys are resolved through it.
        exclude: Definition keys that are never rendered as shapes.  The
            generator does not walk the graph itself; callers register these
            keys with :meth:`emit_placeholder`.
        render_type_name: Maps a definition key to its type name.
    """

    def __init__(
        self,
        definitions: DefinitionGraph,
        exclude: Iterable[str] = (),
        render_type_name: Callable[[str], str] | None = None,
    ) -> None:
        self._graph = definitions
        self.exclude = frozenset(exclude)
        self._render_type_name = render_type_name or default_render_type_name
        self._types: dict[str, _TypeEntry] = {}

    @property
    def graph(self) -> DefinitionGraph:
        return self._graph

    @property
    def registered(self) -> dict[str, str]:
        """Mapping from every registered type name to the key it was registered for."""
        return {name: entry.fqn for name, entry in self._types.items()}

    def is_registered(self, name: str, fqn: str) -> bool:
        """Return True if *fqn* has been registered with its full shape under *name*."""
        entry = self._types.get(name)
        return entry is not None and entry.fqn == fqn and not entry.placeholder

    def is_placeholder(self, name: str) -> bool:
        entry = self._types.get(name)
        return entry is not None and entry.placeholder

    def add_definition(self, key: str, schema: Any) -> None:
        """Add or replace the definition of *key* in the graph."""
        self._graph.put(key, schema)

    def is_excluded(self, key: str) -> bool:
        """Return True if *key* resolves to the same shape as an excluded key.

        Excluding an alias excludes the shape behind it, whichever key the
        shape is reached through.
        """
        if key in self.exclude:
            return True
        resolved = self._graph.resolve_key(key)
        return any(
            self._graph.resolve_key(excluded) == resolved for excluded in self.exclude if excluded in self._graph
        )

    def type_name_for(self, key: str) -> str:
        """Return the type name that references to *key* render as."""
        return self._render_type_name(self._graph.resolve_key(key))

    def emit_definition(self, key: str) -> str:
        """Register the shape stored under *key* (after following aliases)."""
        resolved = self._graph.resolve_key(key)
        return self.emit_type(self._render_type_name(resolved), self._graph.resolve(resolved), resolved)

    def emit_placeholder(self, key: str) -> str:
        """Register *key* as an unconstrained ``typing.Any`` alias."""
        resolved = self._graph.resolve_key(key)
        name = self._render_type_name(resolved)
        if self._claim(name, resolved, placeholder=True):
            return name
        self._types[name] = _TypeEntry(fqn=resolved, placeholder=True, alias=ANY_TYPE)
        return name

    def emit_type(self, name: str, schema: dict[str, Any], fqn: str) -> str:
        """Register *schema* under *name*.

        Registering the same *fqn* under the same name again is a no-op.

        Raises:
            TypeCollisionError: If *name* is already registered for another key.
            InvalidTypeName: If *name* is not a valid Python identifier.
        """
        if self._claim(name, fqn):
            return name

        entry = _TypeEntry(fqn=fqn)
        self._types[name] = entry
        if _is_struct(schema):
            entry.code = self._render_struct(name, schema, fqn)
        else:
            entry.alias = self._type_expression(schema, name, fqn, entry.deps)
        return name

    def emit_custom_type(self, name: str, emitter: Callable[[CodeMaker], None], fqn: str) -> str:
        """Register a hand-written model; *emitter* writes its class body."""
        if self._claim(name, fqn):
            return name
        code = CodeMaker()
        emitter(code)
        self._types[name] = _TypeEntry(fqn=fqn, code=code)
        return name

    def render(self) -> str:
        """Render every registered type as Python source."""
        code = CodeMaker()
        models = [(name, e) for name, e in self._types.items() if e.code is not None]
        for name, entry in models:
            code.line()
            code.line()
            assert entry.code is not None
            code.extend(entry.code)

        aliases = self._ordered_aliases()
        if aliases:
            code.line()
            code.line()
            for name, entry in aliases:
                code.line(f"{name} = {entry.alias}")

        if models:
            code.line()
            code.line()
            code.line("# Resolve forward references between models.")
            for name, _ in models:
                code.line(f"{name}.model_rebuild()")

        return code.to_string()

    def _claim(self, name: str, fqn: str, *, placeholder: bool = False) -> bool:
        """Return True if *name* is already registered for *fqn* (nothing to do)."""
        if not name.isidentifier() or keyword.iskeyword(name):
            raise InvalidTypeName(name, fqn)
        existing = self._types.get(name)
        if existing is None:
            return False
        if existing.fqn != fqn:
            raise TypeCollisionError(name, existing.fqn, fqn)
        # A placeholder may be upgraded to the real shape, never the reverse.
        return placeholder or not existing.placeholder

    def _render_struct(self, name: str, schema: dict[str, Any], fqn: str) -> CodeMaker:
        code = CodeMaker()
        code.open(f"class {name}(pydantic.BaseModel):")
        description = schema.get("description")
        if isinstance(description, str) and description.strip():
            code.docstring(description)
            code.line()
        code.line("model_config = pydantic.ConfigDict(populate_by_name=True)")
        code.line()

        required = set(schema.get("required") or [])
        used: set[str] = set()
        for prop, prop_schema in schema["properties"].items():
            field_name = _field_name(prop, used)
            used.add(field_name)
            nested = f"{name}{_pascal(prop)}"
            annotation = self._type_expression(prop_schema or {}, nested, f"{fqn}/properties/{prop}", set())

            args: list[str] = []
            if prop not in required:
                annotation = _optional(annotation)
                args.append("default=None")
            if field_name != prop:
                args.append(f"alias={prop!r}")
            prop_description = prop_schema.get("description") if isinstance(prop_schema, dict) else None
            if isinstance(prop_description, str) and prop_description.strip():
                args.append(f"description={prop_description.strip()!r}")

            if args:
                code.line(f"{field_name}: {annotation} = pydantic.Field({', '.join(args)})")
            else:
                code.line(f"{field_name}: {annotation}")
        code.close()
        return code

    def _type_expression(self, schema: Any, context: str, path: str, deps: set[str]) -> str:
        """Return the annotation for *schema*.

        *context* is the name an inline model would take and *path* locates
        *schema* within its definition, which tells inline models apart.
        Type names referenced by the expression are added to *deps*.
        """
        if not isinstance(schema, dict) or not schema:
            return ANY_TYPE

        expression = self._base_expression(schema, context, path, deps)
        if schema.get("nullable") is True:
            return _optional(expression)
        return expression

    def _base_expression(self, schema: dict[str, Any], context: str, path: str, deps: set[str]) -> str:
        ref = schema.get("$ref")
        if isinstance(ref, str):
            name = self.type_name_for(ref_to_key(ref))
            deps.add(name)
            return name

        if schema.get("x-kubernetes-int-or-string") is True or schema.get("format") == "int-or-string":
            return "int | str"

        for combinator in ("anyOf", "oneOf"):
            options = schema.get(combinator)
            if isinstance(options, list) and options:
                members = [
                    self._type_expression(option, f"{context}{index}", f"{path}/{combinator}/{index}", deps)
                    for index, option in enumerate(options)
                ]
                return _union(members)

        all_of = schema.get("allOf")
        if isinstance(all_of, list) and len(all_of) == 1:
            return self._type_expression(all_of[0], context, f"{path}/allOf/0", deps)

        enum = schema.get("enum")
        if isinstance(enum, list) and enum and all(isinstance(value, str) for value in enum):
            return f"typing.Literal[{', '.join(repr(value) for value in enum)}]"

        schema_type = schema.get("type")
        if isinstance(schema_type, list):
            types = [t for t in schema_type if t != "null"]
            members = [self._type_expression({**schema, "type": t}, context, path, deps) for t in types]
            expression = _union(members) if members else "None"
            return _optional(expression) if "null" in schema_type and members else expression

        if schema_type in _PRIMITIVES:
            return _PRIMITIVES[schema_type]

        if schema_type == "array":
            items = schema.get("items")
            return f"list[{self._type_expression(items or {}, f'{context}Item', f'{path}/items', deps)}]"

        if _is_struct(schema):
            name = self._inline_name(context, path)
            self.emit_type(name, schema, path)
            deps.add(name)
            return name

        if schema_type == "object" or "additionalProperties" in schema:
            additional = schema.get("additionalProperties")
            if isinstance(additional, dict) and additional:
                value = self._type_expression(additional, f"{context}Value", f"{path}/additionalProperties", deps)
                return f"dict[str, {value}]"
            return f"dict[str, {ANY_TYPE}]"

        return ANY_TYPE

    def _inline_name(self, name: str, path: str) -> str:
        """Return *name*, numbered if a different shape already holds it."""
        candidate = name
        counter = 2
        while candidate in self._types and self._types[candidate].fqn != path:
            candidate = f"{name}{counter}"
            counter += 1
        return candidate

    def _ordered_aliases(self) -> list[tuple[str, _TypeEntry]]:
        """Return alias entries so that each comes after the aliases it uses."""
        aliases = {name: e for name, e in self._types.items() if e.alias is not None}
        ordered: list[tuple[str, _TypeEntry]] = []
        done: set[str] = set()
        entered: set[str] = set()

        stack: list[tuple[str, bool]] = [(name, False) for name in reversed(list(aliases))]
        while stack:
            name, expanded = stack.pop()
            if name in done:
                continue
            if expanded:
                done.add(name)
                ordered.append((name, aliases[name]))
                continue
            if name in entered:
                continue
            entered.add(name)
            stack.append((name, True))
            for dep in sorted(aliases[name].deps, reverse=True):
                if dep in aliases and dep not in entered:
                    stack.append((dep, False))
        return ordered


# ################
# Implementation
# ################

_PRIMITIVES = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
}

_RESERVED_FIELD_NAMES = frozenset(dir(BaseModel))


@dataclass
class _TypeEntry:
    """One registered type: either a model (``code``) or an alias expression."""

    fqn: str
    code: CodeMaker | None = None
    alias: str | None = None
    placeholder: bool = False
    deps: set[str] = field(default_factory=set)


def _is_struct(schema: Any) -> bool:
    if not isinstance(schema, dict) or "$ref" in schema:
        return False
    properties = schema.get("properties")
    return isinstance(properties, dict) and bool(properties) and schema.get("type", "object") == "object"


def _optional(expression: str) -> str:
    if expression == ANY_TYPE or expression.endswith("| None"):
        return expression
    return f"{expression} | None"


def _union(members: list[str]) -> str:
    unique = list(dict.fromkeys(members))
    if ANY_TYPE in unique:
        return ANY_TYPE
    return " | ".join(unique)


def _pascal(text: str) -> str:
    words = [w for w in re.split(r"[^0-9A-Za-z]+", text) if w]
    return "".join(w[0].upper() + w[1:] for w in words) or "Item"


def _field_name(prop: str, used: set[str]) -> str:
    """Turn a wire property name (``apiVersion``, ``$ref``) into a field name."""
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", prop)
    name = re.sub(r"\W", "_", name).lower().lstrip("_")
    if not name:
        name = "field"
    if name[0].isdigit():
        name = f"field_{name}"
    if keyword.iskeyword(name) or name in _RESERVED_FIELD_NAMES or name.startswith("model_"):
        name += "_"
    candidate = name
    counter = 2
    while candidate in used:
        candidate = f"{name}_{counter}"
        counter += 1
    return candidate
