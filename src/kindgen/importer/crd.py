# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Import of CustomResourceDefinition manifests from a file or URL.

Every CRD version becomes an API object keyed ``<group>/<version>.<Kind>``.
The objects of one API group share a module named after the group
(``stable.example.com`` becomes ``stable_example_com``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import yaml

from kindgen.importer.base import GenerateOptions, ImportArguments, ImportBase, ImportSpec
from kindgen.importer.construct import emit_header, generate_construct
from kindgen.importer.download import is_url, read_source
from kindgen.importer.identifiers import parse_api_type_name
from kindgen.importer.k8s import SchemaParseFailed
from kindgen.importer.naming import render_type_name, resolve_api_object_names
from kindgen.importer.scanner import DuplicateApiObject, MissingVersionForApiObject
from kindgen.model.api_objects import ApiObjectDefinition, GroupVersionKind
from kindgen.render.code import CodeMaker
from kindgen.render.type_generator import TypeGenerator
from kindgen.schema.graph import DefinitionGraph

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CRD_KIND = "CustomResourceDefinition"
CRD_SUFFIXES = (".yaml", ".yml", ".json")


class InvalidCustomResourceDefinition(Exception):
    """Raised when a CustomResourceDefinition document is missing required fields."""


@dataclass
class CustomResourceVersion:
    """One version of a custom resource together with its schema."""

    name: str
    schema: dict[str, Any]


@dataclass
class CustomResource:
    """The parts of a CustomResourceDefinition the importer uses."""

    group: str
    kind: str
    versions: list[CustomResourceVersion] = field(default_factory=list)

    @property
    def module_name(self) -> str:
        return group_module_name(self.group)


def group_module_name(group: str) -> str:
    """Turn an API group into a module name (``stable.example.com`` -> ``stable_example_com``)."""
    return re.sub(r"\W", "_", group).strip("_").lower() or "core"


def parse_custom_resources(documents: Iterable[Any], source: str) -> list[CustomResource]:
    """Extract the custom resources from a stream of YAML/JSON documents.

    Documents that are not CustomResourceDefinitions are skipped.  ``v1``
    definitions carry a schema per version; legacy ``v1beta1`` definitions
    may carry one shared ``spec.validation`` schema.

    Raises:
        InvalidCustomResourceDefinition: If a CRD lacks a group, kind or
            versions, or if the stream contains no CRD at all.
    """
    resources: list[CustomResource] = []
    for index, document in enumerate(documents):
        if not isinstance(document, dict) or document.get("kind") != CRD_KIND:
            continue
        location = f"{source}: document {index}"
        spec = document.get("spec")
        if not isinstance(spec, dict):
            raise InvalidCustomResourceDefinition(f"{location}: missing 'spec'")

        group = spec.get("group")
        kind = (spec.get("names") or {}).get("kind")
        if not isinstance(group, str) or not group:
            raise InvalidCustomResourceDefinition(f"{location}: missing 'spec.group'")
        if not isinstance(kind, str) or not kind:
            raise InvalidCustomResourceDefinition(f"{location}: missing 'spec.names.kind'")

        shared_schema = _open_api_schema(spec.get("validation"))
        versions: list[CustomResourceVersion] = []
        for entry in spec.get("versions") or []:
            name = entry.get("name") if isinstance(entry, dict) else None
            if not isinstance(name, str) or not name:
                raise InvalidCustomResourceDefinition(f"{location}: version without a name")
            schema = _open_api_schema(entry.get("schema")) or shared_schema
            versions.append(CustomResourceVersion(name=name, schema=schema or {}))
        if not versions and isinstance(spec.get("version"), str):
            versions.append(CustomResourceVersion(name=spec["version"], schema=shared_schema or {}))
        if not versions:
            raise InvalidCustomResourceDefinition(f"{location}: no versions declared")

        resources.append(CustomResource(group=group, kind=kind, versions=versions))

    if not resources:
        raise InvalidCustomResourceDefinition(f"{source}: no {CRD_KIND} found")
    return resources


def build_custom_resource_graph(
    resources: Iterable[CustomResource],
    prefix: str,
) -> tuple[DefinitionGraph, list[ApiObjectDefinition]]:
    """Build the definition graph and API object descriptors for *resources*.

    A resource with a single version is marked ``custom`` so its names carry
    no version postfix.  When several versions coexist every version is named
    like a built-in type, so that ``v1`` stays bare and the others get a
    postfix (``WidgetV1Beta1``).

    Raises:
        MissingVersionForApiObject: If a version name is not a recognised API
            version.
        DuplicateApiObject: If the same group/version/kind appears twice.
    """
    graph = DefinitionGraph()
    definitions: list[ApiObjectDefinition] = []
    seen: dict[GroupVersionKind, str] = {}

    for resource in resources:
        custom = len(resource.versions) == 1
        for version in resource.versions:
            key = f"{resource.group}/{version.name}.{resource.kind}"
            if parse_api_type_name(key).version is None:
                raise MissingVersionForApiObject(key)
            gvk = GroupVersionKind(group=resource.group, version=version.name, kind=resource.kind)
            if gvk in seen:
                raise DuplicateApiObject(gvk, seen[gvk], key)
            seen[gvk] = key

            schema = dict(version.schema)
            schema.setdefault("type", "object")
            properties = dict(schema.get("properties") or {})
            properties.setdefault("metadata", {"type": "object"})
            schema["properties"] = properties
            graph.put(key, schema)
            definitions.append(
                ApiObjectDefinition(
                    fqn=key,
                    group=resource.group,
                    kind=resource.kind,
                    version=version.name,
                    json_schema=schema,
                    prefix=prefix,
                    custom=custom,
                )
            )

    return graph, definitions


class ImportCustomResourceDefinition(ImportBase):
    """Imports the custom resources defined in a manifest file or URL."""

    def __init__(self, source: str, exclude: list[str] | None = None) -> None:
        self.source = source
        self.exclude = list(exclude or [])
        self._resources: list[CustomResource] | None = None

    @classmethod
    def match(cls, spec: ImportSpec, arguments: ImportArguments) -> ImportCustomResourceDefinition | None:
        source = spec.source
        if not is_url(source) and not source.lower().endswith(CRD_SUFFIXES):
            return None
        logger.info("Importing resources from %s...", source)
        return cls(source, [*spec.exclude, *arguments.exclude])

    @property
    def module_names(self) -> list[str]:
        return list(dict.fromkeys(r.module_name for r in self._loaded()))

    async def load(self) -> None:
        data = await read_source(self.source)
        try:
            documents = list(yaml.safe_load_all(data))
        except yaml.YAMLError as exc:
            raise SchemaParseFailed(self.source, exc) from exc
        self._resources = parse_custom_resources(documents, self.source)

    def generate_module(self, code: CodeMaker, module_name: str, options: GenerateOptions) -> None:
        resources = [r for r in self._loaded() if r.module_name == module_name]
        if not resources:
            raise ValueError(f'unexpected module name "{module_name}" when importing {self.source}')

        graph, definitions = build_custom_resource_graph(resources, options.class_name_prefix or "")
        definitions = [d for d in definitions if d.fqn not in self.exclude]
        type_generator = TypeGenerator(graph, exclude=self.exclude, render_type_name=render_type_name)
        resolve_api_object_names(graph, definitions, render_type_name)
        for definition in definitions:
            generate_construct(type_generator, definition)

        emit_header(code, self.source)
        code.line(type_generator.render().rstrip("\n"))

    def _loaded(self) -> list[CustomResource]:
        if self._resources is None:
            raise RuntimeError("Definitions not loaded; call load() first")
        return self._resources


# ################
# Implementation
# ################


def _open_api_schema(container: Any) -> dict[str, Any] | None:
    if not isinstance(container, dict):
        return None
    schema = container.get("openAPIV3Schema")
    return schema if isinstance(schema, dict) else None
