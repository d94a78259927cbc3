# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Import of the built-in Kubernetes API types (``k8s`` / ``k8s@<version>``)."""

from __future__ import annotations

import logging
import re

from kindgen.importer.base import GenerateOptions, ImportArguments, ImportBase, ImportSpec
from kindgen.importer.construct import emit_header, generate_construct
from kindgen.importer.download import SchemaRetrievalFailed, download
from kindgen.importer.naming import render_type_name, resolve_api_object_names
from kindgen.importer.scanner import find_api_object_definitions
from kindgen.render.code import CodeMaker
from kindgen.render.type_generator import TypeGenerator
from kindgen.schema.graph import DefinitionGraph, SchemaParseError, parse_schema_document

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_API_VERSION = "1.25.0"
DEFAULT_CLASS_NAME_PREFIX = "Kube"
MODULE_NAME = "k8s"

SCHEMA_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/cdk8s-team/cdk8s/master/kubernetes-schemas/v{version}/_definitions.json"
)
SCHEMA_INDEX_URL = "https://github.com/cdk8s-team/cdk8s/tree/master/kubernetes-schemas"


class InvalidVersionFormat(Exception):
    """Raised when a requested Kubernetes version is not ``<major>.<minor>.<patch>``."""

    def __init__(self, version: str) -> None:
        super().__init__(f'Expected k8s version "{version}" to match format "<major>.<minor>.<patch>".')
        self.version = version


class SchemaParseFailed(Exception):
    """Raised when a downloaded schema document cannot be parsed."""

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(f"Unable to parse schema at {url}: {cause}")
        self.url = url


def generate_kubernetes_module(
    code: CodeMaker,
    graph: DefinitionGraph,
    *,
    prefix: str,
    exclude: list[str],
    source: str,
) -> None:
    """Turn *graph* into the source of one module holding every API object.

    *graph* is rewritten in place: each API object's key becomes an alias
    of its properties model.  An API object whose key is in *exclude* gets
    no wrapper model and renders as ``typing.Any`` wherever it is referenced,
    which is how one of two kinds deriving the same name is left out.
    """
    excluded = set(exclude)
    top_level_objects = [d for d in find_api_object_definitions(graph, prefix) if d.fqn not in excluded]
    logger.info("Found %d API objects", len(top_level_objects))

    type_generator = TypeGenerator(graph, exclude=exclude, render_type_name=render_type_name)

    # Every rename must be in place before any construct is generated, since
    # one object's properties can reference another object.
    resolve_api_object_names(graph, top_level_objects, render_type_name)

    for definition in top_level_objects:
        generate_construct(type_generator, definition)

    emit_header(code, source)
    code.line(type_generator.render().rstrip("\n"))


class ImportKubernetesApi(ImportBase):
    """Imports the API objects of one Kubernetes release."""

    def __init__(self, api_version: str, exclude: list[str] | None = None) -> None:
        self.api_version = api_version
        self.exclude = list(exclude or [])
        self._graph: DefinitionGraph | None = None

    @classmethod
    def match(cls, spec: ImportSpec, arguments: ImportArguments) -> ImportKubernetesApi | None:
        source = spec.source
        if source != MODULE_NAME and not source.startswith(f"{MODULE_NAME}@"):
            return None

        _, _, version = source.partition("@")
        version = version or DEFAULT_API_VERSION
        if not _VERSION_RE.match(version):
            raise InvalidVersionFormat(version)

        logger.info("Importing k8s v%s...", version)
        return cls(version, [*spec.exclude, *arguments.exclude])

    @property
    def module_names(self) -> list[str]:
        return [MODULE_NAME]

    @property
    def url(self) -> str:
        return SCHEMA_URL_TEMPLATE.format(version=self.api_version)

    async def load(self) -> None:
        self._graph = await download_schema(self.api_version)

    def generate_module(self, code: CodeMaker, module_name: str, options: GenerateOptions) -> None:
        if module_name != MODULE_NAME:
            raise ValueError(f'unexpected module name "{module_name}" when importing k8s types (expected "k8s")')
        if self._graph is None:
            raise RuntimeError("Schema not loaded; call load() first")

        prefix = options.class_name_prefix if options.class_name_prefix is not None else DEFAULT_CLASS_NAME_PREFIX
        generate_kubernetes_module(
            code,
            self._graph,
            prefix=prefix,
            exclude=self.exclude,
            source=f"k8s@{self.api_version}",
        )


async def download_schema(api_version: str) -> DefinitionGraph:
    """Fetch and parse the definitions of Kubernetes *api_version*.

    Raises:
        SchemaNotFound: If there is no schema for this version.
        SchemaRetrievalFailed: On any other retrieval error.
        SchemaParseFailed: If the document is not a valid schema.
    """
    url = SCHEMA_URL_TEMPLATE.format(version=api_version)
    try:
        output = await download(url)
    except SchemaRetrievalFailed:
        logger.error(
            "Could not find a schema for k8s version %s. The current list of available schemas is at %s.",
            api_version,
            SCHEMA_INDEX_URL,
        )
        raise

    try:
        return parse_schema_document(output)
    except SchemaParseError as exc:
        raise SchemaParseFailed(url, exc) from exc


# ################
# Implementation
# ################

_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")
