# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Importers that turn published API schemas into generated Python modules."""

from kindgen.importer.base import (
    GenerateOptions,
    ImportArguments,
    ImportBase,
    ImportSpec,
    UnknownImportSource,
    import_dispatch,
    match_importer,
)
from kindgen.importer.construct import expand_reachable, generate_construct
from kindgen.importer.crd import ImportCustomResourceDefinition, InvalidCustomResourceDefinition
from kindgen.importer.download import SchemaNotFound, SchemaRetrievalFailed
from kindgen.importer.identifiers import InvalidIdentifierFormat, parse_api_type_name
from kindgen.importer.k8s import (
    DEFAULT_API_VERSION,
    ImportKubernetesApi,
    InvalidVersionFormat,
    SchemaParseFailed,
)
from kindgen.importer.naming import NameCollision, resolve_api_object_names
from kindgen.importer.scanner import (
    DuplicateApiObject,
    MissingVersionForApiObject,
    find_api_object_definitions,
)

__all__ = [
    "DEFAULT_API_VERSION",
    "DuplicateApiObject",
    "GenerateOptions",
    "ImportArguments",
    "ImportBase",
    "ImportCustomResourceDefinition",
    "ImportKubernetesApi",
    "ImportSpec",
    "InvalidCustomResourceDefinition",
    "InvalidIdentifierFormat",
    "InvalidVersionFormat",
    "MissingVersionForApiObject",
    "NameCollision",
    "SchemaNotFound",
    "SchemaParseFailed",
    "SchemaRetrievalFailed",
    "UnknownImportSource",
    "expand_reachable",
    "find_api_object_definitions",
    "generate_construct",
    "import_dispatch",
    "match_importer",
    "parse_api_type_name",
    "resolve_api_object_names",
]
