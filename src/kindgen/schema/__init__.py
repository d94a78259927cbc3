# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Definition graph loaded from a schema document."""

from kindgen.schema.graph import (
    REF_PREFIX,
    Alias,
    DefinitionGraph,
    SchemaParseError,
    UnresolvedReference,
    iter_refs,
    key_to_ref,
    parse_schema_document,
    ref_to_key,
)

__all__ = [
    "REF_PREFIX",
    "Alias",
    "DefinitionGraph",
    "SchemaParseError",
    "UnresolvedReference",
    "iter_refs",
    "key_to_ref",
    "parse_schema_document",
    "ref_to_key",
]
