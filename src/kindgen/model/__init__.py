# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model shared by the importers: identifiers and API object descriptors."""

from kindgen.model.api_objects import (
    ApiObjectDefinition,
    ApiVersion,
    GroupVersionKind,
    TypeIdentifier,
    VersionLevel,
)

__all__ = [
    "ApiObjectDefinition",
    "ApiVersion",
    "GroupVersionKind",
    "TypeIdentifier",
    "VersionLevel",
]
