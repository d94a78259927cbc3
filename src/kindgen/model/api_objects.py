# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Identifiers and descriptors for API objects discovered in a schema."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class VersionLevel(Enum):
    """Stability level encoded in an API version (``v1beta1`` is ``beta``)."""

    ALPHA = "alpha"
    BETA = "beta"
    STABLE = "stable"


class ApiVersion(BaseModel):
    """A parsed API version segment such as ``v1`` or ``v2alpha1``."""

    model_config = ConfigDict(frozen=True)

    raw: str
    major: int
    level: VersionLevel
    subversion: int = 0


class TypeIdentifier(BaseModel):
    """A structured view of a definition key.

    Attributes:
        fullname: The original definition key.
        basename: The trailing segment (e.g. ``Deployment``).
        namespace: Everything before the version segment (or before the
            basename for non-versioned keys).
        group: The API group namespace; only set for versioned keys.
        version: The parsed version; ``None`` for plain data types.
    """

    model_config = ConfigDict(frozen=True)

    fullname: str
    basename: str
    namespace: str = ""
    group: str | None = None
    version: ApiVersion | None = None


class GroupVersionKind(BaseModel):
    """One entry of the ``x-kubernetes-group-version-kind`` annotation."""

    model_config = ConfigDict(frozen=True)

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        """The ``apiVersion`` string used in manifests (core group has no prefix)."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


class ApiObjectDefinition(BaseModel):
    """A top-level, addressable resource kind found in a definition graph."""

    fqn: str
    group: str
    kind: str
    version: str
    json_schema: dict[str, Any]
    prefix: str = ""
    custom: bool = False

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind(group=self.group, version=self.version, kind=self.kind)
