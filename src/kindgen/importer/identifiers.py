# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parsing of composite definition keys into structured type identifiers.

A key is a reverse-path namespace, an optional version segment and a
basename, separated by ``.`` (``io.k8s.api.apps.v1.Deployment``) or, for
custom resources, by ``/`` and ``.`` (``example.com/v1alpha1.Widget``).
"""

from __future__ import annotations

import re

from kindgen.model.api_objects import ApiVersion, TypeIdentifier, VersionLevel

# ###############
# Public Interface
# ###############


class InvalidIdentifierFormat(Exception):
    """Raised when a definition key looks versioned but does not follow the key grammar."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Invalid type identifier '{key}': {reason}")
        self.key = key


def parse_api_type_name(key: str) -> TypeIdentifier:
    """Parse a definition key into a :class:`TypeIdentifier`.

    Keys without a version segment (e.g.
    ``io.k8s.apimachinery.pkg.api.resource.Quantity``) yield an identifier
    whose ``version`` is ``None``; such identifiers name plain data types.

    Raises:
        InvalidIdentifierFormat: If the key has an empty segment, or if the
            segment before the basename starts like a version (``v`` and a
            digit) but does not match ``v<major>[alpha|beta<n>]``.
    """
    if not key:
        raise InvalidIdentifierFormat(key, "empty key")

    separators = [(m.start(), m.group()) for m in _SEPARATOR_RE.finditer(key)]
    segments = _SEPARATOR_RE.split(key)
    if any(not segment for segment in segments):
        raise InvalidIdentifierFormat(key, "empty segment")

    basename = segments[-1]
    if len(segments) < 2:
        return TypeIdentifier(fullname=key, basename=basename)

    candidate = segments[-2]
    namespace_end = separators[-1][0] - len(candidate) - 1
    if not _VERSION_LIKE_RE.match(candidate):
        return TypeIdentifier(fullname=key, basename=basename, namespace=key[: separators[-1][0]])

    version = _parse_version(key, candidate)
    namespace = key[:namespace_end] if namespace_end > 0 else ""
    return TypeIdentifier(
        fullname=key,
        basename=basename,
        namespace=namespace,
        group=namespace,
        version=version,
    )


def format_api_type_name(identifier: TypeIdentifier, *, separator: str = ".") -> str:
    """Reassemble a definition key from its parts.

    *separator* is placed between the group and the version; use ``"/"`` for
    custom-resource style keys.
    """
    if identifier.version is None:
        if identifier.namespace:
            return f"{identifier.namespace}.{identifier.basename}"
        return identifier.basename
    head = f"{identifier.group}{separator}" if identifier.group else ""
    return f"{head}{identifier.version.raw}.{identifier.basename}"


# ################
# Implementation
# ################

_SEPARATOR_RE = re.compile(r"[./]")
_VERSION_LIKE_RE = re.compile(r"^v\d")
_VERSION_RE = re.compile(r"^v(?P<major>\d+)(?:(?P<level>alpha|beta)(?P<sub>\d+))?$")


def _parse_version(key: str, raw: str) -> ApiVersion:
    """Parse a version segment that already looks like ``v<digit>...``."""
    match = _VERSION_RE.match(raw)
    if match is None:
        raise InvalidIdentifierFormat(key, f"malformed version segment '{raw}'")
    level = match.group("level")
    return ApiVersion(
        raw=raw,
        major=int(match.group("major")),
        level=VersionLevel(level) if level else VersionLevel.STABLE,
        subversion=int(match.group("sub") or 0),
    )
