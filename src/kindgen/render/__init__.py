# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rendering of registered types into Python source."""

from kindgen.render.code import CodeMaker
from kindgen.render.type_generator import (
    ANY_TYPE,
    InvalidTypeName,
    TypeCollisionError,
    TypeGenerator,
    default_render_type_name,
)

__all__ = [
    "ANY_TYPE",
    "CodeMaker",
    "InvalidTypeName",
    "TypeCollisionError",
    "TypeGenerator",
    "default_render_type_name",
]
