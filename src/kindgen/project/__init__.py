# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration for kindgen."""

from kindgen.project.config import (
    CONFIG_FILE_NAME,
    DEFAULT_OUTPUT_DIRECTORY,
    ConfigError,
    ImportEntry,
    ProjectConfig,
    load_project_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_OUTPUT_DIRECTORY",
    "ConfigError",
    "ImportEntry",
    "ProjectConfig",
    "load_project_config",
]
