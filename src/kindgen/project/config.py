# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the kindgen project configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = "kindgen.yaml"
DEFAULT_OUTPUT_DIRECTORY = "imports"


class ConfigError(Exception):
    """Raised when a project configuration file is invalid or cannot be loaded."""


@dataclass
class ImportEntry:
    """One entry of the ``imports`` list.

    Attributes:
        source: The import source, optionally prefixed with ``<module prefix>:=``.
        exclude: Definition keys to render as ``typing.Any`` for this import.
    """

    source: str
    exclude: list[str] = field(default_factory=list)


@dataclass
class ProjectConfig:
    """The parsed configuration of a kindgen project.

    Attributes:
        output: Directory (relative to the project root) that receives generated modules.
        class_name_prefix: Prefix for wrapper model names; ``None`` keeps each importer's default.
        imports: The imports to run when no sources are given on the command line.
    """

    output: str = DEFAULT_OUTPUT_DIRECTORY
    class_name_prefix: str | None = None
    imports: list[ImportEntry] = field(default_factory=list)


def load_project_config(path: Path) -> ProjectConfig:
    """Load and parse a kindgen configuration file.

    Args:
        path: Path to the ``kindgen.yaml`` file.

    Returns:
        A ProjectConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_project_config(text, source_label=str(path))


# ################
# Implementation
# ################


def _parse_project_config(text: str, source_label: str = "<string>") -> ProjectConfig:
    """Parse config YAML text into a ProjectConfig.

    An empty document yields the defaults.

    Raises:
        ConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ProjectConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    output = _optional_string(data, "output", source_label) or DEFAULT_OUTPUT_DIRECTORY
    class_name_prefix = _optional_string(data, "class-name-prefix", source_label)

    imports: list[ImportEntry] = []
    if "imports" in data:
        raw_imports = data["imports"]
        if not isinstance(raw_imports, list):
            raise ConfigError(f"{source_label}: 'imports' must be a list")
        for index, entry in enumerate(raw_imports):
            imports.append(_parse_import_entry(entry, index, source_label))

    return ProjectConfig(output=output, class_name_prefix=class_name_prefix, imports=imports)


def _optional_string(mapping: dict[str, object], key: str, source_label: str) -> str | None:
    """Extract an optional string field from a mapping, raising ConfigError on a wrong type."""
    if key not in mapping or mapping[key] is None:
        return None
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _parse_import_entry(entry: object, index: int, source_label: str) -> ImportEntry:
    """Parse one ``imports`` entry: either a bare source string or a mapping."""
    location = f"{source_label}: imports[{index}]"

    if isinstance(entry, str):
        return ImportEntry(source=entry)

    if not isinstance(entry, dict):
        raise ConfigError(f"{location} must be a string or a YAML mapping")

    source = _optional_string(entry, "source", location)
    if not source:
        raise ConfigError(f"{location}: missing required field 'source'")

    exclude = entry.get("exclude", [])
    if not isinstance(exclude, list) or not all(isinstance(item, str) for item in exclude):
        raise ConfigError(f"{location} '{source}': 'exclude' must be a list of strings")

    return ImportEntry(source=source, exclude=list(exclude))
