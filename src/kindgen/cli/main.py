# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the kindgen command-line interface."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from kindgen.importer import (
    DuplicateApiObject,
    GenerateOptions,
    ImportArguments,
    ImportSpec,
    InvalidCustomResourceDefinition,
    InvalidIdentifierFormat,
    InvalidVersionFormat,
    MissingVersionForApiObject,
    NameCollision,
    SchemaParseFailed,
    SchemaRetrievalFailed,
    UnknownImportSource,
    import_dispatch,
)
from kindgen.project.config import CONFIG_FILE_NAME, ConfigError, ImportEntry, load_project_config
from kindgen.render import InvalidTypeName, TypeCollisionError
from kindgen.schema import UnresolvedReference

# ###############
# Public Interface
# ###############

LOG_LEVEL_ENV = "KINDGEN_LOG_LEVEL"

# Every failure an import can end with; reported as a single error line.
IMPORT_ERRORS = (
    UnknownImportSource,
    InvalidVersionFormat,
    SchemaRetrievalFailed,
    SchemaParseFailed,
    InvalidCustomResourceDefinition,
    InvalidIdentifierFormat,
    MissingVersionForApiObject,
    DuplicateApiObject,
    NameCollision,
    TypeCollisionError,
    InvalidTypeName,
    UnresolvedReference,
)


def main() -> None:
    """Run the kindgen CLI."""
    parser = argparse.ArgumentParser(
        prog="kindgen",
        description="kindgen: typed Python models for Kubernetes API kinds",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # import subcommand
    import_parser = subparsers.add_parser(
        "import",
        help="Generate models for the given import sources",
        description=(
            "Generate Python models for Kubernetes API objects (k8s, k8s@<version>) "
            "or for CustomResourceDefinitions (a .yaml/.json file or URL). "
            f"Without sources, the 'imports' listed in {CONFIG_FILE_NAME} are used."
        ),
    )
    import_parser.add_argument(
        "sources",
        nargs="*",
        metavar="SOURCE",
        help="Import source, optionally as <module prefix>:=<source> (e.g. k8s@1.25.0)",
    )
    import_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory that receives the generated modules (default: from config, or 'imports')",
    )
    import_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="KEY",
        help="Definition key to render as typing.Any instead of expanding it (repeatable)",
    )
    import_parser.add_argument(
        "--class-prefix",
        default=None,
        help="Prefix for generated wrapper model names (default: 'Kube' for k8s, none for CRDs)",
    )
    import_parser.add_argument(
        "--config",
        default=CONFIG_FILE_NAME,
        help=f"Path to the project configuration (default: {CONFIG_FILE_NAME})",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _setup_logging()
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _setup_logging() -> None:
    """Send library log records to stderr, at the level from KINDGEN_LOG_LEVEL."""
    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "INFO").upper())
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "import":
        return _cmd_import(args)
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    """Handle the import subcommand."""
    config_path = Path(args.config)
    config = None
    if config_path.exists():
        try:
            config = load_project_config(config_path)
        except ConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    if args.sources:
        entries = [ImportEntry(source=source) for source in args.sources]
    elif config is not None and config.imports:
        entries = config.imports
    else:
        print(
            f"Error: no import sources given and no 'imports' found in {config_path}.",
            file=sys.stderr,
        )
        return 1

    output = args.output or (config.output if config is not None else None) or "imports"
    class_name_prefix = args.class_prefix
    if class_name_prefix is None and config is not None:
        class_name_prefix = config.class_name_prefix

    outdir = Path(output)
    options = GenerateOptions(class_name_prefix=class_name_prefix)
    specs = [ImportSpec.parse(entry.source, entry.exclude) for entry in entries]
    arguments = ImportArguments(exclude=list(args.exclude))
    try:
        written = asyncio.run(import_dispatch(specs, arguments, outdir, options))
    except IMPORT_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for path in written:
        print(f"Generated {path}")
    return 0
