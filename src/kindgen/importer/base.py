# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Common machinery for importers and the dispatch over import sources.

Each importer class recognises one family of import sources through
:meth:`ImportBase.match`.  :func:`import_dispatch` tries the registered
importers in a fixed order and runs the first one that matches.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from kindgen.render.code import CodeMaker

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

MODULE_NAME_SEPARATOR = ":="


class UnknownImportSource(Exception):
    """Raised when no importer recognises an import source."""

    def __init__(self, source: str) -> None:
        super().__init__(f"Unable to determine import type for '{source}'")
        self.source = source


@dataclass(frozen=True)
class ImportSpec:
    """One entry to import, e.g. ``k8s@1.25.0`` or ``crds:=crds/widget.yaml``.

    Attributes:
        source: The source family and location.
        module_name_prefix: Prepended to every module written for this import.
        exclude: Definition keys to render as ``typing.Any`` for this import only.
    """

    source: str
    module_name_prefix: str | None = None
    exclude: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str, exclude: Iterable[str] = ()) -> ImportSpec:
        """Parse ``[prefix:=]source``."""
        if MODULE_NAME_SEPARATOR in text:
            prefix, source = text.split(MODULE_NAME_SEPARATOR, 1)
            return cls(source=source, module_name_prefix=prefix or None, exclude=tuple(exclude))
        return cls(source=text, exclude=tuple(exclude))


@dataclass
class ImportArguments:
    """Per-run arguments every importer may read while matching.

    Attributes:
        exclude: Definition keys excluded from every import of the run.
    """

    exclude: list[str] = field(default_factory=list)


@dataclass
class GenerateOptions:
    """Options that shape the generated code."""

    class_name_prefix: str | None = None


class ImportBase(ABC):
    """An importer for one source; produces one or more Python modules."""

    @classmethod
    @abstractmethod
    def match(cls, spec: ImportSpec, arguments: ImportArguments) -> ImportBase | None:
        """Return an importer for *spec*, or ``None`` if *spec* is not for this class."""

    @property
    @abstractmethod
    def module_names(self) -> list[str]:
        """Names of the modules this importer writes (valid after :meth:`load`)."""

    async def load(self) -> None:
        """Fetch and parse whatever the importer needs.  Called once before generation."""

    @abstractmethod
    def generate_module(self, code: CodeMaker, module_name: str, options: GenerateOptions) -> None:
        """Write the source of *module_name* into *code*."""

    async def generate(self, options: GenerateOptions) -> dict[str, str]:
        """Load the source and render every module; returns ``{module name: source}``."""
        await self.load()
        modules: dict[str, str] = {}
        for module_name in self.module_names:
            code = CodeMaker()
            self.generate_module(code, module_name, options)
            modules[module_name] = code.to_string()
        return modules

    async def write(
        self,
        outdir: Path,
        options: GenerateOptions,
        *,
        module_name_prefix: str | None = None,
    ) -> list[Path]:
        """Generate all modules and write them as ``<outdir>/[<prefix>_]<module>.py``."""
        modules = await self.generate(options)
        await asyncio.to_thread(outdir.mkdir, parents=True, exist_ok=True)
        written: list[Path] = []
        for module_name, source in modules.items():
            path = outdir / f"{module_file_name(module_name, module_name_prefix)}.py"
            await asyncio.to_thread(path.write_text, source, encoding="utf-8")
            logger.info("Wrote %s", path)
            written.append(path)
        return written


def module_file_name(module_name: str, prefix: str | None = None) -> str:
    """Return the file stem for *module_name*: ``my_k8s`` and ``k8s`` give ``my_k8s_k8s``."""
    if not prefix:
        return module_name
    return f"{prefix.rstrip('_')}_{module_name}"


def match_importer(spec: ImportSpec, arguments: ImportArguments) -> ImportBase:
    """Return the first importer that accepts *spec*.

    Raises:
        UnknownImportSource: If no importer accepts it.
    """
    for importer_class in importer_classes():
        importer = importer_class.match(spec, arguments)
        if importer is not None:
            return importer
    raise UnknownImportSource(spec.source)


async def import_dispatch(
    specs: list[ImportSpec],
    arguments: ImportArguments,
    outdir: Path,
    options: GenerateOptions,
) -> list[Path]:
    """Run every import in *specs* and write the resulting modules under *outdir*.

    All specs are matched before anything is fetched, so an invalid spec
    fails before any network access.
    """
    importers = [(spec, match_importer(spec, arguments)) for spec in specs]
    written: list[Path] = []
    for spec, importer in importers:
        written.extend(await importer.write(outdir, options, module_name_prefix=spec.module_name_prefix))
    return written


def importer_classes() -> list[type[ImportBase]]:
    """The importers tried by :func:`match_importer`, in order."""
    from kindgen.importer.crd import ImportCustomResourceDefinition
    from kindgen.importer.k8s import ImportKubernetesApi

    return [ImportKubernetesApi, ImportCustomResourceDefinition]
