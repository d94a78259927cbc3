#!/usr/bin/env python3
# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the kindgen CI checks locally: format, lint, type check, tests, and build."""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("format", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("types", ["uv", "run", "ty", "check", "src/"]),
    ("tests", ["uv", "run", "pytest", "--cov=kindgen", "--cov-report=term-missing"]),
    ("build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a summary."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        choices=[name for name, _ in STEPS],
        help="Step to skip (repeatable)",
    )
    args = parser.parse_args()

    results: list[tuple[str, bool, float]] = []
    for name, cmd in STEPS:
        if name in args.skip:
            continue
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    _banner("summary")
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue(title)}\n{sep}")


def _repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
