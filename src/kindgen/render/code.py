# Copyright 2026 kindgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""An indentation-aware line writer for generated Python source."""

from __future__ import annotations

# ###############
# Public Interface
# ###############

INDENT = "    "


class CodeMaker:
    """Accumulates lines of source text at the current indentation level."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._level = 0

    def line(self, text: str = "") -> None:
        """Append *text* (or an empty line) at the current indentation."""
        self._lines.append(INDENT * self._level + text if text else "")

    def open(self, header: str) -> None:
        """Write a block header such as ``class Foo:`` and indent."""
        self.line(header)
        self._level += 1

    def close(self) -> None:
        """Leave the innermost block."""
        if self._level == 0:
            raise ValueError("No open block to close")
        self._level -= 1

    def docstring(self, text: str) -> None:
        """Write a triple-quoted docstring, escaping what would end it early."""
        body = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        if body.endswith('"'):
            body += " "
        lines = body.splitlines() or [""]
        if len(lines) == 1:
            self.line(f'"""{lines[0]}"""')
            return
        self.line(f'"""{lines[0]}')
        for extra in lines[1:]:
            self.line(extra.rstrip())
        self.line('"""')

    def extend(self, other: CodeMaker) -> None:
        """Append the lines of *other*, re-indented to the current level."""
        for text in other._lines:
            self.line(text)

    def to_string(self) -> str:
        return "\n".join(self._lines) + "\n" if self._lines else ""
