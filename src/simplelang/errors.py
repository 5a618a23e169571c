"""
Parse errors for the simple front end.

A failed parse produces exactly one `ParseError`. It points at the furthest
position the parser reached and lists what could have appeared there.
"""

from __future__ import annotations

from collections.abc import Iterable

from simplelang.config import (
    DEFAULT_SOURCE_NAME, END_OF_INPUT, ERROR_CONTEXT_CHARS, ERROR_POINTER_CHAR
)


class ParseError(Exception):
    """Syntax error with source position and expectation description"""

    def __init__(
        self,
        message: str,
        offset: int,
        line: int,
        column: int,
        expected: Iterable[str] = (),
        found: str | None = None,
        source_name: str = DEFAULT_SOURCE_NAME,
    ) -> None:
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column
        self.expected = frozenset(expected)
        self.found = found
        self.source_name = source_name
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.source_name}:{self.line}:{self.column}: {self.message}"

    @property
    def at_end_of_input(self) -> bool:
        return self.found == END_OF_INPUT

    def format_snippet(self, source: str) -> str:
        """
        Render the error with the offending line and a caret under the column.

            <input>:2:5: unexpected ')'; expected number, variable
              |
            2 | x = );
              |     ^
        """
        lines = source.split("\n")
        header = str(self)
        if not 1 <= self.line <= len(lines):
            return header

        text = lines[self.line - 1]
        column = self.column - 1
        # Long lines are clipped around the error column
        start = max(0, column - ERROR_CONTEXT_CHARS)
        end = column + ERROR_CONTEXT_CHARS
        prefix = "..." if start > 0 else ""
        suffix = "..." if end < len(text) else ""
        shown = prefix + text[start:end] + suffix
        pointer_column = len(prefix) + column - start

        gutter = " " * len(str(self.line))
        return "\n".join([
            header,
            f"{gutter} |",
            f"{self.line} | {shown}",
            f"{gutter} | {' ' * pointer_column}{ERROR_POINTER_CHAR}",
        ])
