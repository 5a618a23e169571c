from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from simplelang.parser import default_parser


@dataclass(frozen=True)
class AtomMatch:
    text: str
    start: int
    end: int


@lru_cache(maxsize=None)
def _terminal(name: str) -> re.Pattern[str]:
    # Compiled from the grammar's own terminal definition
    return re.compile(default_parser().terminal_regexp(name))


def _match(name: str, text: str, pos: int) -> AtomMatch | None:
    # Anchored at pos: no whitespace is skipped before or inside the atom.
    match = _terminal(name).match(text, pos)
    if match is None:
        return None
    return AtomMatch(text=match.group(), start=match.start(), end=match.end())


def match_number(text: str, pos: int = 0) -> AtomMatch | None:
    """Match a number literal starting exactly at `pos`; `end` is the advanced cursor."""
    return _match("NUMBER", text, pos)


def match_variable(text: str, pos: int = 0) -> AtomMatch | None:
    """Match an identifier starting exactly at `pos`; `end` is the advanced cursor."""
    return _match("NAME", text, pos)
