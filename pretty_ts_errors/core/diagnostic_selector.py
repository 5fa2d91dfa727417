"""Diagnostic records and cursor-position filtering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A reported problem; lines and columns are 0-based like LSP ranges."""

    message: str
    line: int
    column: int
    end_line: int
    end_column: int
    severity: str = "error"
    source: str = ""
    code: str = ""
    # Message as delivered after interception (shown on hover); empty when unchanged.
    published_message: str = ""

    def covers(self, line: int, column: int) -> bool:
        if line < self.line or line > self.end_line:
            return False
        start = self.column if line == self.line else 0
        if line < self.end_line:
            # Range continues on a later line: the rest of this line is covered.
            return column >= start
        return start <= column <= self.end_column


def diagnostics_on_line(diagnostics: Iterable[Diagnostic], line: int) -> list[Diagnostic]:
    """Diagnostics whose range starts on ``line``."""
    return [diag for diag in diagnostics if diag.line == line]


def select_diagnostics(
    diagnostics: Sequence[Diagnostic],
    line: int,
    column: int,
) -> list[Diagnostic]:
    """Keep, in order, every diagnostic whose range covers ``(line, column)``.

    Both ends of the column range are inclusive.
    """
    return [diag for diag in diagnostics if diag.covers(line, column)]


def sorted_by_position(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    return sorted(diagnostics, key=lambda diag: (diag.line, diag.column))


def next_diagnostic(
    diagnostics: Iterable[Diagnostic],
    line: int,
    column: int,
    *,
    forward: bool = True,
) -> Diagnostic | None:
    """The first diagnostic start after (or before) the position, wrapping around."""
    ordered = sorted_by_position(diagnostics)
    if not ordered:
        return None
    here = (line, column)
    if forward:
        for diag in ordered:
            if (diag.line, diag.column) > here:
                return diag
        return ordered[0]
    for diag in reversed(ordered):
        if (diag.line, diag.column) < here:
            return diag
    return ordered[-1]
