"""Host editor contracts consumed by the popup manager and controller (pure Python).

The Qt widgets in ``pretty_ts_errors.ui.widgets`` implement these; tests use
in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from pretty_ts_errors.core.diagnostic_selector import Diagnostic


@dataclass(frozen=True)
class SurfaceStyle:
    severity: str = "error"
    border_color: str = "#FF5555"
    border: str = "rounded"


@dataclass(frozen=True)
class SurfaceAnchor:
    """Position relative to the editor cursor, in rows/columns."""

    row: int = 1
    col: int = 0


class SurfaceProvider(Protocol):
    def create_buffer(self) -> Any:
        ...

    def is_buffer_valid(self, buffer: Any) -> bool:
        ...

    def set_buffer_lines(self, buffer: Any, lines: Sequence[str]) -> None:
        ...

    def clear_highlights(self, buffer: Any) -> None:
        ...

    def apply_highlight(self, buffer: Any, line: int, col_start: int, col_end: int, style_name: str) -> None:
        ...

    def create_surface(
        self,
        buffer: Any,
        anchor: SurfaceAnchor,
        width: int,
        height: int,
        style: SurfaceStyle,
    ) -> Any:
        ...

    def is_valid(self, surface: Any) -> bool:
        ...

    def close(self, surface: Any) -> None:
        """Must tolerate handles that are already stale."""
        ...

    def discard_buffer(self, buffer: Any) -> None:
        ...

    def display_width(self, text: str) -> int:
        ...


class EditorHost(Protocol):
    def document_kind(self) -> str:
        ...

    def cursor_position(self) -> tuple[int, int]:
        """0-based ``(line, column)``."""
        ...

    def diagnostics_at_line(self, line: int) -> list[Diagnostic]:
        ...

    def document_diagnostics(self) -> list[Diagnostic]:
        ...

    def set_cursor_position(self, line: int, column: int) -> None:
        ...
