"""Single-instance popup lifecycle: create, update in place, close."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Sequence

from pretty_ts_errors.core.display_state import DisplayState
from pretty_ts_errors.core.message_rewriter import ORIGINAL_ERROR_HEADER
from pretty_ts_errors.settings_models import PrettyTsErrorsConfig
from pretty_ts_errors.ui.host import SurfaceAnchor, SurfaceProvider, SurfaceStyle

_LOGGER = logging.getLogger("PrettyTsErrors.Popup")

MIN_HEIGHT = 3
WIDTH_MARGIN = 2
ABSOLUTE_MAX_WIDTH = 120

TYPE_KEYWORDS = ("string", "number", "boolean", "object", "array", "null", "undefined")

_PROPERTY_NAME = re.compile(r"Property\s+\w+")
_SECTION_HEADER = re.compile(r"^(?:Expected:|Provided:|\s*Required:)")


@dataclass(frozen=True, slots=True)
class HighlightSpan:
    line: int
    col_start: int
    col_end: int  # -1 means to end of line
    style_name: str


def highlight_spans(lines: Sequence[str]) -> list[HighlightSpan]:
    spans: list[HighlightSpan] = []
    previous = ""
    for index, line in enumerate(lines):
        match = _PROPERTY_NAME.search(line)
        if match:
            spans.append(HighlightSpan(index, match.start(), match.end(), "Special"))

        for keyword in TYPE_KEYWORDS:
            start = line.find(keyword)
            while start >= 0:
                end = start + len(keyword)
                spans.append(HighlightSpan(index, start, end, "Type"))
                start = line.find(keyword, end)

        if _SECTION_HEADER.match(line):
            spans.append(HighlightSpan(index, 0, -1, "Title"))
        if ORIGINAL_ERROR_HEADER in line or ORIGINAL_ERROR_HEADER in previous:
            spans.append(HighlightSpan(index, 0, -1, "Comment"))
        previous = line
    return spans


def text_display_width(text: str) -> int:
    """Terminal-style cell width: wide East Asian characters count twice."""
    width = 0
    for char in str(text or ""):
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in {"W", "F"} else 1
    return width


class PopupManager:
    """Owns the popup surface and its scratch buffer.

    Content updates on a live popup replace the buffer text only; size is
    fixed when the surface is first opened. Stale handles reported by the
    provider are treated as a closed popup.
    """

    def __init__(
        self,
        state: DisplayState,
        provider: SurfaceProvider,
        config: PrettyTsErrorsConfig,
    ) -> None:
        self.state = state
        self.provider = provider
        self.config = config

    def is_open(self) -> bool:
        return self._surface_valid() and self._buffer_valid()

    def _surface_valid(self) -> bool:
        return self.state.surface is not None and bool(self.provider.is_valid(self.state.surface))

    def _buffer_valid(self) -> bool:
        return self.state.buffer is not None and bool(self.provider.is_buffer_valid(self.state.buffer))

    def prepare_lines(self, content: Sequence[str]) -> list[str]:
        lines: list[str] = []
        for entry in content:
            lines.extend(str(entry).split("\n"))
        return lines

    def popup_height(self, lines: Sequence[str]) -> int:
        return max(min(len(lines), self.config.max_height), MIN_HEIGHT)

    def popup_width(self, lines: Sequence[str]) -> int:
        width = self.config.max_width
        for line in lines:
            width = max(width, min(self.provider.display_width(line) + WIDTH_MARGIN, ABSOLUTE_MAX_WIDTH))
        return width

    def show(self, content: Sequence[str], severity: str = "error") -> None:
        lines = self.prepare_lines(content)
        if not lines:
            self.close()
            return

        if self.is_open():
            self.provider.set_buffer_lines(self.state.buffer, lines)
            self._apply_highlights(lines)
            return

        if self.state.surface is not None:
            # Stale surface (closed outside our control); drop and recreate.
            _LOGGER.debug("Popup surface handle is stale; recreating")
            self._close_surface()

        if not self._buffer_valid():
            self.state.buffer = self.provider.create_buffer()
        self.provider.set_buffer_lines(self.state.buffer, lines)

        height = self.popup_height(lines)
        width = self.popup_width(lines)
        style = SurfaceStyle(severity=severity, border_color=self.config.color_for_severity(severity))
        self.state.surface = self.provider.create_surface(
            self.state.buffer,
            SurfaceAnchor(row=1, col=0),
            width,
            height,
            style,
        )
        _LOGGER.debug("Opened popup %dx%d for %d line(s)", width, height, len(lines))
        self._apply_highlights(lines)

    def _apply_highlights(self, lines: Sequence[str]) -> None:
        buffer = self.state.buffer
        self.provider.clear_highlights(buffer)
        for span in highlight_spans(lines):
            self.provider.apply_highlight(buffer, span.line, span.col_start, span.col_end, span.style_name)

    def _close_surface(self) -> None:
        if self.state.surface is not None:
            self.provider.close(self.state.surface)
        self.state.surface = None

    def close(self) -> None:
        was_open = self.state.surface is not None
        self._close_surface()
        if self._buffer_valid():
            self.provider.discard_buffer(self.state.buffer)
        self.state.forget_surface()
        if was_open:
            _LOGGER.debug("Closed popup")
