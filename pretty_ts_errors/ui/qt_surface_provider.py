"""Qt implementation of the popup surface provider."""

from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import QPoint, QSize
from PySide6.QtGui import QFontMetrics, QTextDocument
from PySide6.QtWidgets import QPlainTextDocumentLayout, QPlainTextEdit
from shiboken6 import isValid as _is_qobject_valid

from pretty_ts_errors.ui.host import SurfaceAnchor, SurfaceStyle
from pretty_ts_errors.ui.popup_manager import text_display_width
from pretty_ts_errors.ui.widgets.error_popup import ErrorPopup, TagHighlighter

_FRAME_PADDING = QSize(20, 14)


class QtSurfaceProvider:
    """Scratch buffers are ``QTextDocument``s; surfaces are ``ErrorPopup`` frames."""

    def __init__(self, editor: QPlainTextEdit) -> None:
        self.editor = editor
        self._highlighters: dict[int, TagHighlighter] = {}

    def create_buffer(self) -> QTextDocument:
        document = QTextDocument(self.editor)
        document.setDocumentLayout(QPlainTextDocumentLayout(document))
        document.setDocumentMargin(2)
        document.setDefaultFont(self.editor.font())
        self._highlighters[id(document)] = TagHighlighter(document)
        document.destroyed.connect(lambda *_args, key=id(document): self._highlighters.pop(key, None))
        return document

    def is_buffer_valid(self, buffer: QTextDocument) -> bool:
        return isinstance(buffer, QTextDocument) and _is_qobject_valid(buffer)

    def set_buffer_lines(self, buffer: QTextDocument, lines: Sequence[str]) -> None:
        highlighter = self._highlighters.get(id(buffer))
        if highlighter is not None:
            highlighter.clear_spans()
        buffer.setPlainText("\n".join(lines))

    def clear_highlights(self, buffer: QTextDocument) -> None:
        highlighter = self._highlighters.get(id(buffer))
        if highlighter is not None:
            highlighter.clear_spans()

    def apply_highlight(self, buffer: QTextDocument, line: int, col_start: int, col_end: int, style_name: str) -> None:
        highlighter = self._highlighters.get(id(buffer))
        if highlighter is not None:
            highlighter.add_span(line, col_start, col_end, style_name)

    def _anchor_point(self, anchor: SurfaceAnchor) -> QPoint:
        rect = self.editor.cursorRect()
        metrics = QFontMetrics(self.editor.font())
        local = QPoint(
            rect.left() + anchor.col * metrics.horizontalAdvance("M"),
            rect.bottom() + max(0, anchor.row - 1) * metrics.lineSpacing() + 2,
        )
        return self.editor.viewport().mapToGlobal(local)

    def create_surface(
        self,
        buffer: QTextDocument,
        anchor: SurfaceAnchor,
        width: int,
        height: int,
        style: SurfaceStyle,
    ) -> ErrorPopup:
        popup = ErrorPopup(
            buffer,
            border_color=style.border_color,
            rounded=style.border == "rounded",
            parent=self.editor,
        )
        popup.set_text_font(self.editor.font())
        metrics = QFontMetrics(self.editor.font())
        popup.resize(
            width * metrics.horizontalAdvance("M") + _FRAME_PADDING.width(),
            height * metrics.lineSpacing() + _FRAME_PADDING.height(),
        )
        popup.move(self._anchor_point(anchor))
        popup.show()
        return popup

    def is_valid(self, surface: ErrorPopup) -> bool:
        return isinstance(surface, ErrorPopup) and _is_qobject_valid(surface) and surface.isVisible()

    def close(self, surface: ErrorPopup) -> None:
        if not _is_qobject_valid(surface):
            return
        surface.hide()
        surface.deleteLater()

    def discard_buffer(self, buffer: QTextDocument) -> None:
        if not self.is_buffer_valid(buffer):
            return
        self._highlighters.pop(id(buffer), None)
        buffer.deleteLater()

    def display_width(self, text: str) -> int:
        return text_display_width(text)
