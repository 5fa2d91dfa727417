"""Plain-text TypeScript editor that exposes cursor, focus and diagnostics to the popup."""

from __future__ import annotations

from PySide6.QtCore import QEvent, QPoint, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QFont, QFontDatabase, QKeyEvent, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit, QTextEdit, QToolTip, QWidget

from pretty_ts_errors.core.diagnostic_selector import Diagnostic, diagnostics_on_line, select_diagnostics
from pretty_ts_errors.lsp.types import codepoint_index_from_utf16_units, utf16_index_from_codepoint
from pretty_ts_errors.services.language_id import language_id_for_path

CURSOR_IDLE_MS = 400

_LINT_COLOR_DEFAULTS = {
    "error": "#E35D6A",
    "warning": "#D6A54A",
    "info": "#6AA1FF",
    "hint": "#8F9AA5",
}


class TypeScriptEditor(QPlainTextEdit):
    cursorMoved = Signal()
    cursorIdle = Signal()
    focusLost = Signal()
    editingStarted = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.file_path: str | None = None
        self._diagnostics: list[Diagnostic] = []
        self._lint_colors = dict(_LINT_COLOR_DEFAULTS)
        self._lint_selections: list[QTextEdit.ExtraSelection] = []
        self._editing = False

        font = QFontDatabase.systemFont(QFontDatabase.FixedFont)
        font.setStyleHint(QFont.Monospace)
        self.setFont(font)
        self.setLineWrapMode(QPlainTextEdit.NoWrap)

        self._idle_timer = QTimer(self)
        self._idle_timer.setSingleShot(True)
        self._idle_timer.setInterval(CURSOR_IDLE_MS)
        self._idle_timer.timeout.connect(self.cursorIdle.emit)
        self.cursorPositionChanged.connect(self._on_cursor_position_changed)

    # ---------- Host contract ----------
    # Columns here are code points, matching Diagnostic records; Qt positions
    # are UTF-16 units and are converted at this boundary.

    def document_kind(self) -> str:
        return language_id_for_path(self.file_path)

    def cursor_position(self) -> tuple[int, int]:
        return self._line_column(self.textCursor())

    def _line_column(self, cursor: QTextCursor) -> tuple[int, int]:
        column = codepoint_index_from_utf16_units(cursor.block().text(), cursor.positionInBlock())
        return cursor.blockNumber(), column

    def diagnostics_at_line(self, line: int) -> list[Diagnostic]:
        return diagnostics_on_line(self._diagnostics, line)

    def document_diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def set_cursor_position(self, line: int, column: int) -> None:
        position = self._document_position(line, column)
        if position < 0:
            return
        cursor = QTextCursor(self.document())
        cursor.setPosition(position)
        self.setTextCursor(cursor)
        self.ensureCursorVisible()

    def line_text(self, line: int) -> str:
        block = self.document().findBlockByNumber(max(0, int(line)))
        return block.text() if block.isValid() else ""

    # ---------- Diagnostics ----------

    def set_file_path(self, file_path: str | None) -> None:
        self.file_path = file_path

    def set_lint_colors(self, colors: dict[str, str]) -> None:
        for key, value in (colors or {}).items():
            if QColor(str(value)).isValid():
                self._lint_colors[str(key)] = str(value)
        self._rebuild_lint_selections()

    def set_diagnostics(self, diagnostics: list[Diagnostic]) -> None:
        self._diagnostics = [diag for diag in diagnostics or [] if isinstance(diag, Diagnostic)]
        self._rebuild_lint_selections()

    def clear_diagnostics(self) -> None:
        self.set_diagnostics([])

    def _document_position(self, line: int, column: int) -> int:
        block = self.document().findBlockByNumber(max(0, int(line)))
        if not block.isValid():
            return -1
        text = block.text()
        clamped = max(0, min(int(column), len(text)))
        return int(block.position() + utf16_index_from_codepoint(text, clamped))

    # ---------- Hover ----------

    def hover_text_at(self, line: int, column: int) -> str:
        """Published message(s) of the diagnostics under a position."""
        covering = select_diagnostics(self._diagnostics, int(line), int(column))
        return "\n\n".join(diag.published_message or diag.message for diag in covering)

    def _show_hover_tooltip(self, pos: QPoint, global_pos: QPoint) -> bool:
        line, column = self._line_column(self.cursorForPosition(pos))
        text = self.hover_text_at(line, column)
        if not text:
            QToolTip.hideText()
            return False
        QToolTip.showText(global_pos, text, self.viewport())
        return True

    def viewportEvent(self, event) -> bool:
        if event is not None and event.type() == QEvent.ToolTip:
            if not self._show_hover_tooltip(event.pos(), event.globalPos()):
                event.ignore()
            return True
        return super().viewportEvent(event)

    def _rebuild_lint_selections(self) -> None:
        selections: list[QTextEdit.ExtraSelection] = []
        for diag in self._diagnostics:
            start = self._document_position(diag.line, diag.column)
            end = self._document_position(diag.end_line, diag.end_column)
            if start < 0:
                continue
            if end <= start:
                end = start + 1
            cursor = QTextCursor(self.document())
            cursor.setPosition(start)
            cursor.setPosition(min(end, self.document().characterCount() - 1), QTextCursor.KeepAnchor)
            fmt = QTextCharFormat()
            fmt.setUnderlineStyle(QTextCharFormat.WaveUnderline)
            color = self._lint_colors.get(diag.severity) or self._lint_colors["error"]
            fmt.setUnderlineColor(QColor(color))
            sel = QTextEdit.ExtraSelection()
            sel.cursor = cursor
            sel.format = fmt
            selections.append(sel)
        self._lint_selections = selections
        self.setExtraSelections(selections)

    # ---------- Events ----------

    def _on_cursor_position_changed(self) -> None:
        # Moves caused by typing are edits, not navigation.
        if not self._editing:
            self.cursorMoved.emit()
        self._idle_timer.start()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        text = event.text()
        if (text and text.isprintable()) or event.key() in (Qt.Key_Backspace, Qt.Key_Delete):
            self.editingStarted.emit()
            self._editing = True
        try:
            super().keyPressEvent(event)
        finally:
            self._editing = False

    def focusOutEvent(self, event) -> None:
        self._idle_timer.stop()
        self.focusLost.emit()
        super().focusOutEvent(event)
