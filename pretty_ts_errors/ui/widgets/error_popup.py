"""Floating, non-activating popup that renders a scratch text document."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QFont, QSyntaxHighlighter, QTextCharFormat, QTextDocument
from PySide6.QtWidgets import QFrame, QPlainTextEdit, QVBoxLayout, QWidget

from pretty_ts_errors.lsp.types import utf16_index_from_codepoint

POPUP_STYLE = """
QFrame#prettyTsErrorPopup {{
    background: #1e1f22;
    border: 1px solid {border};
    border-radius: {radius}px;
}}
QPlainTextEdit {{
    background: transparent;
    color: #d4d4d4;
    border: none;
}}
"""


def _char_format(color: str, *, bold: bool = False, italic: bool = False) -> QTextCharFormat:
    fmt = QTextCharFormat()
    fmt.setForeground(QColor(color))
    if bold:
        fmt.setFontWeight(QFont.Bold)
    if italic:
        fmt.setFontItalic(True)
    return fmt


class TagHighlighter(QSyntaxHighlighter):
    """Applies tagged spans to the scratch document, keyed by block number."""

    STYLE_FORMATS = {
        "Special": ("#C586C0", True, False),
        "Type": ("#4EC9B0", False, False),
        "Title": ("#DCDCAA", True, False),
        "Comment": ("#6A9955", False, True),
    }

    def __init__(self, document: QTextDocument) -> None:
        super().__init__(document)
        self._formats = {
            name: _char_format(color, bold=bold, italic=italic)
            for name, (color, bold, italic) in self.STYLE_FORMATS.items()
        }
        self._spans: dict[int, list[tuple[int, int, str]]] = {}

    def clear_spans(self) -> None:
        self._spans.clear()
        self.rehighlight()

    def add_span(self, line: int, col_start: int, col_end: int, style_name: str) -> None:
        self._spans.setdefault(int(line), []).append((int(col_start), int(col_end), str(style_name)))
        block = self.document().findBlockByNumber(int(line))
        if block.isValid():
            self.rehighlightBlock(block)

    def highlightBlock(self, text: str) -> None:
        for start, end, style_name in self._spans.get(self.currentBlock().blockNumber(), ()):
            fmt = self._formats.get(style_name)
            if fmt is None:
                continue
            stop = len(text) if end < 0 else min(end, len(text))
            if stop > start:
                # Span columns are code points; setFormat counts UTF-16 units.
                begin = utf16_index_from_codepoint(text, start)
                self.setFormat(begin, utf16_index_from_codepoint(text, stop) - begin, fmt)


class ErrorPopup(QFrame):
    def __init__(self, document: QTextDocument, *, border_color: str, rounded: bool = True, parent: QWidget | None = None):
        super().__init__(parent, Qt.ToolTip | Qt.FramelessWindowHint)
        self.setObjectName("prettyTsErrorPopup")
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)
        self.setFocusPolicy(Qt.NoFocus)
        self.setStyleSheet(POPUP_STYLE.format(border=border_color, radius=6 if rounded else 0))

        self.view = QPlainTextEdit(self)
        self.view.setReadOnly(True)
        self.view.setFocusPolicy(Qt.NoFocus)
        self.view.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.view.setVerticalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self.view.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.view.setDocument(document)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)
        layout.addWidget(self.view)

    def set_text_font(self, font: QFont) -> None:
        self.view.setFont(font)
        self.view.document().setDefaultFont(font)
