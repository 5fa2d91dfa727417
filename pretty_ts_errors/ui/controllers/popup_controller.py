"""Routes editor events and commands to the rewriter and the popup."""

from __future__ import annotations

import logging
from typing import Callable

from pretty_ts_errors.core.diagnostic_selector import Diagnostic, next_diagnostic, select_diagnostics
from pretty_ts_errors.core.display_state import DisplayState
from pretty_ts_errors.core.message_rewriter import MessageRewriter
from pretty_ts_errors.ui.host import EditorHost
from pretty_ts_errors.ui.popup_manager import PopupManager

_LOGGER = logging.getLogger("PrettyTsErrors.Controller")

SUPPORTED_DOCUMENT_KINDS = frozenset({"typescript", "javascript", "typescriptreact", "javascriptreact"})

_SEVERITY_RANK = {"error": 3, "warning": 2, "info": 1, "hint": 0}

# (delay_ms, callback); a new call supersedes a pending one.
DeferFn = Callable[[int, Callable[[], None]], None]


def _run_now(_delay_ms: int, callback: Callable[[], None]) -> None:
    callback()


def _worst_severity(diagnostics: list[Diagnostic]) -> str:
    worst = "hint"
    for diag in diagnostics:
        sev = str(diag.severity or "error").lower()
        if _SEVERITY_RANK.get(sev, 3) > _SEVERITY_RANK.get(worst, 0):
            worst = sev
    return worst


class PopupController:
    def __init__(
        self,
        host: EditorHost,
        rewriter: MessageRewriter,
        popup: PopupManager,
        state: DisplayState,
        *,
        defer: DeferFn | None = None,
        debounce_ms: int = 100,
        on_status: Callable[[str], None] | None = None,
    ) -> None:
        self.host = host
        self.rewriter = rewriter
        self.popup = popup
        self.state = state
        self._defer = defer or _run_now
        self._debounce_ms = max(0, int(debounce_ms))
        self._on_status = on_status

    @property
    def enabled(self) -> bool:
        return self.state.enabled

    def _document_supported(self) -> bool:
        kind = str(self.host.document_kind() or "").strip().lower()
        return kind in SUPPORTED_DOCUMENT_KINDS

    # ---------- Editor events ----------

    def on_cursor_moved(self) -> None:
        self.process_diagnostics()

    def on_cursor_idle(self) -> None:
        self.process_diagnostics()

    def on_buffer_left(self) -> None:
        self.popup.close()

    def on_insert_entered(self) -> None:
        self.popup.close()

    def on_diagnostics_changed(self) -> None:
        if not self.state.enabled:
            return
        self._defer(self._debounce_ms, self.process_diagnostics)

    # ---------- Evaluation ----------

    def process_diagnostics(self) -> None:
        if not self.state.enabled:
            return
        self._evaluate_at_cursor()

    def _evaluate_at_cursor(self) -> bool:
        if not self._document_supported():
            return False
        line, column = self.host.cursor_position()
        current = select_diagnostics(self.host.diagnostics_at_line(line), line, column)
        if not current:
            self.popup.close()
            return False

        content: list[str] = []
        for diag in current:
            content.extend(self.rewriter.rewrite_lines(diag.message))
        self.popup.show(content, severity=_worst_severity(current))
        return True

    # ---------- Commands ----------

    def toggle(self) -> bool:
        self.state.enabled = not self.state.enabled
        if not self.state.enabled:
            self.popup.close()
        else:
            self.process_diagnostics()
        _LOGGER.info("Pretty TS Errors: %s", "Enabled" if self.state.enabled else "Disabled")
        if self._on_status is not None:
            self._on_status(f"Pretty TS Errors: {'Enabled' if self.state.enabled else 'Disabled'}")
        return self.state.enabled

    def show_at_cursor(self) -> bool:
        """One-shot evaluation that works while auto-show is off."""
        return self._evaluate_at_cursor()

    def next_error(self) -> bool:
        return self._jump(forward=True)

    def prev_error(self) -> bool:
        return self._jump(forward=False)

    def _jump(self, *, forward: bool) -> bool:
        if not self._document_supported():
            return False
        line, column = self.host.cursor_position()
        target = next_diagnostic(self.host.document_diagnostics(), line, column, forward=forward)
        if target is None:
            return False
        self.host.set_cursor_position(target.line, target.column)
        self._evaluate_at_cursor()
        return True
