"""Single-document TypeScript editor window hosting the error popup."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from PySide6.QtWidgets import QFileDialog, QMainWindow

from pretty_ts_errors.core.display_state import DisplayState
from pretty_ts_errors.core.message_rewriter import MessageRewriter
from pretty_ts_errors.settings_models import PrettyTsErrorsConfig
from pretty_ts_errors.ui.controllers.action_registry import ActionRegistry
from pretty_ts_errors.ui.controllers.popup_controller import PopupController
from pretty_ts_errors.ui.debounce import QtDebouncer
from pretty_ts_errors.ui.popup_manager import PopupManager
from pretty_ts_errors.ui.qt_surface_provider import QtSurfaceProvider
from pretty_ts_errors.ui.typescript_workspace import TypeScriptWorkspace
from pretty_ts_errors.ui.widgets.code_editor import TypeScriptEditor

_LOGGER = logging.getLogger("PrettyTsErrors.Window")


class PrettyTsErrorsWindow(QMainWindow):
    APP_NAME = "Pretty TS Errors"

    def __init__(self, config: PrettyTsErrorsConfig, *, project_root: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(self.APP_NAME)
        self.resize(1000, 720)
        self.config = config

        self.editor = TypeScriptEditor(self)
        self.editor.set_lint_colors(dict(config.colors))
        self.setCentralWidget(self.editor)

        self.state = DisplayState(enabled=config.enabled)
        self.rewriter = MessageRewriter(config)
        self.surface_provider = QtSurfaceProvider(self.editor)
        self.popup = PopupManager(self.state, self.surface_provider, config)
        self._debouncer = QtDebouncer(self)
        self.controller = PopupController(
            self.editor,
            self.rewriter,
            self.popup,
            self.state,
            defer=self._debouncer,
            debounce_ms=config.debounce_ms,
            on_status=self._show_status,
        )

        self.workspace = TypeScriptWorkspace(project_root or os.getcwd(), config, self.rewriter, self)
        self.workspace.diagnosticsUpdated.connect(self._on_diagnostics_updated)
        self.workspace.statusMessage.connect(lambda m: self.statusBar().showMessage(m, 2500))

        self.editor.cursorMoved.connect(self.controller.on_cursor_moved)
        self.editor.cursorIdle.connect(self.controller.on_cursor_idle)
        self.editor.focusLost.connect(self.controller.on_buffer_left)
        self.editor.editingStarted.connect(self.controller.on_insert_entered)
        self.editor.textChanged.connect(self._on_text_changed)
        # A popup anchored to a scrolled-away cursor is misleading.
        self.editor.verticalScrollBar().valueChanged.connect(lambda _v: self.popup.close())
        self.editor.horizontalScrollBar().valueChanged.connect(lambda _v: self.popup.close())

        self._create_menus()
        self.statusBar().showMessage("Ready")

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        act_open = file_menu.addAction("Open File...")
        act_open.triggered.connect(self.open_file_dialog)
        file_menu.addSeparator()
        act_quit = file_menu.addAction("Quit")
        act_quit.triggered.connect(self.close)

        ts_menu = self.menuBar().addMenu("&TypeScript")
        self.actions_by_id = ActionRegistry.create_actions(
            self,
            {
                "toggle": self.toggle_popup,
                "show_at_cursor": self.controller.show_at_cursor,
                "next_error": self.controller.next_error,
                "prev_error": self.controller.prev_error,
            },
            self.config.keymaps,
            menu=ts_menu,
        )
        self._sync_toggle_action()

    def _sync_toggle_action(self) -> None:
        action = self.actions_by_id.get("toggle")
        if action is not None:
            action.setChecked(self.state.enabled)

    def toggle_popup(self) -> bool:
        enabled = self.controller.toggle()
        self._sync_toggle_action()
        return enabled

    def _show_status(self, text: str) -> None:
        self.statusBar().showMessage(text, 2500)

    # ---------- Documents ----------

    def open_file_dialog(self) -> None:
        path, _filter = QFileDialog.getOpenFileName(
            self,
            "Open File",
            self.workspace.project_root,
            "TypeScript / JavaScript (*.ts *.tsx *.mts *.cts *.js *.jsx *.mjs *.cjs);;All Files (*)",
        )
        if path:
            self.open_file(path)

    def open_file(self, file_path: str) -> bool:
        path = os.path.abspath(file_path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.warning("Could not open %s: %s", path, exc)
            self._show_status(f"Could not open {os.path.basename(path)}: {exc}")
            return False

        if self.editor.file_path:
            self.workspace.close_document(self.editor.file_path)
        self.popup.close()
        self.editor.clear_diagnostics()
        self.editor.set_file_path(path)
        self.editor.blockSignals(True)
        try:
            self.editor.setPlainText(text)
        finally:
            self.editor.blockSignals(False)
        self.setWindowTitle(f"{self.APP_NAME} [{os.path.basename(path)}]")
        self.workspace.open_document(path, text)
        return True

    def _on_text_changed(self) -> None:
        if self.editor.file_path:
            self.workspace.document_changed(self.editor.file_path, self.editor.toPlainText())

    def _on_diagnostics_updated(self, file_path: str, diagnostics: object) -> None:
        current = self.editor.file_path
        if not current or os.path.abspath(current) != os.path.abspath(file_path):
            return
        self.editor.set_diagnostics(diagnostics if isinstance(diagnostics, list) else [])
        self.controller.on_diagnostics_changed()

    def closeEvent(self, event) -> None:
        self._debouncer.cancel()
        self.popup.close()
        self.workspace.shutdown()
        super().closeEvent(event)
