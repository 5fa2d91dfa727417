"""Project-scoped TypeScript language server workspace."""

from __future__ import annotations

import logging
import os

from PySide6.QtCore import QObject, QTimer, Signal

from pretty_ts_errors.core.message_rewriter import MessageRewriter
from pretty_ts_errors.lsp.diagnostics_interceptor import PUBLISH_DIAGNOSTICS, DiagnosticsInterceptor
from pretty_ts_errors.lsp.lsp_client import LspClient
from pretty_ts_errors.lsp.types import diagnostics_from_lsp
from pretty_ts_errors.services.language_id import is_typescript_family, language_id_for_path
from pretty_ts_errors.settings_models import PrettyTsErrorsConfig

_LOGGER = logging.getLogger("PrettyTsErrors.Workspace")

DID_CHANGE_DEBOUNCE_MS = 320


class TypeScriptWorkspace(QObject):
    """Owns one language server process and the documents synced to it.

    Published diagnostics pass through the interceptor when LSP integration is
    on, then reach listeners as ``Diagnostic`` records.
    """

    diagnosticsUpdated = Signal(str, object)  # file_path, list[Diagnostic]
    statusMessage = Signal(str)

    def __init__(
        self,
        project_root: str,
        config: PrettyTsErrorsConfig,
        rewriter: MessageRewriter,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.project_root = os.path.abspath(project_root or os.getcwd())
        self.config = config
        self.interceptor = DiagnosticsInterceptor(rewriter, config.lsp_server_names)

        self._client = LspClient(self)
        self._client.set_log_traffic(config.log_lsp_traffic)
        self._client.notificationReceived.connect(self._on_notification)
        self._client.statusMessage.connect(self.statusMessage.emit)
        self._client.ready.connect(self._on_client_ready)

        self._open_paths: dict[str, str] = {}  # path -> language id
        self._last_text_by_path: dict[str, str] = {}
        self._pending_text_by_path: dict[str, str] = {}
        self._change_timers: dict[str, QTimer] = {}

    @property
    def client(self) -> LspClient:
        return self._client

    def shutdown(self) -> None:
        for timer in self._change_timers.values():
            timer.stop()
            timer.deleteLater()
        self._change_timers.clear()
        self._pending_text_by_path.clear()
        self._last_text_by_path.clear()
        self._open_paths.clear()
        self._client.stop()

    def supports_file(self, file_path: str) -> bool:
        return is_typescript_family(file_path)

    def open_document(self, file_path: str, source_text: str) -> None:
        path = os.path.abspath(file_path)
        if not self.supports_file(path):
            return
        language_id = language_id_for_path(path, default="typescript")
        self._open_paths[path] = language_id
        self._last_text_by_path[path] = str(source_text or "")
        self._ensure_client_started()
        self._client.open_document(uri=self._client.path_to_uri(path), language_id=language_id, text=source_text or "")

    def document_changed(self, file_path: str, source_text: str) -> None:
        path = os.path.abspath(file_path)
        if path not in self._open_paths:
            return
        self._pending_text_by_path[path] = str(source_text or "")
        self._last_text_by_path[path] = str(source_text or "")
        timer = self._change_timers.get(path)
        if timer is None:
            timer = QTimer(self)
            timer.setSingleShot(True)
            timer.timeout.connect(lambda p=path: self._flush_debounced_change(p))
            self._change_timers[path] = timer
        timer.start(DID_CHANGE_DEBOUNCE_MS)

    def close_document(self, file_path: str) -> None:
        path = os.path.abspath(file_path)
        if self._open_paths.pop(path, None) is None:
            return
        self._pending_text_by_path.pop(path, None)
        self._last_text_by_path.pop(path, None)
        timer = self._change_timers.pop(path, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()
        self._client.close_document(uri=self._client.path_to_uri(path))
        self.diagnosticsUpdated.emit(path, [])

    def _flush_debounced_change(self, path: str) -> None:
        text = self._pending_text_by_path.pop(path, None)
        if text is None or path not in self._open_paths:
            return
        self._client.change_document(
            uri=self._client.path_to_uri(path),
            text=text,
            language_id=self._open_paths[path],
        )

    def _ensure_client_started(self) -> None:
        if self._client.is_running():
            return
        program = self.config.lsp_command or "typescript-language-server"
        self._client.start(
            program=program,
            args=list(self.config.lsp_args),
            cwd=self.project_root,
            root_uri=self._client.path_to_uri(self.project_root),
        )
        self.statusMessage.emit(f"Starting {os.path.basename(program)}")

    def _on_client_ready(self) -> None:
        # Re-open tracked documents after a server restart.
        for path, language_id in list(self._open_paths.items()):
            text = self._last_text_by_path.get(path, "")
            self._client.open_document(uri=self._client.path_to_uri(path), language_id=language_id, text=text)

    def _line_text_provider(self, path: str):
        lines = self._last_text_by_path.get(path, "").split("\n")

        def _line_text(line: int) -> str:
            if 0 <= line < len(lines):
                return lines[line]
            return ""

        return _line_text

    def _on_notification(self, method: str, params_obj: object) -> None:
        if method != PUBLISH_DIAGNOSTICS or not isinstance(params_obj, dict):
            return
        params = params_obj
        if self.config.integrate_with_lsp:
            params = self.interceptor.handle_notification(self._client.server_name, method, params_obj)

        uri = str(params.get("uri") or "").strip()
        if not uri:
            return
        path = os.path.abspath(self._client.uri_to_path(uri))
        diagnostics = diagnostics_from_lsp(params.get("diagnostics"), self._line_text_provider(path))
        _LOGGER.debug("%d diagnostic(s) for %s", len(diagnostics), path)
        self.diagnosticsUpdated.emit(path, diagnostics)
