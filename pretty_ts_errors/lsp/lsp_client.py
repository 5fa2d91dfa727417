"""Stdio connection to a TypeScript language server, driven by ``QProcess``."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable

from PySide6.QtCore import QObject, QProcess, QTimer, QUrl, Signal

from .json_rpc import LspMessageParser, encode_lsp_message

_LOGGER = logging.getLogger("PrettyTsErrors.LSP")

ResponseHandler = Callable[[object], None]

METHOD_NOT_FOUND = -32601
SHUTDOWN_GRACE_MS = 1200


@dataclass
class _Request:
    method: str
    on_result: ResponseHandler | None = None
    on_error: ResponseHandler | None = None


@dataclass
class _Session:
    """State that lives exactly as long as one server process."""

    initialized: bool = False
    next_id: int = 1
    requests: dict[int, _Request] = field(default_factory=dict)
    backlog: list[dict[str, Any]] = field(default_factory=list)
    versions: dict[str, int] = field(default_factory=dict)
    capabilities: dict[str, Any] = field(default_factory=dict)

    def allocate_id(self) -> int:
        request_id = self.next_id
        self.next_id += 1
        return request_id


class LspClient(QObject):
    """One language server process with full-text document sync.

    Outgoing notifications are held back until ``initialize`` has completed;
    server-to-client requests are refused so the server never blocks.
    """

    started = Signal()
    stopped = Signal()
    ready = Signal()
    notificationReceived = Signal(str, object)  # method, params
    statusMessage = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._process = QProcess(self)
        self._process.started.connect(self._on_started)
        self._process.finished.connect(self._on_finished)
        self._process.errorOccurred.connect(self._on_error)
        self._process.readyReadStandardOutput.connect(self._read_stdout)
        self._process.readyReadStandardError.connect(self._read_stderr)

        self._parser = LspMessageParser()
        self._session = _Session()
        self._stopping = False
        self._trace = False
        self._kill_timer = QTimer(self)
        self._kill_timer.setSingleShot(True)
        self._kill_timer.timeout.connect(self._kill)

        self._program = ""
        self._root_uri = ""
        self.server_name = ""

    @staticmethod
    def path_to_uri(path: str) -> str:
        return QUrl.fromLocalFile(os.path.abspath(path)).toString()

    @staticmethod
    def uri_to_path(uri: str) -> str:
        url = QUrl(uri)
        return str(url.toLocalFile()) if url.isLocalFile() else str(uri or "")

    @property
    def server_capabilities(self) -> dict[str, Any]:
        return self._session.capabilities

    def set_log_traffic(self, enabled: bool) -> None:
        self._trace = bool(enabled)

    def is_running(self) -> bool:
        return self._process.state() != QProcess.NotRunning

    def is_ready(self) -> bool:
        return self.is_running() and self._session.initialized

    # ---------- Process lifecycle ----------

    def start(self, *, program: str, args: list[str] | None = None, cwd: str = "", root_uri: str = "") -> None:
        self.stop()
        self._program = str(program or "").strip()
        self._root_uri = str(root_uri or "").strip()
        # Identified by executable until serverInfo arrives.
        self.server_name = os.path.basename(self._program)
        self._begin_session()

        argv = [str(item) for item in (args or [])]
        if cwd and os.path.isdir(cwd):
            self._process.setWorkingDirectory(cwd)
        _LOGGER.info("Starting language server: %s %s", self._program, " ".join(argv))
        self._process.start(self._program, argv)

    def stop(self) -> None:
        """Ask the server to shut down, killing it if it does not exit in time."""
        state = self._process.state()
        if state == QProcess.NotRunning:
            self._begin_session()
            return
        self._stopping = True
        if state == QProcess.Starting or not self._session.initialized:
            self._kill()
            return
        self.request("shutdown", None, on_result=self._send_exit, on_error=self._send_exit)
        self._kill_timer.start(SHUTDOWN_GRACE_MS)

    def _begin_session(self) -> None:
        self._session = _Session()
        self._parser.reset()

    def _send_exit(self, _response: object = None) -> None:
        if self.is_running():
            self._write({"jsonrpc": "2.0", "method": "exit"})

    def _kill(self) -> None:
        if not self.is_running():
            return
        self._process.terminate()
        if self.is_running():
            self._process.kill()

    def _on_started(self) -> None:
        self.started.emit()
        folders = None
        if self._root_uri:
            folders = [{"uri": self._root_uri, "name": os.path.basename(self.uri_to_path(self._root_uri))}]
        self.request(
            "initialize",
            {
                "processId": os.getpid(),
                "clientInfo": {"name": "pretty-ts-errors"},
                "rootUri": self._root_uri or None,
                "workspaceFolders": folders,
                "capabilities": {
                    "textDocument": {
                        "publishDiagnostics": {"relatedInformation": True},
                        "synchronization": {"didSave": False, "willSave": False},
                    },
                },
            },
            on_result=self._on_initialized,
            on_error=self._on_initialize_failed,
        )

    def _on_initialized(self, result_obj: object) -> None:
        result = result_obj if isinstance(result_obj, dict) else {}
        capabilities = result.get("capabilities")
        self._session.capabilities = capabilities if isinstance(capabilities, dict) else {}
        info = result.get("serverInfo")
        name = str(info.get("name") or "").strip() if isinstance(info, dict) else ""
        if name:
            self.server_name = name
        self._session.initialized = True
        self._write({"jsonrpc": "2.0", "method": "initialized", "params": {}})
        _LOGGER.info("Language server ready: %s", self.server_name)
        self.ready.emit()

        backlog, self._session.backlog = self._session.backlog, []
        for payload in backlog:
            self._write(payload)

    def _on_initialize_failed(self, error_obj: object) -> None:
        _LOGGER.warning("Language server initialize failed: %s", error_obj)
        self.statusMessage.emit(f"LSP initialize failed: {error_obj}")

    def _on_finished(self, exit_code: int, _exit_status: QProcess.ExitStatus) -> None:
        self._kill_timer.stop()
        expected = self._stopping
        self._stopping = False
        self._begin_session()
        if expected:
            _LOGGER.info("Language server stopped: %s", self._program)
        else:
            _LOGGER.warning("Language server exited unexpectedly (code %s): %s", exit_code, self._program)
        self.stopped.emit()

    def _on_error(self, error: QProcess.ProcessError) -> None:
        if self._stopping and error != QProcess.ProcessError.FailedToStart:
            return
        message = self._process.errorString()
        _LOGGER.warning("Language server process error: %s", message)
        self.statusMessage.emit(f"LSP process error: {message}")

    # ---------- Outgoing ----------

    def request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        on_result: ResponseHandler | None = None,
        on_error: ResponseHandler | None = None,
    ) -> int:
        request_id = self._session.allocate_id()
        self._session.requests[request_id] = _Request(method, on_result, on_error)
        payload = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params or {}}
        if method in ("initialize", "shutdown"):
            self._write(payload)
        else:
            self._post(payload)
        return request_id

    def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        self._post({"jsonrpc": "2.0", "method": method, "params": params or {}})

    def _post(self, payload: dict[str, Any]) -> None:
        if not self.is_running():
            return
        if not self._session.initialized:
            self._session.backlog.append(payload)
            return
        self._write(payload)

    def _write(self, payload: dict[str, Any]) -> None:
        if not self.is_running():
            return
        if self._process.write(encode_lsp_message(payload)) < 0:
            if not self._stopping:
                self.statusMessage.emit(f"LSP write failed: {self._process.errorString()}")
            return
        if self._trace:
            _LOGGER.debug("--> %s", payload)

    # ---------- Document sync ----------

    def open_document(self, *, uri: str, language_id: str, text: str) -> int:
        """Open ``uri``; a second open of the same document becomes a change."""
        if not uri:
            return 0
        if uri in self._session.versions:
            return self.change_document(uri=uri, text=text, language_id=language_id)
        self._session.versions[uri] = 1
        self.notify(
            "textDocument/didOpen",
            {"textDocument": {"uri": uri, "languageId": language_id or "typescript", "version": 1, "text": text}},
        )
        return 1

    def change_document(self, *, uri: str, text: str, language_id: str = "typescript") -> int:
        if not uri:
            return 0
        version = self._session.versions.get(uri)
        if version is None:
            return self.open_document(uri=uri, language_id=language_id, text=text)
        version += 1
        self._session.versions[uri] = version
        self.notify(
            "textDocument/didChange",
            {"textDocument": {"uri": uri, "version": version}, "contentChanges": [{"text": text}]},
        )
        return version

    def close_document(self, *, uri: str) -> None:
        if self._session.versions.pop(uri, None) is not None:
            self.notify("textDocument/didClose", {"textDocument": {"uri": uri}})

    # ---------- Incoming ----------

    def _read_stdout(self) -> None:
        for message in self._parser.feed(bytes(self._process.readAllStandardOutput())):
            if self._trace:
                _LOGGER.debug("<-- %s", message)
            self._dispatch(message)

    def _read_stderr(self) -> None:
        text = bytes(self._process.readAllStandardError()).decode("utf-8", errors="replace").strip()
        if text:
            _LOGGER.debug("%s stderr: %s", self.server_name, text)

    def _dispatch(self, message: dict[str, Any]) -> None:
        method = str(message.get("method") or "").strip()
        has_id = "id" in message
        if has_id and not method:
            self._resolve(message)
        elif has_id:
            self._write(
                {
                    "jsonrpc": "2.0",
                    "id": message["id"],
                    "error": {"code": METHOD_NOT_FOUND, "message": f"Unsupported request: {method}"},
                }
            )
        elif method:
            self.notificationReceived.emit(method, message.get("params"))

    def _resolve(self, message: dict[str, Any]) -> None:
        try:
            request = self._session.requests.pop(int(message["id"]), None)
        except (TypeError, ValueError):
            return
        if request is None:
            return
        if "error" in message:
            handler, value = request.on_error, message.get("error")
        else:
            handler, value = request.on_result, message.get("result")
        if handler is not None:
            handler(value)
