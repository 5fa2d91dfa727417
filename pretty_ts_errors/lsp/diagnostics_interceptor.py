"""Rewrite ``textDocument/publishDiagnostics`` payloads from the TypeScript server."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pretty_ts_errors.core.message_rewriter import MessageRewriter

_LOGGER = logging.getLogger("PrettyTsErrors.LSP")

PUBLISH_DIAGNOSTICS = "textDocument/publishDiagnostics"
# Carried in ``Diagnostic.data`` so the popup can rewrite from the source text.
ORIGINAL_MESSAGE_KEY = "prettyTsErrorsOriginalMessage"


class DiagnosticsInterceptor:
    """Builds rewritten copies of publish payloads; inputs are never mutated."""

    def __init__(self, rewriter: MessageRewriter, server_names: Iterable[str]) -> None:
        self.rewriter = rewriter
        self.server_names = frozenset(str(name or "").strip() for name in server_names if str(name or "").strip())

    def targets(self, server_name: str) -> bool:
        return str(server_name or "").strip() in self.server_names

    def publish(self, server_name: str, params: Any) -> Any:
        if not self.targets(server_name) or not isinstance(params, dict):
            return params
        diagnostics = params.get("diagnostics")
        if not isinstance(diagnostics, list):
            return params

        rewritten: list[Any] = []
        for item in diagnostics:
            if not isinstance(item, dict):
                rewritten.append(item)
                continue
            copy = dict(item)
            original = str(item.get("message") or "")
            copy["message"] = self.rewriter.rewrite(original)
            data = item.get("data")
            if data is None:
                copy["data"] = {ORIGINAL_MESSAGE_KEY: original}
            elif isinstance(data, dict):
                copy["data"] = {**data, ORIGINAL_MESSAGE_KEY: original}
            rewritten.append(copy)

        out = dict(params)
        out["diagnostics"] = rewritten
        _LOGGER.debug("Rewrote %d diagnostic(s) from %s", len(rewritten), server_name)
        return out

    def handle_notification(self, server_name: str, method: str, params: Any) -> Any:
        if method != PUBLISH_DIAGNOSTICS:
            return params
        return self.publish(server_name, params)
