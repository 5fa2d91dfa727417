"""Content-Length framing for JSON-RPC messages exchanged with the language server."""

from __future__ import annotations

import json
import logging
from typing import Any

_LOGGER = logging.getLogger("PrettyTsErrors.LSP")

_HEADER_TERMINATOR = b"\r\n\r\n"


def encode_lsp_message(payload: dict[str, Any]) -> bytes:
    body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return b"Content-Length: %d\r\n\r\n" % len(body) + body


def parse_content_length(header_blob: bytes) -> int | None:
    text = header_blob.decode("ascii", errors="ignore")
    for raw_line in text.split("\r\n"):
        name, sep, value = raw_line.partition(":")
        if not sep or name.strip().lower() != "content-length":
            continue
        try:
            length = int(value.strip())
        except ValueError:
            return None
        return length if length >= 0 else None
    return None


class LspMessageParser:
    """Accumulates stdout chunks and yields complete JSON objects."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._pending_length: int | None = None

    def reset(self) -> None:
        self._buffer.clear()
        self._pending_length = None

    def feed(self, data: bytes | bytearray) -> list[dict[str, Any]]:
        self._buffer.extend(data or b"")
        messages: list[dict[str, Any]] = []
        while self._advance(messages):
            pass
        return messages

    def _advance(self, messages: list[dict[str, Any]]) -> bool:
        if self._pending_length is None:
            header_end = self._buffer.find(_HEADER_TERMINATOR)
            if header_end < 0:
                return False
            header = bytes(self._buffer[:header_end])
            del self._buffer[: header_end + len(_HEADER_TERMINATOR)]
            self._pending_length = parse_content_length(header)
            if self._pending_length is None:
                _LOGGER.debug("Dropping LSP frame with malformed header: %r", header[:80])
                return True

        if len(self._buffer) < self._pending_length:
            return False

        body = bytes(self._buffer[: self._pending_length])
        del self._buffer[: self._pending_length]
        self._pending_length = None
        try:
            decoded = json.loads(body.decode("utf-8"))
        except ValueError:
            _LOGGER.debug("Dropping undecodable LSP body (%d bytes)", len(body))
            return True
        if isinstance(decoded, dict):
            messages.append(decoded)
        return True
