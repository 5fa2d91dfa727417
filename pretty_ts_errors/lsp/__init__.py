"""LSP plumbing. ``lsp_client`` needs Qt and is imported from its module directly."""

from .diagnostics_interceptor import DiagnosticsInterceptor
from .json_rpc import LspMessageParser, encode_lsp_message

__all__ = [
    "DiagnosticsInterceptor",
    "LspMessageParser",
    "encode_lsp_message",
]
