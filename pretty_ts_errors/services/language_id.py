"""Language-id resolution for editor files.

Maps filenames to the LSP language ids the TypeScript server understands.
"""

from __future__ import annotations

from pathlib import Path

_LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "typescriptreact",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascriptreact",
}


def language_id_for_path(file_path: str | None, *, default: str = "plaintext") -> str:
    """LSP language id for ``file_path``, or ``default`` outside the TS family."""
    path_text = str(file_path or "").strip()
    fallback = str(default or "plaintext").strip().lower() or "plaintext"
    if not path_text:
        return fallback
    return _LANGUAGE_BY_SUFFIX.get(Path(path_text).suffix.lower(), fallback)


def is_typescript_family(file_path: str | None) -> bool:
    return Path(str(file_path or "")).suffix.lower() in _LANGUAGE_BY_SUFFIX
