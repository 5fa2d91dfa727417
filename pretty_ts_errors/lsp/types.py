"""Small LSP helpers for positions and diagnostic payloads."""

from __future__ import annotations

from typing import Callable

from pretty_ts_errors.core.diagnostic_selector import Diagnostic
from pretty_ts_errors.lsp.diagnostics_interceptor import ORIGINAL_MESSAGE_KEY

LineTextProvider = Callable[[int], str]


def utf16_code_units(text: str) -> int:
    if not text:
        return 0
    return len(text.encode("utf-16-le")) // 2


def codepoint_index_from_utf16_units(text: str, utf16_units: int) -> int:
    if not text:
        return max(0, int(utf16_units))
    remaining = max(0, int(utf16_units))
    idx = 0
    while idx < len(text):
        units = 1 if ord(text[idx]) <= 0xFFFF else 2
        if remaining < units:
            break
        remaining -= units
        idx += 1
    # Positions past the end of the line keep their overflow.
    return idx + remaining


def utf16_index_from_codepoint(text: str, index: int) -> int:
    """Inverse of ``codepoint_index_from_utf16_units`` for Qt positions."""
    index = max(0, int(index))
    return utf16_code_units(text[:index]) + max(0, index - len(text))


def diagnostic_severity_name(severity: object) -> str:
    try:
        value = int(severity)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return "error"
    if value == 1:
        return "error"
    if value == 2:
        return "warning"
    if value == 3:
        return "info"
    return "hint"


def _position(obj: object) -> tuple[int, int]:
    data = obj if isinstance(obj, dict) else {}
    try:
        line = max(0, int(data.get("line", 0)))
        character = max(0, int(data.get("character", 0)))
    except (TypeError, ValueError):
        return 0, 0
    return line, character


def diagnostics_from_lsp(
    diagnostics_obj: object,
    line_text: LineTextProvider | None = None,
    *,
    default_source: str = "typescript",
) -> list[Diagnostic]:
    """Convert LSP diagnostics to records with code-point columns.

    ``line_text`` returns the document text of a line so UTF-16 offsets can be
    mapped; without it offsets are used as-is.
    """
    diagnostics = diagnostics_obj if isinstance(diagnostics_obj, list) else []
    out: list[Diagnostic] = []
    for item in diagnostics:
        if not isinstance(item, dict):
            continue
        rng = item.get("range")
        if not isinstance(rng, dict):
            continue
        line, character = _position(rng.get("start"))
        end_line, end_character = _position(rng.get("end"))
        end_line = max(line, end_line)
        if line_text is not None:
            character = codepoint_index_from_utf16_units(line_text(line), character)
            end_character = codepoint_index_from_utf16_units(line_text(end_line), end_character)

        published = str(item.get("message") or "")
        data = item.get("data")
        original = data.get(ORIGINAL_MESSAGE_KEY) if isinstance(data, dict) else None
        code_raw = item.get("code")
        if isinstance(code_raw, dict):
            code = str(code_raw.get("value") or "")
        else:
            code = str(code_raw or "")

        out.append(
            Diagnostic(
                message=str(original) if original is not None else published,
                line=line,
                column=character,
                end_line=end_line,
                end_column=end_character,
                severity=diagnostic_severity_name(item.get("severity", 1)),
                source=str(item.get("source") or default_source).strip() or default_source,
                code=code,
                published_message=published if original is not None else "",
            )
        )
    return out
