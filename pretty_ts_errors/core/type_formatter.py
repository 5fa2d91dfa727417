"""Heuristic re-indentation of flattened TypeScript object/type literals.

TypeScript prints structural types on a single line, e.g.
``{ a: string; b: { c: number; }; }``. The helpers here split such text on
braces and separators so it reads as an indented block. This is a single-pass
character scanner, not a parser: unbalanced input produces best-effort output.
"""

from __future__ import annotations

import re

INDENT_UNIT = "  "

_OBJECT_LITERAL_START = re.compile(r"^\s*\{")
# ":" followed by a brace block with no nested braces, as printed inline.
_INLINE_TYPE_BLOCK = re.compile(r"(:\s*)(\{[^}]+\})")


def looks_like_object_type(text: str) -> bool:
    return bool(_OBJECT_LITERAL_START.match(str(text or "")))


def _indent(depth: int) -> str:
    return INDENT_UNIT * max(0, depth)


def format_type_definition(type_str: str) -> str:
    """Return ``type_str`` with one field or brace per line.

    Text that does not start with ``{`` (primitive names, unions of names,
    generics) is returned unchanged.
    """
    text = str(type_str or "")
    if not looks_like_object_type(text):
        return text

    lines: list[str] = []
    depth = 0
    current = ""
    fresh = False

    def flush(line: str) -> None:
        if line.strip():
            lines.append(line.rstrip())

    for char in text:
        if char == "{":
            current += char
            flush(current)
            depth += 1
            current = _indent(depth)
            fresh = True
        elif char == "}":
            depth -= 1
            flush(current)
            current = _indent(depth) + char
            fresh = False
        elif char in ";,":
            current += char
            flush(current)
            current = _indent(depth)
            fresh = True
        elif char in "\r\n":
            # Existing line breaks end the line; they never produce blank lines.
            if not fresh:
                flush(current)
                current = _indent(depth)
                fresh = True
        elif fresh and char in " \t":
            continue
        else:
            current += char
            fresh = False

    flush(current)
    return "\n".join(lines)


def expand_inline_types(line: str) -> str:
    """Reformat ``: { ... }`` blocks embedded in a display line.

    Each block is moved onto the following lines in formatted form; the
    caller splits the result on newlines.
    """
    text = str(line or "")

    def _replace(match: re.Match[str]) -> str:
        return match.group(1).rstrip() + "\n" + format_type_definition(match.group(2))

    return _INLINE_TYPE_BLOCK.sub(_replace, text)
