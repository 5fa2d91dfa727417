"""Keymap models, defaults and normalization for the popup commands.

Chords are canonicalized to Qt's portable text form without importing Qt, so
settings can be loaded outside the GUI.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterator, Mapping


@dataclass(frozen=True, slots=True)
class KeymapAction:
    action_id: str
    action_name: str
    default_sequence: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class KeymapConflict:
    action_id: str
    action_name: str
    sequence_text: str


KEYMAP_ACTIONS: tuple[KeymapAction, ...] = (
    KeymapAction("toggle", "Toggle Pretty TS Errors", ("Ctrl+Alt+E",)),
    KeymapAction("show_at_cursor", "Show TS Error at Cursor", ("Ctrl+Alt+S",)),
    KeymapAction("next_error", "Next TS Error", ("F8",)),
    KeymapAction("prev_error", "Previous TS Error", ("Shift+F8",)),
)

_ACTION_BY_ID: dict[str, KeymapAction] = {entry.action_id: entry for entry in KEYMAP_ACTIONS}


def default_keymaps() -> dict[str, list[str]]:
    return {action.action_id: list(action.default_sequence) for action in KEYMAP_ACTIONS}


def action_definition(action_id: str) -> KeymapAction | None:
    return _ACTION_BY_ID.get(str(action_id or "").strip())


_MODIFIER_ALIASES = {
    "ctrl": "Ctrl",
    "control": "Ctrl",
    "alt": "Alt",
    "option": "Alt",
    "shift": "Shift",
    "meta": "Meta",
    "cmd": "Meta",
    "command": "Meta",
    "super": "Meta",
    "win": "Meta",
}
_MODIFIER_ORDER = ("Ctrl", "Alt", "Shift", "Meta")
_KEY_NAMES = {
    "esc": "Esc",
    "escape": "Esc",
    "del": "Del",
    "delete": "Del",
    "ins": "Ins",
    "insert": "Ins",
    "pgup": "PgUp",
    "pageup": "PgUp",
    "pgdown": "PgDown",
    "pagedown": "PgDown",
    "return": "Return",
    "enter": "Enter",
    "space": "Space",
    "tab": "Tab",
    "backspace": "Backspace",
    "home": "Home",
    "end": "End",
    "up": "Up",
    "down": "Down",
    "left": "Left",
    "right": "Right",
}
_FUNCTION_KEY = re.compile(r"f\d{1,2}")


def _chords_in(text: str) -> Iterator[str]:
    for piece in str(text or "").split(","):
        piece = piece.strip()
        if piece:
            yield piece


def _key_name(part: str) -> str:
    low = part.lower()
    if low in _KEY_NAMES:
        return _KEY_NAMES[low]
    if len(part) == 1 or _FUNCTION_KEY.fullmatch(low):
        return part.upper()
    return part


def _ordered_chord(text: str) -> str:
    """Rebuild ``text`` as modifiers in a fixed order followed by one key."""
    modifiers: set[str] = set()
    key = ""
    for part in filter(None, (p.strip() for p in str(text or "").split("+"))):
        alias = _MODIFIER_ALIASES.get(part.lower())
        if alias:
            modifiers.add(alias)
        else:
            key = _key_name(part)
    if not key:
        return ""
    return "+".join([m for m in _MODIFIER_ORDER if m in modifiers] + [key])


def canonicalize_chord_text(text: str) -> str:
    raw = str(text or "").strip()
    if not raw:
        return ""
    # A multi-chord string collapses to its first chord.
    first = next(_chords_in(raw), raw)
    return _ordered_chord(first) or first


def normalize_sequence(value: Any) -> list[str]:
    if isinstance(value, str):
        sources = [value]
    elif isinstance(value, (list, tuple)):
        sources = [item for item in value if isinstance(item, str)]
    else:
        return []
    chords = (canonicalize_chord_text(chord) for source in sources for chord in _chords_in(source))
    return [chord for chord in chords if chord]


def sequence_to_text(sequence: list[str] | tuple[str, ...]) -> str:
    return ", ".join(normalize_sequence(list(sequence)))


def normalize_keymaps(raw: Any) -> dict[str, list[str]]:
    merged = default_keymaps()
    if not isinstance(raw, Mapping):
        return merged
    for action_key, value in raw.items():
        action_id = str(action_key or "").strip()
        if action_id not in _ACTION_BY_ID:
            continue
        if isinstance(value, (list, tuple)) and not value:
            # An explicit empty list unbinds the action.
            merged[action_id] = []
            continue
        normalized = normalize_sequence(value)
        if normalized:
            merged[action_id] = normalized
    return merged


def get_action_sequence(keymaps: Mapping[str, Any] | None, action_id: str) -> list[str]:
    normalized = normalize_keymaps(keymaps)
    return list(normalized.get(str(action_id or "").strip(), []))


def find_conflicts(keymaps: Mapping[str, Any] | None) -> list[KeymapConflict]:
    normalized = normalize_keymaps(keymaps)
    owners: dict[str, str] = {}
    conflicts: list[KeymapConflict] = []
    for action in KEYMAP_ACTIONS:
        for chord in normalized.get(action.action_id, []):
            owner = owners.get(chord)
            if owner is None:
                owners[chord] = action.action_id
                continue
            conflicts.append(
                KeymapConflict(
                    action_id=action.action_id,
                    action_name=action.action_name,
                    sequence_text=chord,
                )
            )
    return conflicts


__all__ = [
    "KeymapAction",
    "KeymapConflict",
    "KEYMAP_ACTIONS",
    "default_keymaps",
    "action_definition",
    "canonicalize_chord_text",
    "normalize_sequence",
    "sequence_to_text",
    "normalize_keymaps",
    "get_action_sequence",
    "find_conflicts",
]
