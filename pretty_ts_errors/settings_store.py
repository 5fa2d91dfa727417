from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

_LOGGER = logging.getLogger("PrettyTsErrors.Settings")


class SettingsStoreError(RuntimeError):
    """Raised when a settings file cannot be loaded."""


def deep_merge_override(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``overrides`` over ``base``.

    Nested mappings merge key by key; any other value (lists included)
    replaces the base value.
    """
    merged = deepcopy(dict(base))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge_override(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def dot_get(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    if not key:
        return data
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def read_settings_file(path: Path) -> dict[str, Any]:
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SettingsStoreError(f"Could not read settings file '{path}': {exc}") from exc
    if not isinstance(raw, dict):
        raise SettingsStoreError(
            f"Settings root in '{path}' must be a JSON object, found {type(raw).__name__}."
        )
    return raw


class JsonSettingsStore:
    """Read-only JSON settings source layered over defaults."""

    def __init__(
        self,
        path: Path | None,
        defaults: Mapping[str, Any],
        *,
        key_aliases: Mapping[str, str] | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.key_aliases: dict[str, str] = dict(key_aliases or {})
        self.defaults: dict[str, Any] = deepcopy(dict(defaults))
        self.data: dict[str, Any] = deepcopy(self.defaults)
        self.last_error: str | None = None

    def load(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        self.last_error = None
        loaded: dict[str, Any] = {}
        if self.path is not None and self.path.exists():
            try:
                loaded = read_settings_file(self.path)
            except SettingsStoreError as exc:
                # Keep the plugin usable on defaults without touching the file.
                self.last_error = str(exc)
                _LOGGER.warning("%s", exc)

        data = deep_merge_override(self.defaults, self._resolve_aliases(loaded))
        if overrides:
            data = deep_merge_override(data, self._resolve_aliases(overrides))
        self.data = data
        return self.data

    def _resolve_aliases(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        out = dict(raw)
        for legacy, current in self.key_aliases.items():
            if legacy in out:
                value = out.pop(legacy)
                out.setdefault(current, value)
        return out

    def get(self, key: str, default: Any = None) -> Any:
        return dot_get(self.data, key, default)

    def has(self, key: str) -> bool:
        marker = object()
        return self.get(key, marker) is not marker

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self.data)
