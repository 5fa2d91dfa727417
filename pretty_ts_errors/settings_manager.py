from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from pretty_ts_errors.core.keybindings import normalize_keymaps
from pretty_ts_errors.core.rewrite_rules import rules_from_config
from pretty_ts_errors.settings_models import PrettyTsErrorsConfig, default_settings
from pretty_ts_errors.settings_store import JsonSettingsStore

_LOGGER = logging.getLogger("PrettyTsErrors.Settings")

DEFAULT_SETTINGS_FILENAME = "pretty-ts-errors.json"

KEY_ALIASES: dict[str, str] = {
    "auto_show_on_cursor": "enabled",
}

_ABSOLUTE_MAX_WIDTH = 120


def _clamped_int(value: object, default: int, low: int, high: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        number = default
    return max(low, min(high, number))


def _string_list(value: object) -> list[str]:
    if isinstance(value, str):
        text = value.strip()
        return [text] if text else []
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


def build_config(data: Mapping[str, Any]) -> PrettyTsErrorsConfig:
    styling = data.get("styling") if isinstance(data.get("styling"), Mapping) else {}
    colors_raw = styling.get("colors") if isinstance(styling.get("colors"), Mapping) else {}
    default_colors = default_settings()["styling"]["colors"]
    colors = {key: str(colors_raw.get(key) or fallback) for key, fallback in default_colors.items()}

    lsp = data.get("lsp") if isinstance(data.get("lsp"), Mapping) else {}
    server_names = _string_list(lsp.get("server_names")) or ["tsserver", "typescript-language-server"]

    patterns = data.get("prettify_patterns")
    rules = tuple(rules_from_config(patterns if isinstance(patterns, list) else []))

    return PrettyTsErrorsConfig(
        enabled=bool(data.get("enabled", False)),
        max_height=_clamped_int(data.get("max_height"), 15, 1, 200),
        max_width=_clamped_int(data.get("max_width"), 80, 1, _ABSOLUTE_MAX_WIDTH),
        show_original_error=bool(data.get("show_original_error", True)),
        debounce_ms=_clamped_int(data.get("debounce_ms"), 100, 0, 5000),
        prefix=str(styling.get("prefix", "")),
        colors=colors,
        decorate_special_cases=bool(styling.get("decorate_special_cases", False)),
        integrate_with_lsp=bool(data.get("integrate_with_lsp", True)),
        lsp_command=str(lsp.get("command") or "typescript-language-server").strip()
        or "typescript-language-server",
        lsp_args=tuple(_string_list(lsp.get("args"))),
        lsp_server_names=frozenset(server_names),
        log_lsp_traffic=bool(lsp.get("log_lsp_traffic", False)),
        keymaps=normalize_keymaps(data.get("keymaps")),
        rules=rules,
    )


class SettingsManager:
    """Loads plugin settings once: defaults, then the JSON file, then overrides."""

    def __init__(self, settings_path: str | Path | None = None) -> None:
        path = Path(settings_path).expanduser() if settings_path else None
        self._store = JsonSettingsStore(path, default_settings(), key_aliases=KEY_ALIASES)
        self._config = build_config(self._store.data)

    @property
    def path(self) -> Path | None:
        return self._store.path

    @property
    def last_error(self) -> str | None:
        return self._store.last_error

    @property
    def config(self) -> PrettyTsErrorsConfig:
        return self._config

    def load(self, overrides: Mapping[str, Any] | None = None) -> PrettyTsErrorsConfig:
        data = self._store.load(overrides)
        self._config = build_config(data)
        _LOGGER.debug(
            "Loaded settings (enabled=%s, rules=%d, file=%s)",
            self._config.enabled,
            len(self._config.rules or ()),
            self._store.path,
        )
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        return self._store.get(key, default)


def load_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    settings_path: str | Path | None = None,
) -> PrettyTsErrorsConfig:
    return SettingsManager(settings_path).load(overrides)

