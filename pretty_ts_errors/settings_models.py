from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import TypedDict

from pretty_ts_errors.core.keybindings import default_keymaps
from pretty_ts_errors.core.rewrite_rules import DEFAULT_PRETTIFY_PATTERNS, RewriteRule


class PrettifyPattern(TypedDict, total=False):
    pattern: str
    replace: str


class StylingColors(TypedDict, total=False):
    error: str
    warning: str
    info: str


class StylingSettings(TypedDict, total=False):
    prefix: str
    colors: StylingColors
    decorate_special_cases: bool


class KeymapSettings(TypedDict, total=False):
    toggle: list[str]
    show_at_cursor: list[str]
    next_error: list[str]
    prev_error: list[str]


class LspSettings(TypedDict, total=False):
    command: str
    args: list[str]
    server_names: list[str]
    log_lsp_traffic: bool


class PluginSettings(TypedDict, total=False):
    enabled: bool
    max_height: int
    max_width: int
    show_original_error: bool
    debounce_ms: int
    styling: StylingSettings
    integrate_with_lsp: bool
    lsp: LspSettings
    keymaps: KeymapSettings
    prettify_patterns: list[PrettifyPattern]


def default_settings() -> PluginSettings:
    defaults: PluginSettings = {
        "enabled": False,
        "max_height": 15,
        "max_width": 80,
        "show_original_error": True,
        "debounce_ms": 100,
        "styling": {
            "prefix": "→ ",
            "colors": {
                "error": "#FF5555",
                "warning": "#FFAA55",
                "info": "#55AAFF",
            },
            "decorate_special_cases": False,
        },
        "integrate_with_lsp": True,
        "lsp": {
            "command": "typescript-language-server",
            "args": ["--stdio"],
            "server_names": ["tsserver", "typescript-language-server"],
            "log_lsp_traffic": False,
        },
        "keymaps": default_keymaps(),
        "prettify_patterns": [dict(item) for item in DEFAULT_PRETTIFY_PATTERNS],
    }
    return deepcopy(defaults)


@dataclass(slots=True, frozen=True)
class PrettyTsErrorsConfig:
    """Normalized, read-only view of the merged settings."""

    enabled: bool = False
    max_height: int = 15
    max_width: int = 80
    show_original_error: bool = True
    debounce_ms: int = 100
    prefix: str = "→ "
    colors: dict[str, str] = field(
        default_factory=lambda: {"error": "#FF5555", "warning": "#FFAA55", "info": "#55AAFF"}
    )
    decorate_special_cases: bool = False
    integrate_with_lsp: bool = True
    lsp_command: str = "typescript-language-server"
    lsp_args: tuple[str, ...] = ("--stdio",)
    lsp_server_names: frozenset[str] = frozenset({"tsserver", "typescript-language-server"})
    log_lsp_traffic: bool = False
    keymaps: dict[str, list[str]] = field(default_factory=default_keymaps)
    rules: tuple[RewriteRule, ...] | None = None

    def color_for_severity(self, severity: str) -> str:
        key = str(severity or "").strip().lower()
        if key == "hint":
            key = "info"
        return str(self.colors.get(key) or self.colors.get("error") or "#FF5555")
