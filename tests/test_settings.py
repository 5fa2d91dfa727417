import json
import logging

from pretty_ts_errors.core.rewrite_rules import DEFAULT_PRETTIFY_PATTERNS, RewriteRule
from pretty_ts_errors.settings_manager import SettingsManager, build_config, load_config
from pretty_ts_errors.settings_models import default_settings
from pretty_ts_errors.settings_store import JsonSettingsStore, deep_merge_override, dot_get


def _write(tmp_path, payload):
    path = tmp_path / "pretty-ts-errors.json"
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
    return path


def test_defaults_without_file():
    config = load_config()
    assert config.enabled is False
    assert config.max_height == 15
    assert config.max_width == 80
    assert config.show_original_error is True
    assert config.debounce_ms == 100
    assert config.prefix == "→ "
    assert config.colors == {"error": "#FF5555", "warning": "#FFAA55", "info": "#55AAFF"}
    assert config.integrate_with_lsp is True
    assert config.lsp_args == ("--stdio",)
    assert "tsserver" in config.lsp_server_names
    assert len(config.rules) == len(DEFAULT_PRETTIFY_PATTERNS)
    assert config.keymaps["toggle"] == ["Ctrl+Alt+E"]


def test_deep_merge_keeps_sibling_keys():
    merged = deep_merge_override(
        {"styling": {"prefix": "> ", "colors": {"error": "red", "info": "blue"}}},
        {"styling": {"colors": {"error": "pink"}}},
    )
    assert merged == {"styling": {"prefix": "> ", "colors": {"error": "pink", "info": "blue"}}}


def test_deep_merge_replaces_lists_and_does_not_mutate_base():
    base = {"lsp": {"args": ["--stdio"]}}
    merged = deep_merge_override(base, {"lsp": {"args": ["--log-level", "4"]}})
    assert merged["lsp"]["args"] == ["--log-level", "4"]
    assert base == {"lsp": {"args": ["--stdio"]}}


def test_dot_get():
    data = {"a": {"b": {"c": 1}}}
    assert dot_get(data, "a.b.c") == 1
    assert dot_get(data, "a.x", "fallback") == "fallback"


def test_file_then_overrides(tmp_path):
    path = _write(tmp_path, {"max_height": 20, "styling": {"prefix": "* "}})
    manager = SettingsManager(path)
    config = manager.load({"max_height": 8})
    assert config.max_height == 8
    assert config.prefix == "* "
    assert config.colors["warning"] == "#FFAA55"
    assert manager.get("styling.prefix") == "* "
    assert manager.last_error is None


def test_legacy_key_alias_from_file_and_overrides(tmp_path):
    path = _write(tmp_path, {"auto_show_on_cursor": True})
    assert SettingsManager(path).load().enabled is True
    assert load_config({"auto_show_on_cursor": True}).enabled is True


def test_alias_does_not_override_current_key(tmp_path):
    path = _write(tmp_path, {"auto_show_on_cursor": True, "enabled": False})
    assert SettingsManager(path).load().enabled is False


def test_unreadable_file_falls_back_to_defaults(tmp_path, caplog):
    path = _write(tmp_path, "{ not json")
    manager = SettingsManager(path)
    with caplog.at_level(logging.WARNING, logger="PrettyTsErrors.Settings"):
        config = manager.load()
    assert config == load_config()
    assert manager.last_error is not None
    assert "Could not read settings file" in manager.last_error
    assert any("Could not read settings file" in rec.getMessage() for rec in caplog.records)


def test_non_object_root_is_rejected(tmp_path):
    store = JsonSettingsStore(_write(tmp_path, [1, 2]), default_settings())
    data = store.load()
    assert store.last_error is not None
    assert data["max_height"] == 15


def test_numbers_are_clamped():
    data = deep_merge_override(default_settings(), {"max_height": 0, "max_width": 999, "debounce_ms": "bad"})
    config = build_config(data)
    assert config.max_height == 1
    assert config.max_width == 120
    assert config.debounce_ms == 100


def test_custom_patterns_replace_defaults():
    config = load_config({"prettify_patterns": [{"pattern": "foo", "replace": "bar"}]})
    assert config.rules == (RewriteRule("foo", "bar"),)


def test_keymap_override_and_unbind():
    config = load_config({"keymaps": {"toggle": ["Ctrl+Shift+T"], "next_error": []}})
    assert config.keymaps["toggle"] == ["Ctrl+Shift+T"]
    assert config.keymaps["next_error"] == []
    assert config.keymaps["prev_error"] == ["Shift+F8"]


def test_color_for_severity_maps_hint_to_info():
    config = load_config({"styling": {"colors": {"info": "#123456"}}})
    assert config.color_for_severity("hint") == "#123456"
    assert config.color_for_severity("error") == "#FF5555"
    assert config.color_for_severity("unknown") == "#FF5555"
