from pretty_ts_errors.core.keybindings import (
    KEYMAP_ACTIONS,
    action_definition,
    canonicalize_chord_text,
    default_keymaps,
    find_conflicts,
    get_action_sequence,
    normalize_keymaps,
    normalize_sequence,
    sequence_to_text,
)


def test_default_keymaps_cover_every_command():
    keymaps = default_keymaps()
    assert set(keymaps) == {"toggle", "show_at_cursor", "next_error", "prev_error"}
    assert keymaps["toggle"] == ["Ctrl+Alt+E"]
    assert keymaps["show_at_cursor"] == ["Ctrl+Alt+S"]
    assert keymaps["next_error"] == ["F8"]
    assert keymaps["prev_error"] == ["Shift+F8"]
    assert len(KEYMAP_ACTIONS) == 4


def test_canonical_chord_orders_modifiers():
    assert canonicalize_chord_text("shift+ctrl+e") == "Ctrl+Shift+E"
    assert canonicalize_chord_text("  ") == ""


def test_canonical_chord_uses_portable_key_names():
    assert canonicalize_chord_text("ctrl+f8") == "Ctrl+F8"
    assert canonicalize_chord_text("cmd+shift+pagedown") == "Shift+Meta+PgDown"
    assert canonicalize_chord_text("alt+escape") == "Alt+Esc"
    assert canonicalize_chord_text("Ctrl+K, Ctrl+E") == "Ctrl+K"


def test_normalize_sequence_accepts_string_or_list():
    assert normalize_sequence("Ctrl+K, Ctrl+E") == ["Ctrl+K", "Ctrl+E"]
    assert normalize_sequence(["Ctrl+K", "Ctrl+E"]) == ["Ctrl+K", "Ctrl+E"]
    assert normalize_sequence(42) == []
    assert sequence_to_text(["Ctrl+K", "Ctrl+E"]) == "Ctrl+K, Ctrl+E"


def test_normalize_keymaps_ignores_unknown_actions_and_bad_values():
    keymaps = normalize_keymaps({"unknown": ["F1"], "toggle": 5, "next_error": "F9"})
    assert "unknown" not in keymaps
    assert keymaps["toggle"] == ["Ctrl+Alt+E"]
    assert keymaps["next_error"] == ["F9"]


def test_empty_list_unbinds():
    keymaps = normalize_keymaps({"toggle": []})
    assert keymaps["toggle"] == []
    assert get_action_sequence(keymaps, "toggle") == []


def test_find_conflicts_reports_later_owner():
    conflicts = find_conflicts({"show_at_cursor": ["F8"]})
    assert [(c.action_id, c.sequence_text) for c in conflicts] == [("next_error", "F8")]


def test_action_definition_lookup():
    assert action_definition("prev_error").action_name == "Previous TS Error"
    assert action_definition("missing") is None
