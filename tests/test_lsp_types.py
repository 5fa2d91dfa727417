from pretty_ts_errors.lsp.diagnostics_interceptor import ORIGINAL_MESSAGE_KEY
from pretty_ts_errors.lsp.types import (
    codepoint_index_from_utf16_units,
    diagnostic_severity_name,
    diagnostics_from_lsp,
    utf16_code_units,
)


def _item(message="boom", **extra):
    item = {
        "range": {"start": {"line": 2, "character": 4}, "end": {"line": 2, "character": 9}},
        "message": message,
    }
    item.update(extra)
    return item


def test_utf16_units_count_surrogate_pairs():
    assert utf16_code_units("abc") == 3
    assert utf16_code_units("a😀") == 3
    assert utf16_code_units("") == 0


def test_codepoint_index_from_utf16_units():
    assert codepoint_index_from_utf16_units("a😀b", 3) == 2
    assert codepoint_index_from_utf16_units("a😀b", 1) == 1
    assert codepoint_index_from_utf16_units("ab", 5) == 5
    assert codepoint_index_from_utf16_units("", 4) == 4


def test_severity_names():
    assert diagnostic_severity_name(1) == "error"
    assert diagnostic_severity_name(2) == "warning"
    assert diagnostic_severity_name(3) == "info"
    assert diagnostic_severity_name(4) == "hint"
    assert diagnostic_severity_name(None) == "error"


def test_diagnostics_from_lsp_basic_fields():
    (diag,) = diagnostics_from_lsp([_item(severity=2, code=2322, source="ts")])
    assert (diag.line, diag.column, diag.end_line, diag.end_column) == (2, 4, 2, 9)
    assert diag.message == "boom"
    assert diag.severity == "warning"
    assert diag.code == "2322"
    assert diag.source == "ts"
    assert diag.published_message == ""


def test_diagnostics_from_lsp_prefers_original_message():
    item = _item("→ pretty", data={ORIGINAL_MESSAGE_KEY: "raw"})
    (diag,) = diagnostics_from_lsp([item])
    assert diag.message == "raw"
    assert diag.published_message == "→ pretty"


def test_diagnostics_from_lsp_maps_utf16_columns():
    lines = {2: "ab😀cdefgh"}
    (diag,) = diagnostics_from_lsp([_item()], lambda line: lines.get(line, ""))
    assert (diag.column, diag.end_column) == (3, 8)


def test_diagnostics_from_lsp_skips_malformed_items():
    assert diagnostics_from_lsp(None) == []
    assert diagnostics_from_lsp(["x", {"message": "no range"}]) == []


def test_default_source_and_code_object():
    (diag,) = diagnostics_from_lsp([_item(code={"value": "TS2345"})])
    assert diag.source == "typescript"
    assert diag.code == "TS2345"
