from pretty_ts_errors.core.type_formatter import (
    expand_inline_types,
    format_type_definition,
    looks_like_object_type,
)


def test_non_object_text_is_returned_unchanged():
    assert format_type_definition("string") == "string"
    assert format_type_definition("Array<{ a: number }>") == "Array<{ a: number }>"
    assert format_type_definition("") == ""


def test_single_field_object():
    assert format_type_definition("{ y: string }") == "{\n  y: string\n}"


def test_fields_split_on_semicolons():
    assert format_type_definition("{ x: number; y: string }").split("\n") == [
        "{",
        "  x: number;",
        "  y: string",
        "}",
    ]


def test_nested_object_indents_per_depth():
    out = format_type_definition("{ a: { b: number; }; c: string; }")
    assert out.split("\n") == [
        "{",
        "  a: {",
        "    b: number;",
        "  };",
        "  c: string;",
        "}",
    ]


def test_commas_break_lines_like_semicolons():
    out = format_type_definition("{ a: string, b: number }")
    assert out.split("\n") == ["{", "  a: string,", "  b: number", "}"]


def test_unbalanced_input_never_indents_negative():
    out = format_type_definition("{ a: string }}}")
    assert out.split("\n") == ["{", "  a: string", "}", "}", "}"]


def test_no_blank_lines_are_emitted():
    out = format_type_definition("{ ; ; a: string; }")
    assert "" not in out.split("\n")


def test_looks_like_object_type_allows_leading_space():
    assert looks_like_object_type("  { a: string }")
    assert not looks_like_object_type("Foo")


def test_expand_inline_types_moves_block_below_label():
    line = "Provided: { a: string; b: number }"
    assert expand_inline_types(line).split("\n") == [
        "Provided:",
        "{",
        "  a: string;",
        "  b: number",
        "}",
    ]


def test_expand_inline_types_leaves_plain_lines():
    assert expand_inline_types("Expected type 'number', but got 'string'") == (
        "Expected type 'number', but got 'string'"
    )


def test_formatting_formatted_text_is_stable():
    once = format_type_definition("{ a: { b: number; }; }")
    assert once == "{\n  a: {\n    b: number;\n  };\n}"
    assert format_type_definition(once) == once


def test_embedded_line_breaks_do_not_leave_whitespace_lines():
    out = format_type_definition("{ a: string\r\n  b: number\n\n}")
    assert out.split("\n") == ["{", "  a: string", "  b: number", "}"]
