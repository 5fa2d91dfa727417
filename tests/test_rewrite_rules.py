import logging

import pytest

from pretty_ts_errors.core.rewrite_rules import (
    DEFAULT_PRETTIFY_PATTERNS,
    RewriteRule,
    RewriteRuleError,
    compile_rule,
    compile_rules,
    default_rules,
    parse_template,
    rules_from_config,
)


def test_parse_template_tokens():
    assert parse_template("a $1 b ${2}c") == ("a ", 1, " b ", 2, "c")
    assert parse_template("cost: $$5") == ("cost: $5",)
    assert parse_template("$1$2") == (1, 2)
    assert parse_template("") == ()


def test_compiled_rule_substitutes_groups():
    rule = compile_rule(RewriteRule(r"(\w+) vs (\w+)", "$2 before $1"))
    assert rule.apply("cats vs dogs") == "dogs before cats"


def test_unmatched_optional_group_expands_to_empty():
    rule = compile_rule(RewriteRule(r"a(b)?c", "[$1]"))
    assert rule.apply("ac") == "[]"


def test_rule_without_match_leaves_text():
    rule = compile_rule(RewriteRule(r"zzz", "y"))
    assert rule.apply("abc") == "abc"


def test_invalid_pattern_raises():
    with pytest.raises(RewriteRuleError):
        compile_rule(RewriteRule(r"(unclosed", "$1"))


def test_template_group_out_of_range_raises():
    with pytest.raises(RewriteRuleError):
        compile_rule(RewriteRule(r"(a)", "$2"))


def test_compile_rules_skips_malformed_and_logs(caplog):
    rules = [
        RewriteRule(r"(unclosed", "$1"),
        RewriteRule(r"(a)", "$1!"),
        RewriteRule(r"b", "$3"),
    ]
    with caplog.at_level(logging.WARNING, logger="PrettyTsErrors.Rules"):
        compiled = compile_rules(rules)
    assert [item.rule.pattern for item in compiled] == [r"(a)"]
    assert sum("Skipping prettify pattern" in rec.getMessage() for rec in caplog.records) == 2


def test_rules_from_config_accepts_template_alias_and_drops_junk():
    rules = rules_from_config(
        [
            {"pattern": "a", "replace": "b"},
            {"pattern": "c", "template": "d"},
            {"replace": "no pattern"},
            "not a mapping",
        ]
    )
    assert rules == [RewriteRule("a", "b"), RewriteRule("c", "d")]


def test_default_rules_compile_in_order():
    compiled = compile_rules(default_rules())
    assert len(compiled) == len(DEFAULT_PRETTIFY_PATTERNS)
    assert compiled[0].apply("Type 'string' is not assignable to type 'number'") == (
        "Expected type 'number', but got 'string'"
    )
