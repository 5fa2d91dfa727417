"""Data-driven pattern/template rules used to simplify diagnostic messages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

_LOGGER = logging.getLogger("PrettyTsErrors.Rules")

# $1, ${1}; "$$" is a literal dollar sign.
_TEMPLATE_TOKEN = re.compile(r"\$(?:(\d+)|\{(\d+)\}|(\$))")

TemplatePart = str | int


class RewriteRuleError(ValueError):
    """Raised when a configured rule cannot be compiled."""


@dataclass(frozen=True, slots=True)
class RewriteRule:
    pattern: str
    template: str


@dataclass(frozen=True, slots=True)
class CompiledRule:
    rule: RewriteRule
    regex: re.Pattern[str]
    parts: tuple[TemplatePart, ...]

    def apply(self, text: str) -> str:
        return self.regex.sub(self._expand, text)

    def _expand(self, match: re.Match[str]) -> str:
        out: list[str] = []
        for part in self.parts:
            if isinstance(part, int):
                out.append(match.group(part) or "")
            else:
                out.append(part)
        return "".join(out)


DEFAULT_PRETTIFY_PATTERNS: tuple[dict[str, str], ...] = (
    {
        "pattern": r"Type '(.+)' is not assignable to type '(.+)'",
        "replace": "Expected type '$2', but got '$1'",
    },
    {
        "pattern": r"Property '(.+)' does not exist on type '(.+)'",
        "replace": "The object '$2' doesn't have a property named '$1'",
    },
    {
        "pattern": r"Expected (\d+) arguments, but got (\d+)",
        "replace": "This function takes $1 parameters, but you provided $2",
    },
    {
        "pattern": r"Property '([^']+)' is missing in type '(.+)' but required in type '(.+)'",
        "replace": "Property $1 is missing in type:\n\n$2\n\nbut required in type:\n\n$3",
    },
    {
        "pattern": r"Argument of type '(.+)' is not assignable to parameter of type '(.+)'",
        "replace": "Type mismatch:\n\nProvided: $1\n\nExpected: $2",
    },
)


def parse_template(template: str) -> tuple[TemplatePart, ...]:
    text = str(template or "")
    parts: list[TemplatePart] = []
    literal: list[str] = []
    pos = 0
    for match in _TEMPLATE_TOKEN.finditer(text):
        literal.append(text[pos:match.start()])
        pos = match.end()
        if match.group(3):
            literal.append("$")
            continue
        if literal:
            joined = "".join(literal)
            if joined:
                parts.append(joined)
            literal = []
        parts.append(int(match.group(1) or match.group(2)))
    literal.append(text[pos:])
    joined = "".join(literal)
    if joined:
        parts.append(joined)
    return tuple(parts)


def compile_rule(rule: RewriteRule) -> CompiledRule:
    try:
        regex = re.compile(rule.pattern)
    except re.error as exc:
        raise RewriteRuleError(f"Invalid pattern {rule.pattern!r}: {exc}") from exc
    parts = parse_template(rule.template)
    for part in parts:
        if isinstance(part, int) and part > regex.groups:
            raise RewriteRuleError(
                f"Template {rule.template!r} references group {part}, "
                f"pattern {rule.pattern!r} has {regex.groups}."
            )
    return CompiledRule(rule=rule, regex=regex, parts=parts)


def rules_from_config(entries: Iterable[Any] | None) -> list[RewriteRule]:
    """Build rules from ``{"pattern": ..., "replace": ...}`` mappings.

    Entries without a usable pattern are dropped; ``template`` is accepted as
    an alias of ``replace``.
    """
    rules: list[RewriteRule] = []
    for entry in entries or ():
        if isinstance(entry, RewriteRule):
            rules.append(entry)
            continue
        if not isinstance(entry, Mapping):
            _LOGGER.warning("Ignoring prettify pattern that is not a mapping: %r", entry)
            continue
        pattern = str(entry.get("pattern") or "")
        if not pattern:
            _LOGGER.warning("Ignoring prettify pattern without a pattern: %r", entry)
            continue
        template = entry.get("replace", entry.get("template", ""))
        rules.append(RewriteRule(pattern=pattern, template=str(template or "")))
    return rules


def compile_rules(rules: Iterable[RewriteRule]) -> list[CompiledRule]:
    compiled: list[CompiledRule] = []
    for rule in rules:
        try:
            compiled.append(compile_rule(rule))
        except RewriteRuleError as exc:
            _LOGGER.warning("Skipping prettify pattern: %s", exc)
    return compiled


def default_rules() -> list[RewriteRule]:
    return rules_from_config(DEFAULT_PRETTIFY_PATTERNS)
