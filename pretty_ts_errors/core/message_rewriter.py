"""Rewrite TypeScript diagnostic messages into shorter, structured text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from pretty_ts_errors.core.rewrite_rules import CompiledRule, compile_rules, default_rules
from pretty_ts_errors.core.type_formatter import expand_inline_types, format_type_definition
from pretty_ts_errors.settings_models import PrettyTsErrorsConfig

ORIGINAL_ERROR_SEPARATOR = "---"
ORIGINAL_ERROR_HEADER = "Original TS Error:"

_OBJECT_FIELD_HINT = re.compile(r"\{\s*\w+\s*:\s*\w+")
_ASSIGNABLE_SHAPE = re.compile(
    r"[Tt]ype\s+'(.*?)' is not assignable to.*?type\s+'(.*?)'",
    re.DOTALL,
)
_MISSING_PROPERTY_HINT = re.compile(r"Property '.*?' is missing", re.DOTALL)
_MISSING_PROPERTY_SHAPE = re.compile(
    r"Property '(.*?)' is missing in type '(.*?)' but required in type '(.*?)'",
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class RewriteResult:
    text: str
    special_case: str | None = None


def rewrite_assignability(message: str) -> str | None:
    if "is not assignable" not in message or not _OBJECT_FIELD_HINT.search(message):
        return None
    match = _ASSIGNABLE_SHAPE.search(message)
    if match is None:
        return None
    provided, expected = match.group(1), match.group(2)
    return (
        "Type mismatch:\n\nProvided:\n"
        + format_type_definition(provided)
        + "\n\nExpected:\n"
        + format_type_definition(expected)
    )


def rewrite_missing_property(message: str) -> str | None:
    if not _MISSING_PROPERTY_HINT.search(message):
        return None
    match = _MISSING_PROPERTY_SHAPE.search(message)
    if match is None:
        return None
    prop, actual, required = match.group(1), match.group(2), match.group(3)
    return (
        f"Property {prop} is missing in type:\n\n"
        + format_type_definition(actual)
        + "\n\nbut required in type:\n\n"
        + format_type_definition(required)
    )


_SPECIAL_CASES = (
    ("assignability", rewrite_assignability),
    ("missing_property", rewrite_missing_property),
)


class MessageRewriter:
    """Applies the special cases, then the configured rule table.

    The generic path is always prefixed with ``styling.prefix``; special case
    output is prefixed only when ``decorate_special_cases`` is enabled. Every
    message is followed by the original when ``show_original_error`` is set.
    """

    def __init__(
        self,
        config: PrettyTsErrorsConfig,
        rules: Iterable[CompiledRule] | None = None,
    ) -> None:
        self.config = config
        if rules is None:
            source = config.rules if config.rules is not None else default_rules()
            rules = compile_rules(source)
        self._rules: tuple[CompiledRule, ...] = tuple(rules)

    @property
    def rules(self) -> tuple[CompiledRule, ...]:
        return self._rules

    def prettify_result(self, message: str) -> RewriteResult:
        original = str(message or "")
        for name, handler in _SPECIAL_CASES:
            special = handler(original)
            if special is None:
                continue
            if self.config.decorate_special_cases:
                special = self.config.prefix + special
            return RewriteResult(text=special, special_case=name)

        result = original
        for rule in self._rules:
            result = rule.apply(result)
        return RewriteResult(text=self.config.prefix + result)

    def prettify(self, message: str) -> str:
        return self.prettify_result(message).text

    def rewrite(self, message: str) -> str:
        original = str(message or "")
        result = self.prettify_result(original)
        if not self.config.show_original_error:
            return result.text
        return (
            f"{result.text}\n\n{ORIGINAL_ERROR_SEPARATOR}\n"
            f"{ORIGINAL_ERROR_HEADER}\n{original}"
        )

    def rewrite_lines(self, message: str) -> list[str]:
        """Display lines for one diagnostic.

        Inline ``: { ... }`` blocks in the rewritten text are expanded; the
        original-error block is kept verbatim.
        """
        original = str(message or "")
        result = self.prettify_result(original)
        lines: list[str] = []
        for line in result.text.split("\n"):
            lines.extend(expand_inline_types(line).split("\n"))
        if self.config.show_original_error:
            lines.append("")
            lines.append(ORIGINAL_ERROR_SEPARATOR)
            lines.append(ORIGINAL_ERROR_HEADER)
            lines.extend(original.split("\n"))
        return lines
