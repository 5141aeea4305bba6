"""Pattern matchers and rule records used by the rule tables."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from toolgate.exceptions import RuleTableError
from toolgate.models.risk import Severity


@dataclass(frozen=True)
class LiteralPattern:
    text: str
    ignore_case: bool = False

    def matches(self, value: str) -> bool:
        if self.ignore_case:
            return self.text.lower() in value.lower()
        return self.text in value

    def describe(self) -> str:
        return self.text


@dataclass(frozen=True)
class RegexPattern:
    expression: str
    ignore_case: bool = False
    compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = re.IGNORECASE if self.ignore_case else 0
        try:
            compiled = re.compile(self.expression, flags)
        except re.error as exc:
            raise RuleTableError(f"Invalid regular expression {self.expression!r}: {exc}") from exc
        object.__setattr__(self, "compiled", compiled)

    def matches(self, value: str) -> bool:
        return self.compiled.search(value) is not None

    def describe(self) -> str:
        return f"/{self.expression}/" + ("i" if self.ignore_case else "")


Pattern = Union[LiteralPattern, RegexPattern]


@dataclass(frozen=True)
class RiskRule:
    pattern: Pattern
    reason: str
    severity: Severity

    def matches(self, value: str) -> bool:
        return self.pattern.matches(value)

    def reason_for(self, subject: str) -> str:
        # Plain replace so stray braces in custom reasons never break matching.
        return self.reason.replace("{subject}", subject)


@dataclass(frozen=True)
class CompositeRule:
    """Fires only when every signal group has at least one hit in the value."""

    name: str
    signals: tuple[tuple[str, ...], ...]
    reason: str
    severity: Severity

    def __post_init__(self) -> None:
        if not self.signals or any(not group for group in self.signals):
            raise RuleTableError(f"Composite rule {self.name!r} needs non-empty signal groups")

    def matched_signals(self, value: str) -> list[bool]:
        return [any(token in value for token in group) for group in self.signals]

    def matches(self, value: str) -> bool:
        return all(self.matched_signals(value))


def first_match(rules: tuple[RiskRule, ...], value: str) -> RiskRule | None:
    for rule in rules:
        if rule.matches(value):
            return rule
    return None
