"""Custom exception hierarchy for Toolgate."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toolgate.models.policy import GateDecision


class ToolgateError(Exception):
    """Base exception for all Toolgate errors."""


class RuleTableError(ToolgateError):
    """Raised when a rule table cannot be built from its configuration."""

    def __init__(self, message: str, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class ApprovalRequiredError(ToolgateError):
    """Raised by ``ApprovalGate.enforce`` when a tool call needs confirmation."""

    def __init__(self, decision: GateDecision) -> None:
        verdict = decision.verdict
        super().__init__(
            f"{decision.tool_name} requires approval "
            f"({verdict.severity.value}): {verdict.reason}"
        )
        self.decision = decision
