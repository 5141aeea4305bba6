"""Risk models — output of the classifier."""

from __future__ import annotations

import enum

from pydantic import BaseModel


class Severity(str, enum.Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class RiskVerdict(BaseModel):
    """Classification result for a single tool call.

    ``severity`` carries no meaning when ``dangerous`` is false but is always
    set, so every verdict is a complete value.
    """

    model_config = {"frozen": True}

    dangerous: bool
    reason: str = ""
    severity: Severity = Severity.WARNING

    @classmethod
    def safe(cls) -> RiskVerdict:
        return cls(dangerous=False)

    @classmethod
    def flagged(cls, reason: str, severity: Severity) -> RiskVerdict:
        return cls(dangerous=True, reason=reason, severity=severity)
