"""Policy models — output of the approval gate."""

from __future__ import annotations

import enum

from pydantic import BaseModel

from toolgate.models.action import ActionCategory
from toolgate.models.risk import RiskVerdict


class ApprovalPolicy(str, enum.Enum):
    ALWAYS_ASK = "always_ask"
    WARN_ONLY = "warn_only"
    BLOCK_CRITICAL = "block_critical"
    DISABLED = "disabled"


class GateDecision(BaseModel):
    model_config = {"frozen": True}

    tool_name: str
    category: ActionCategory
    policy: ApprovalPolicy
    verdict: RiskVerdict
    auto_execute: bool

    @property
    def requires_approval(self) -> bool:
        return not self.auto_execute
