"""Approval gate — turns a risk verdict and the configured policy into a decision."""

from __future__ import annotations

import logging
from typing import Any

from toolgate.exceptions import ApprovalRequiredError
from toolgate.models.action import ActionDescriptor
from toolgate.models.policy import ApprovalPolicy, GateDecision
from toolgate.models.risk import RiskVerdict, Severity
from toolgate.policy.classifier import RiskClassifier

logger = logging.getLogger(__name__)


def should_execute(policy: ApprovalPolicy, verdict: RiskVerdict) -> bool:
    """Return True when the call may run without asking, False when it needs approval."""
    if policy == ApprovalPolicy.DISABLED:
        return True

    if not verdict.dangerous:
        return True

    if policy == ApprovalPolicy.WARN_ONLY:
        return True

    if policy == ApprovalPolicy.BLOCK_CRITICAL and verdict.severity == Severity.WARNING:
        return True

    # always_ask, and block_critical on a critical verdict
    return False


class ApprovalGate:
    def __init__(
        self,
        policy: ApprovalPolicy = ApprovalPolicy.BLOCK_CRITICAL,
        classifier: RiskClassifier | None = None,
    ) -> None:
        self._policy = policy
        self._classifier = classifier or RiskClassifier()

    @property
    def policy(self) -> ApprovalPolicy:
        return self._policy

    @property
    def classifier(self) -> RiskClassifier:
        return self._classifier

    def evaluate(self, tool_name: str, arguments: Any) -> GateDecision:
        descriptor = ActionDescriptor.from_tool_call(tool_name, arguments)
        verdict = self._classifier.classify_descriptor(descriptor)
        auto_execute = should_execute(self._policy, verdict)

        if verdict.dangerous and auto_execute and self._policy == ApprovalPolicy.WARN_ONLY:
            logger.warning(
                "Running dangerous %s call without approval (%s): %s",
                descriptor.tool_name,
                verdict.severity.value,
                verdict.reason,
            )
        elif not auto_execute:
            logger.info(
                "Approval required for %s call (%s): %s",
                descriptor.tool_name,
                verdict.severity.value,
                verdict.reason,
            )

        return GateDecision(
            tool_name=descriptor.tool_name,
            category=descriptor.category,
            policy=self._policy,
            verdict=verdict,
            auto_execute=auto_execute,
        )

    def enforce(self, tool_name: str, arguments: Any) -> GateDecision:
        decision = self.evaluate(tool_name, arguments)
        if decision.requires_approval:
            raise ApprovalRequiredError(decision)
        return decision
