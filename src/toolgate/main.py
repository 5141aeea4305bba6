"""Entry point and dependency wiring."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from toolgate.cli.app import app
from toolgate.config.settings import Settings
from toolgate.models.policy import ApprovalPolicy
from toolgate.policy.classifier import RiskClassifier
from toolgate.policy.rules import RuleTable, default_rule_table, load_rule_table
from toolgate.policy.safety_gate import ApprovalGate


def configure_logging(level: str = "INFO") -> logging.Logger:
    root = logging.getLogger("toolgate")
    root.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    return root


def build_rule_table(settings: Settings) -> RuleTable:
    if settings.rules_path is None:
        return default_rule_table()
    return load_rule_table(settings.rules_path)


def build_gate(
    settings: Settings | None = None,
    policy: ApprovalPolicy | None = None,
) -> ApprovalGate:
    settings = settings or Settings()
    classifier = RiskClassifier(build_rule_table(settings))
    return ApprovalGate(
        policy=policy or settings.resolved_policy(),
        classifier=classifier,
    )


if __name__ == "__main__":
    app()
