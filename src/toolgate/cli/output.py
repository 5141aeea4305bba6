"""Rich display helpers for CLI output."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from toolgate.models.policy import GateDecision
from toolgate.models.risk import Severity
from toolgate.policy.patterns import CompositeRule, RiskRule
from toolgate.policy.rules import RuleTable

console = Console()

_SEVERITY_STYLE = {
    Severity.WARNING: "[yellow]warning[/]",
    Severity.CRITICAL: "[red]critical[/]",
}


def print_decision(decision: GateDecision) -> None:
    verdict = decision.verdict
    table = Table(title="Gate Decision", show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Tool", decision.tool_name or "(none)")
    table.add_row("Category", decision.category.value)
    table.add_row("Policy", decision.policy.value)
    if verdict.dangerous:
        table.add_row("Risk", _SEVERITY_STYLE[verdict.severity])
        table.add_row("Reason", escape(verdict.reason))
    else:
        table.add_row("Risk", "[green]none[/]")
    status = "[green]AUTO-ALLOW[/]" if decision.auto_execute else "[red]APPROVAL REQUIRED[/]"
    table.add_row("Decision", status)
    console.print(table)


def _add_rules(table: Table, category: str, rules: tuple[RiskRule, ...]) -> None:
    for i, rule in enumerate(rules, 1):
        table.add_row(
            category,
            str(i),
            escape(rule.pattern.describe()),
            _SEVERITY_STYLE[rule.severity],
            escape(rule.reason),
        )


def print_rule_table(rules: RuleTable) -> None:
    table = Table(title="Risk Rules", expand=True)
    table.add_column("Category", style="cyan")
    table.add_column("#", style="bold", width=3)
    table.add_column("Pattern")
    table.add_column("Severity", justify="center")
    table.add_column("Reason")

    _add_rules(table, "shell", rules.shell)
    for composite in rules.shell_composites:
        signals = " AND ".join("(" + " | ".join(group) + ")" for group in composite.signals)
        table.add_row(
            "shell",
            "+",
            escape(signals),
            _SEVERITY_STYLE[composite.severity],
            escape(composite.reason),
        )
    _add_rules(table, "file", rules.sensitive_files)
    _add_rules(table, "file", rules.system_dirs)
    _add_rules(table, "git", rules.version_control)
    console.print(table)
    console.print(f"[dim]{rules.rule_count()} rules active[/]")
    console.print(f"[dim]Trusted hosts: {escape(', '.join(rules.trusted_hosts)) or '(none)'}[/]")


def print_findings(findings: dict[Path, list[RiskRule | CompositeRule]]) -> None:
    table = Table(title="Dangerous Patterns", expand=True)
    table.add_column("File", style="cyan")
    table.add_column("Severity", justify="center")
    table.add_column("Reason")

    for path, rules in findings.items():
        for rule in rules:
            table.add_row(escape(str(path)), _SEVERITY_STYLE[rule.severity], escape(rule.reason))

    console.print(table)


def print_error(message: str) -> None:
    console.print(Panel(f"[red]{escape(message)}[/]", title="Error", border_style="red"))


def print_info(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/]")
