"""Typer CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from toolgate.cli.output import (
    print_decision,
    print_error,
    print_findings,
    print_info,
    print_rule_table,
)
from toolgate.exceptions import ToolgateError
from toolgate.models.policy import ApprovalPolicy
from toolgate.policy.patterns import CompositeRule, RiskRule
from toolgate.policy.risk_levels import policy_from_string

console = Console()
app = typer.Typer(name="toolgate", help="Risk gate for agent tool calls.")

EXIT_APPROVAL_REQUIRED = 3
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_settings():
    from toolgate.config.settings import Settings

    try:
        return Settings()
    except Exception as exc:
        print_error(f"Failed to load settings: {exc}")
        raise typer.Exit(1)


def _get_gate(policy: Optional[ApprovalPolicy] = None):
    from toolgate.main import build_gate

    try:
        return build_gate(settings=_get_settings(), policy=policy)
    except ToolgateError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


def _parse_arguments(pairs: list[str]) -> dict[str, str]:
    arguments: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--arg")
        arguments[key] = value
    return arguments


def _iter_files(paths: list[Path]):
    for path in paths:
        if path.is_dir():
            yield from sorted(p for p in path.rglob("*") if p.is_file())
        else:
            yield path


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the log level"),
) -> None:
    """Classify agent tool calls and decide whether they need approval."""
    from toolgate.main import configure_logging

    if log_level is not None and log_level.upper() not in _LOG_LEVELS:
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
    configure_logging(log_level.upper() if log_level else _get_settings().log_level)


@app.command()
def check(
    tool: str = typer.Argument(..., help="Tool name, e.g. Bash, Write, git, curl"),
    arg: Optional[List[str]] = typer.Option(None, "--arg", "-a", help="Tool argument as key=value"),
    policy: Optional[str] = typer.Option(None, "--policy", "-p", help="Override approval policy"),
) -> None:
    """Classify a tool call and show whether it may run without approval."""
    arguments = _parse_arguments(arg or [])

    selected: Optional[ApprovalPolicy] = None
    if policy is not None:
        try:
            selected = policy_from_string(policy)
        except ValueError as exc:
            print_error(str(exc))
            raise typer.Exit(1)

    decision = _get_gate(selected).evaluate(tool, arguments)
    print_decision(decision)
    if decision.requires_approval:
        raise typer.Exit(EXIT_APPROVAL_REQUIRED)


@app.command()
def rules() -> None:
    """List the active risk rules."""
    print_rule_table(_get_gate().classifier.table)


@app.command()
def scan(
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories to scan"),
) -> None:
    """Scan text files such as skill definitions for dangerous shell patterns."""
    classifier = _get_gate().classifier
    findings: dict[Path, list[RiskRule | CompositeRule]] = {}
    for path in _iter_files(paths):
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            print_error(f"Cannot read {path}: {exc}")
            raise typer.Exit(1)
        hits = classifier.scan_text(text)
        if hits:
            findings[path] = hits

    if not findings:
        print_info("No dangerous patterns found.")
        return

    print_findings(findings)
    raise typer.Exit(1)


@app.command(name="config")
def show_config() -> None:
    """Show current configuration."""
    settings = _get_settings()

    table_data = {
        "Approval Policy": settings.approval_policy,
        "Effective Policy": settings.resolved_policy().value,
        "Log Level": settings.log_level,
        "Rules Path": str(settings.rules_path) if settings.rules_path else "(built-in only)",
    }

    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value")
    for k, v in table_data.items():
        table.add_row(k, v)
    console.print(table)
