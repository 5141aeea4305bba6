"""Rule tables — ordered, immutable per-category risk rules."""

from __future__ import annotations

import dataclasses
import functools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from toolgate.exceptions import RuleTableError
from toolgate.models.risk import Severity
from toolgate.policy.patterns import CompositeRule, LiteralPattern, RegexPattern, RiskRule

CRITICAL = Severity.CRITICAL
WARNING = Severity.WARNING

# Order matters: the first matching rule decides the verdict.
SHELL_RULES: tuple[RiskRule, ...] = (
    RiskRule(RegexPattern(r"rm\s+-rf"), "Recursive force deletion", CRITICAL),
    RiskRule(RegexPattern(r"rm\s+-r\s+/"), "Recursive deletion from root", CRITICAL),
    RiskRule(RegexPattern(r"chmod\s+777"), "Setting overly permissive file permissions", WARNING),
    RiskRule(RegexPattern(r"chmod\s+-R"), "Recursive permission changes", WARNING),
    RiskRule(RegexPattern(r"mkfs"), "File system formatting", CRITICAL),
    RiskRule(RegexPattern(r"dd\s+if="), "Low-level disk operations", CRITICAL),
    RiskRule(RegexPattern(r"shutdown"), "System shutdown command", CRITICAL),
    RiskRule(RegexPattern(r"reboot"), "System reboot command", CRITICAL),
    RiskRule(RegexPattern(r"kill\s+-9"), "Force kill processes", WARNING),
    RiskRule(RegexPattern(r"pkill"), "Killing processes by name", WARNING),
    RiskRule(RegexPattern(r"sudo"), "Elevated privileges execution", WARNING),
    RiskRule(RegexPattern(r"curl.*\|.*bash"), "Piping remote content to bash", CRITICAL),
    RiskRule(RegexPattern(r"wget.*\|.*sh"), "Piping remote content to shell", CRITICAL),
    RiskRule(RegexPattern(r"eval"), "Dynamic code evaluation", WARNING),
    RiskRule(RegexPattern(r"exec"), "Process replacement", WARNING),
)

EXFILTRATION_RULE = CompositeRule(
    name="exfiltration",
    signals=(
        ("curl", "wget"),
        ("POST", "-X POST", "--data"),
        ("cat", "<"),
    ),
    reason="Potential data exfiltration via network request with file content",
    severity=CRITICAL,
)

SENSITIVE_FILE_REASON = "Writing to sensitive file: {subject}"
SYSTEM_DIR_REASON = "Writing to system directory: {subject}"

SENSITIVE_FILE_RULES: tuple[RiskRule, ...] = tuple(
    RiskRule(pattern, SENSITIVE_FILE_REASON, WARNING)
    for pattern in (
        RegexPattern(r"\.env$"),
        RegexPattern(r"credentials", ignore_case=True),
        RegexPattern(r"id_rsa"),
        RegexPattern(r"\.ssh/"),
        RegexPattern(r"/etc/"),
        RegexPattern(r"\.pem$"),
        RegexPattern(r"\.key$"),
        RegexPattern(r"password", ignore_case=True),
        RegexPattern(r"secret", ignore_case=True),
    )
)

SYSTEM_DIR_RULES: tuple[RiskRule, ...] = tuple(
    RiskRule(RegexPattern(f"^{prefix}"), SYSTEM_DIR_REASON, CRITICAL)
    for prefix in ("/etc/", "/sys/", "/proc/")
)

VERSION_CONTROL_RULES: tuple[RiskRule, ...] = (
    RiskRule(RegexPattern(r"push\s+--force"), "Force push to remote", CRITICAL),
    RiskRule(RegexPattern(r"push\s+-f"), "Force push to remote", CRITICAL),
    RiskRule(RegexPattern(r"reset\s+--hard"), "Hard reset discards local changes", WARNING),
    RiskRule(RegexPattern(r"clean\s+-fd"), "Force clean untracked files and directories", WARNING),
    RiskRule(RegexPattern(r"branch\s+-D\s+(main|master)"), "Deleting main/master branch", CRITICAL),
)

TRUSTED_HOSTS: tuple[str, ...] = ("github.com", "gitlab.com", "npmjs.com", "pypi.org")

NETWORK_POST_REASON = "Network POST request with data payload"
EXTERNAL_DOMAIN_REASON = "Sending data to external domain"


@dataclass(frozen=True)
class RuleTable:
    """Immutable set of rule lists, one per action category."""

    shell: tuple[RiskRule, ...] = SHELL_RULES
    shell_composites: tuple[CompositeRule, ...] = (EXFILTRATION_RULE,)
    sensitive_files: tuple[RiskRule, ...] = SENSITIVE_FILE_RULES
    system_dirs: tuple[RiskRule, ...] = SYSTEM_DIR_RULES
    version_control: tuple[RiskRule, ...] = VERSION_CONTROL_RULES
    trusted_hosts: tuple[str, ...] = TRUSTED_HOSTS

    def extended(
        self,
        shell: tuple[RiskRule, ...] = (),
        sensitive_files: tuple[RiskRule, ...] = (),
        system_dirs: tuple[RiskRule, ...] = (),
        version_control: tuple[RiskRule, ...] = (),
        trusted_hosts: tuple[str, ...] = (),
    ) -> RuleTable:
        """Return a new table with extra entries appended after the existing ones."""
        return dataclasses.replace(
            self,
            shell=self.shell + tuple(shell),
            sensitive_files=self.sensitive_files + tuple(sensitive_files),
            system_dirs=self.system_dirs + tuple(system_dirs),
            version_control=self.version_control + tuple(version_control),
            trusted_hosts=self.trusted_hosts + tuple(trusted_hosts),
        )

    def rule_count(self) -> int:
        return (
            len(self.shell)
            + len(self.shell_composites)
            + len(self.sensitive_files)
            + len(self.system_dirs)
            + len(self.version_control)
        )


@functools.lru_cache(maxsize=1)
def default_rule_table() -> RuleTable:
    return RuleTable()


# --- Custom rule files -------------------------------------------------------


class RuleSpec(BaseModel):
    model_config = {"extra": "forbid"}

    pattern: str
    regex: bool = True
    ignore_case: bool = False
    reason: str
    severity: Severity = Severity.WARNING

    def build(self) -> RiskRule:
        if self.regex:
            pattern = RegexPattern(self.pattern, ignore_case=self.ignore_case)
        else:
            pattern = LiteralPattern(self.pattern, ignore_case=self.ignore_case)
        return RiskRule(pattern, self.reason, self.severity)


class RuleFileSpec(BaseModel):
    model_config = {"extra": "forbid"}

    shell: list[RuleSpec] = []
    sensitive_files: list[RuleSpec] = []
    system_dirs: list[RuleSpec] = []
    version_control: list[RuleSpec] = []
    trusted_hosts: list[str] = []


def load_rule_table(path: Path, base: Optional[RuleTable] = None) -> RuleTable:
    """Read additional rules from a JSON file and return a new extended table.

    Every problem (unreadable or undecodable file, bad JSON, unknown keys, invalid regular
    expressions) surfaces here as ``RuleTableError``, never during matching.
    """
    base = base or default_rule_table()
    source = str(path)
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        parsed = RuleFileSpec.model_validate(raw)
    except OSError as exc:
        raise RuleTableError(f"Cannot read rule file {source}: {exc}", source=source) from exc
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        raise RuleTableError(f"Malformed rule file {source}: {exc}", source=source) from exc

    try:
        return base.extended(
            shell=tuple(rule.build() for rule in parsed.shell),
            sensitive_files=tuple(rule.build() for rule in parsed.sensitive_files),
            system_dirs=tuple(rule.build() for rule in parsed.system_dirs),
            version_control=tuple(rule.build() for rule in parsed.version_control),
            trusted_hosts=tuple(parsed.trusted_hosts),
        )
    except RuleTableError as exc:
        raise RuleTableError(f"{source}: {exc}", source=source) from exc
