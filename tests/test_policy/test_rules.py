"""Brutal tests for patterns, rule tables and custom rule files."""

from __future__ import annotations

import dataclasses

import pytest

from toolgate.exceptions import RuleTableError
from toolgate.models.risk import Severity
from toolgate.policy.patterns import (
    CompositeRule,
    LiteralPattern,
    RegexPattern,
    RiskRule,
    first_match,
)
from toolgate.policy.rules import (
    SHELL_RULES,
    SYSTEM_DIR_RULES,
    TRUSTED_HOSTS,
    RuleTable,
    default_rule_table,
    load_rule_table,
)


class TestPatterns:
    def test_literal(self):
        assert LiteralPattern("rm").matches("rm x") is True
        assert LiteralPattern("RM").matches("rm x") is False

    def test_literal_ignore_case(self):
        assert LiteralPattern("Secret", ignore_case=True).matches("/a/SECRET") is True

    def test_regex(self):
        assert RegexPattern(r"push\s+-f").matches("push   -f") is True

    def test_regex_ignore_case(self):
        assert RegexPattern("password", ignore_case=True).matches("PassWord.txt") is True

    def test_invalid_regex_fails_at_construction(self):
        with pytest.raises(RuleTableError, match="Invalid regular expression"):
            RegexPattern("(unclosed")

    def test_describe(self):
        assert LiteralPattern("sudo").describe() == "sudo"
        assert RegexPattern("sudo", ignore_case=True).describe() == "/sudo/i"

    def test_reason_substitution(self):
        rule = RiskRule(LiteralPattern("x"), "Touching {subject}", Severity.WARNING)
        assert rule.reason_for("/tmp/x") == "Touching /tmp/x"

    def test_reason_with_stray_braces(self):
        rule = RiskRule(LiteralPattern("x"), "Uses {0} and {", Severity.WARNING)
        assert rule.reason_for("x") == "Uses {0} and {"

    def test_first_match(self):
        rules = (
            RiskRule(LiteralPattern("a"), "first", Severity.WARNING),
            RiskRule(LiteralPattern("a"), "second", Severity.CRITICAL),
        )
        assert first_match(rules, "abc").reason == "first"
        assert first_match(rules, "xyz") is None

    def test_composite_requires_groups(self):
        with pytest.raises(RuleTableError):
            CompositeRule(name="empty", signals=(), reason="r", severity=Severity.WARNING)
        with pytest.raises(RuleTableError):
            CompositeRule(name="hole", signals=(("a",), ()), reason="r", severity=Severity.WARNING)


class TestDefaultTable:
    def test_is_cached(self):
        assert default_rule_table() is default_rule_table()

    def test_is_immutable(self):
        table = default_rule_table()
        with pytest.raises(dataclasses.FrozenInstanceError):
            table.shell = ()

    def test_shell_order(self):
        reasons = [r.reason for r in SHELL_RULES]
        assert reasons[0] == "Recursive force deletion"
        assert reasons[-1] == "Process replacement"
        assert len(reasons) == 15

    def test_system_dirs(self):
        assert [r.severity for r in SYSTEM_DIR_RULES] == [Severity.CRITICAL] * 3

    def test_trusted_hosts(self):
        assert TRUSTED_HOSTS == ("github.com", "gitlab.com", "npmjs.com", "pypi.org")

    def test_rule_count(self):
        assert default_rule_table().rule_count() == 15 + 1 + 9 + 3 + 5

    def test_extended_returns_new_table(self):
        base = default_rule_table()
        extra = RiskRule(LiteralPattern("terraform destroy"), "Destroys infra", Severity.CRITICAL)
        extended = base.extended(shell=(extra,))
        assert extended is not base
        assert extended.shell[-1] is extra
        assert extended.shell[: len(base.shell)] == base.shell
        assert len(base.shell) == 15


class TestLoadRuleTable:
    def test_load_valid(self, rules_file):
        path = rules_file({
            "shell": [
                {"pattern": "terraform\\s+destroy", "reason": "Destroys infra", "severity": "critical"}
            ],
            "sensitive_files": [
                {"pattern": "kubeconfig", "regex": False, "reason": "Writing to sensitive file: {subject}"}
            ],
            "trusted_hosts": ["internal.example.com"],
        })
        table = load_rule_table(path)
        assert isinstance(table, RuleTable)
        assert table.shell[-1].severity == Severity.CRITICAL
        assert isinstance(table.sensitive_files[-1].pattern, LiteralPattern)
        assert table.sensitive_files[-1].severity == Severity.WARNING
        assert "internal.example.com" in table.trusted_hosts

    def test_load_empty_object(self, rules_file):
        table = load_rule_table(rules_file({}))
        assert table == default_rule_table()

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleTableError, match="Cannot read rule file"):
            load_rule_table(tmp_path / "nope.json")

    def test_bad_json(self, rules_file):
        with pytest.raises(RuleTableError, match="Malformed rule file"):
            load_rule_table(rules_file("{not json"))

    def test_unknown_key(self, rules_file):
        with pytest.raises(RuleTableError, match="Malformed rule file"):
            load_rule_table(rules_file({"network": []}))

    def test_bad_severity(self, rules_file):
        path = rules_file({"shell": [{"pattern": "x", "reason": "r", "severity": "fatal"}]})
        with pytest.raises(RuleTableError):
            load_rule_table(path)

    def test_bad_regex_names_file(self, rules_file):
        path = rules_file({"shell": [{"pattern": "(", "reason": "r"}]})
        with pytest.raises(RuleTableError) as exc_info:
            load_rule_table(path)
        assert exc_info.value.source == str(path)
        assert "Invalid regular expression" in str(exc_info.value)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_bytes(b"\xff\xfe{}")
        with pytest.raises(RuleTableError, match="Malformed rule file") as exc_info:
            load_rule_table(path)
        assert exc_info.value.source == str(path)
