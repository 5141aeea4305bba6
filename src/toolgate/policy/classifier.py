"""Risk classifier — maps a tool call to a risk verdict.

The classifier only flags what it recognizes: unknown tools and missing or
malformed arguments come back as not dangerous. It is a gate in front of the
agent's tool calls, not a sandbox.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from toolgate.models.action import ActionCategory, ActionDescriptor
from toolgate.models.risk import RiskVerdict, Severity
from toolgate.policy.patterns import CompositeRule, RiskRule, first_match
from toolgate.policy.rules import (
    EXTERNAL_DOMAIN_REASON,
    NETWORK_POST_REASON,
    RuleTable,
    default_rule_table,
)

logger = logging.getLogger(__name__)

_HTTP_SCHEME = re.compile(r"^https?://")


class RiskClassifier:
    def __init__(self, table: RuleTable | None = None) -> None:
        self._table = table or default_rule_table()
        self._handlers: dict[ActionCategory, Callable[[ActionDescriptor], RiskVerdict]] = {
            ActionCategory.SHELL: self._check_shell,
            ActionCategory.FILE_WRITE: self._check_file,
            ActionCategory.FILE_EDIT: self._check_file,
            ActionCategory.VERSION_CONTROL: self._check_version_control,
            ActionCategory.NETWORK: self._check_network,
        }

    @property
    def table(self) -> RuleTable:
        return self._table

    def classify(self, tool_name: str, arguments: Any) -> RiskVerdict:
        return self.classify_descriptor(ActionDescriptor.from_tool_call(tool_name, arguments))

    def classify_descriptor(self, descriptor: ActionDescriptor) -> RiskVerdict:
        handler = self._handlers.get(descriptor.category)
        if handler is None:
            return RiskVerdict.safe()

        verdict = handler(descriptor)
        if verdict.dangerous:
            logger.debug(
                "Flagged %s call (%s): %s",
                descriptor.tool_name,
                verdict.severity.value,
                verdict.reason,
            )
        return verdict

    def scan_text(self, text: str) -> list[RiskRule | CompositeRule]:
        """Return every shell rule that matches ``text``, not just the first."""
        hits: list[RiskRule | CompositeRule] = [r for r in self._table.shell if r.matches(text)]
        hits.extend(r for r in self._table.shell_composites if r.matches(text))
        return hits

    def _check_shell(self, descriptor: ActionDescriptor) -> RiskVerdict:
        command = descriptor.command
        rule = first_match(self._table.shell, command)
        if rule is not None:
            return RiskVerdict.flagged(rule.reason_for(command), rule.severity)

        for composite in self._table.shell_composites:
            if composite.matches(command):
                return RiskVerdict.flagged(composite.reason, composite.severity)

        return RiskVerdict.safe()

    def _check_file(self, descriptor: ActionDescriptor) -> RiskVerdict:
        path = descriptor.file_path
        # Sensitive names are checked before system directories, so /etc/ paths
        # are reported as warnings.
        rule = first_match(self._table.sensitive_files, path) or first_match(
            self._table.system_dirs, path
        )
        if rule is None:
            return RiskVerdict.safe()
        return RiskVerdict.flagged(rule.reason_for(path), rule.severity)

    def _check_version_control(self, descriptor: ActionDescriptor) -> RiskVerdict:
        command = descriptor.command
        rule = first_match(self._table.version_control, command)
        if rule is None:
            return RiskVerdict.safe()
        return RiskVerdict.flagged(rule.reason_for(command), rule.severity)

    def _check_network(self, descriptor: ActionDescriptor) -> RiskVerdict:
        payload = descriptor.payload
        if not payload:
            return RiskVerdict.safe()

        if descriptor.method == "POST" or "POST" in descriptor.options:
            return RiskVerdict.flagged(NETWORK_POST_REASON, Severity.WARNING)

        if self.is_external_url(descriptor.url):
            return RiskVerdict.flagged(EXTERNAL_DOMAIN_REASON, Severity.WARNING)

        return RiskVerdict.safe()

    def is_external_url(self, url: str) -> bool:
        """True for http(s) URLs whose host does not start with a trusted host."""
        match = _HTTP_SCHEME.match(url)
        if match is None:
            return False
        return not url[match.end():].startswith(self._table.trusted_hosts)


def classify(tool_name: str, arguments: Any) -> RiskVerdict:
    return RiskClassifier().classify(tool_name, arguments)
