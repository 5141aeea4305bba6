"""Shared fixtures for all tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from toolgate.config.settings import Settings
from toolgate.models.risk import RiskVerdict, Severity
from toolgate.policy.classifier import RiskClassifier


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "TOOLGATE_APPROVAL_POLICY",
        "TOOL_APPROVAL_POLICY",
        "TOOLGATE_LOG_LEVEL",
        "TOOLGATE_RULES_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_settings(monkeypatch):
    monkeypatch.setenv("TOOLGATE_APPROVAL_POLICY", "block_critical")
    monkeypatch.setenv("TOOLGATE_LOG_LEVEL", "DEBUG")
    return Settings()


@pytest.fixture
def classifier():
    return RiskClassifier()


@pytest.fixture
def safe_verdict():
    return RiskVerdict.safe()


@pytest.fixture
def warning_verdict():
    return RiskVerdict.flagged("Elevated privileges execution", Severity.WARNING)


@pytest.fixture
def critical_verdict():
    return RiskVerdict.flagged("Recursive force deletion", Severity.CRITICAL)


@pytest.fixture
def rules_file(tmp_path):
    """Write a custom rule file and return its path."""
    def _make(data) -> Path:
        path = tmp_path / "rules.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data))
        return path
    return _make
