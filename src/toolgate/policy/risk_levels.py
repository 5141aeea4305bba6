"""Parsing helpers for approval policies."""

from __future__ import annotations

from toolgate.models.policy import ApprovalPolicy


def policy_from_string(value: str) -> ApprovalPolicy:
    mapping = {
        "ALWAYS_ASK": ApprovalPolicy.ALWAYS_ASK,
        "WARN_ONLY": ApprovalPolicy.WARN_ONLY,
        "BLOCK_CRITICAL": ApprovalPolicy.BLOCK_CRITICAL,
        "DISABLED": ApprovalPolicy.DISABLED,
    }
    result = mapping.get(value.strip().upper())
    if result is None:
        raise ValueError(f"Unknown approval policy: {value}")
    return result
