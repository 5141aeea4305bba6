"""Application settings loaded from environment variables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from toolgate.models.policy import ApprovalPolicy
from toolgate.policy.risk_levels import policy_from_string

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = {"env_prefix": "TOOLGATE_", "populate_by_name": True}

    approval_policy: str = Field(
        default="block_critical",
        validation_alias=AliasChoices("TOOLGATE_APPROVAL_POLICY", "TOOL_APPROVAL_POLICY"),
        description="Approval policy (always_ask/warn_only/block_critical/disabled)",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    rules_path: Optional[Path] = Field(
        default=None, description="JSON file with additional risk rules"
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    def resolved_policy(self) -> ApprovalPolicy:
        """Parse ``approval_policy``; unknown values fall back to always_ask."""
        try:
            return policy_from_string(self.approval_policy)
        except ValueError:
            logger.warning(
                "Unknown approval policy %r, falling back to %s",
                self.approval_policy,
                ApprovalPolicy.ALWAYS_ASK.value,
            )
            return ApprovalPolicy.ALWAYS_ASK
