"""Action models — the tool call submitted for classification."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field


class ActionCategory(str, enum.Enum):
    SHELL = "shell"
    FILE_WRITE = "file_write"
    FILE_EDIT = "file_edit"
    VERSION_CONTROL = "version_control"
    NETWORK = "network"
    UNRECOGNIZED = "unrecognized"


# Exact tool names only. The shell entry accepts both spellings the agent
# runtime emits; file and git names are matched case-sensitively.
TOOL_CATEGORIES: dict[str, ActionCategory] = {
    "Bash": ActionCategory.SHELL,
    "bash": ActionCategory.SHELL,
    "Write": ActionCategory.FILE_WRITE,
    "Edit": ActionCategory.FILE_EDIT,
    "git": ActionCategory.VERSION_CONTROL,
    "curl": ActionCategory.NETWORK,
    "wget": ActionCategory.NETWORK,
}


def resolve_category(tool_name: str) -> ActionCategory:
    if not isinstance(tool_name, str):
        return ActionCategory.UNRECOGNIZED
    return TOOL_CATEGORIES.get(tool_name, ActionCategory.UNRECOGNIZED)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        # Deliberately space-joined rather than comma-joined so argv-style git args
        # such as ["push", "--force"] still match the rule patterns.
        return " ".join(str(item) for item in value)
    return str(value)


class ActionDescriptor(BaseModel):
    model_config = {"frozen": True}

    tool_name: str = ""
    category: ActionCategory = ActionCategory.UNRECOGNIZED
    arguments: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_tool_call(cls, tool_name: Any, arguments: Any) -> ActionDescriptor:
        """Build a descriptor from raw runtime input without ever raising.

        Anything that is not a string name or a mapping of arguments is
        replaced by an empty value and ends up unrecognized or harmless.
        """
        name = tool_name if isinstance(tool_name, str) else ""
        args = {str(k): v for k, v in arguments.items()} if isinstance(arguments, Mapping) else {}
        return cls(tool_name=name, category=resolve_category(name), arguments=args)

    def text(self, *keys: str) -> str:
        """Return the first truthy argument among ``keys`` as text, else ``""``."""
        for key in keys:
            value = self.arguments.get(key)
            if value:
                return _as_text(value)
        return ""

    @property
    def command(self) -> str:
        if self.category == ActionCategory.VERSION_CONTROL:
            return self.text("command", "args")
        return self.text("command")

    @property
    def file_path(self) -> str:
        return self.text("file_path", "path")

    @property
    def url(self) -> str:
        return self.text("url")

    @property
    def payload(self) -> str:
        return self.text("data", "body")

    @property
    def method(self) -> str:
        return self.text("method")

    @property
    def options(self) -> str:
        return self.text("options")
