# graceful/commands/errors.py
from __future__ import annotations
from typing import List, Optional


class CommandError(Exception):
    """Base class for every failure raised by the command engine."""

    def __init__(self, message: str, command_name: Optional[str] = None):
        super().__init__(message)
        self.command_name = command_name


class CommandNotFoundError(CommandError):
    def __init__(self, name: str):
        super().__init__(f"Command '{name}' not recognized.", command_name=name)


class ArgumentError(CommandError):
    """Invocation text did not match the command's template, or a cast failed."""

    def __init__(self, name: str, template: str, reason: str):
        message = f"Insufficient or incorrect arguments for '{name}': {reason}"
        if template:
            message += f" (expected: {name} {template})"
        super().__init__(message, command_name=name)
        self.template = template
        self.reason = reason


class TemplateError(CommandError):
    """Raised when a command whose template failed to compile is invoked by text."""

    def __init__(self, name: str, template: str):
        super().__init__(
            f"Command '{name}' has an unusable template {template!r} and can only be run programmatically.",
            command_name=name,
        )
        self.template = template


class CircularAliasError(CommandError):
    """An alias expanded (directly or indirectly) back into itself."""

    def __init__(self, chain: List[str]):
        self.chain = list(chain)
        super().__init__(
            "Circular alias reference: " + " -> ".join(self.chain),
            command_name=self.chain[0] if self.chain else None,
        )
