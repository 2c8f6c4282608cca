"""
Command engine: typed templates, invocation parsing with aliases, and a
serial execution queue with per-batch history.
"""
from __future__ import annotations

from .errors import ArgumentError, CircularAliasError, CommandError, CommandNotFoundError, TemplateError
from .events import BEFORE_EXECUTE_COMMAND, COMMAND_FAILED, Observable
from .manager import CommandManager
from .parser import InvocationParser, ResolvedStep
from .registry import Command, CommandDefinition, CommandRegistry
from .sequencer import CommandHistory, ExecutionSequencer, HistoryEntry, StepRecord, StepStatus
from .template import ArgumentDescriptor, Template, compile_template
from .types import ArgType, TypeRegistry, default_types

__all__ = [
    "ArgType", "ArgumentDescriptor", "ArgumentError", "BEFORE_EXECUTE_COMMAND", "COMMAND_FAILED",
    "CircularAliasError", "Command", "CommandDefinition", "CommandError", "CommandHistory",
    "CommandManager", "CommandNotFoundError", "CommandRegistry", "ExecutionSequencer", "HistoryEntry",
    "InvocationParser", "Observable", "ResolvedStep", "StepRecord", "StepStatus", "Template",
    "TemplateError", "TypeRegistry", "compile_template", "default_types",
]
