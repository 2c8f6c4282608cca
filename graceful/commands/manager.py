# graceful/commands/manager.py
"""
CommandManager: one object owning the type table, command registry, parser,
sequencer, history and events. Extensions talk to it through
``define_command`` / ``alias_command``; UI surfaces through ``run_command``
and the ``before_execute_command`` event.
"""
from __future__ import annotations
from typing import Any, Callable, Optional

from .events import BEFORE_EXECUTE_COMMAND, COMMAND_FAILED, ListenerId, Observable
from .parser import InvocationParser
from .registry import CommandRegistry
from .sequencer import CommandHistory, ExecutionSequencer, HistoryEntry
from .types import TypeRegistry


class CommandManager:
    def __init__(self, types: Optional[TypeRegistry] = None, history_limit: int = 0) -> None:
        self.types = types or TypeRegistry()
        self.registry = CommandRegistry(self.types)
        self.parser = InvocationParser(self.registry, self.types)
        self.events = Observable()
        self.history = CommandHistory(limit=history_limit)
        self.sequencer = ExecutionSequencer(self.parser, events=self.events, history=self.history)

    # ---- registration ----
    def define_command(self, name: str, handler: Optional[Callable] = None, template: Optional[str] = None,
                       argument_count: Optional[int] = None, delimiter: Optional[str] = None,
                       run_last: bool = False, context_reassign: Optional[Callable] = None,
                       help: str = "") -> bool:
        return self.registry.define(
            name, handler, template=template, argument_count=argument_count, delimiter=delimiter,
            run_last=run_last, context_reassign=context_reassign, help=help,
        )

    def alias_command(self, alias_name: str, target: str) -> bool:
        return self.registry.alias(alias_name, target)

    # ---- invocation ----
    async def run_command(self, text: str, context: Any = None) -> HistoryEntry:
        return await self.sequencer.run(text, context)

    def resolve(self, text: str):
        return self.parser.resolve(text)

    # ---- notifications ----
    def on_before_execute(self, func: Callable[[str], Any]) -> ListenerId:
        return self.events.on(BEFORE_EXECUTE_COMMAND, func)

    def on_command_failed(self, func: Callable[[str, str], Any]) -> ListenerId:
        return self.events.on(COMMAND_FAILED, func)

