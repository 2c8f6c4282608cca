# graceful/commands/sequencer.py
"""
Execution sequencer.

Every call to ``run`` appends a link to one serial chain shared by all
callers: a batch starts only after the previous batch has settled. Inside a
batch, steps run one at a time in stable run-last order; after the first
failure the remaining steps of that batch are skipped. Each batch leaves a
HistoryEntry, appended before its first step runs.
"""
from __future__ import annotations
import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, List, Optional

from .events import BEFORE_EXECUTE_COMMAND, COMMAND_FAILED, Observable
from .parser import InvocationParser, ResolvedStep

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    PENDING      = "Pending"
    SUCCEEDED    = "Succeeded"
    FAILED       = "Failed"
    SKIPPED      = "Skipped"
    UNRECOGNIZED = "Unrecognized"


@dataclass
class StepRecord:
    command_name: str
    arguments: List[Any] = field(default_factory=list)
    status: StepStatus = StepStatus.PENDING
    reason: Optional[str] = None
    target_context: Any = None

    def describe(self) -> str:
        if self.status is StepStatus.FAILED and self.reason:
            return f"{self.status.value}: {self.reason}"
        return self.status.value


@dataclass
class HistoryEntry:
    text: str
    steps: List[StepRecord] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def failed(self) -> bool:
        return any(s.status in (StepStatus.FAILED, StepStatus.UNRECOGNIZED) for s in self.steps)


class CommandHistory:
    """Append-only log of batches. ``limit`` > 0 keeps only the newest entries."""

    def __init__(self, limit: int = 0) -> None:
        self.limit = limit
        self._entries: List[HistoryEntry] = []

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)
        if self.limit > 0 and len(self._entries) > self.limit:
            del self._entries[:len(self._entries) - self.limit]

    def last(self, n: int) -> List[HistoryEntry]:
        return self._entries[-n:] if n > 0 else []

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, idx: int) -> HistoryEntry:
        return self._entries[idx]


def order_steps(steps: List[ResolvedStep]) -> List[ResolvedStep]:
    """Stable partition: run-last steps move to the end, both groups keep their order."""
    first = [s for s in steps if not s.command.run_last]
    last = [s for s in steps if s.command.run_last]
    return first + last


class ExecutionSequencer:
    def __init__(self, parser: InvocationParser, events: Optional[Observable] = None,
                 history: Optional[CommandHistory] = None) -> None:
        self.parser = parser
        self.events = events or Observable()
        self.history = history if history is not None else CommandHistory()
        self._tail: Optional[asyncio.Future] = None

    async def run(self, text: str, context: Any = None) -> HistoryEntry:
        """Queue a batch behind every earlier one and walk it once it is at the front."""
        previous = self._tail
        link = asyncio.get_running_loop().create_future()
        self._tail = link
        try:
            if previous is not None and not previous.done():
                # a cancelled waiter must not cancel the batch it waits on
                await asyncio.shield(previous)
            return await self._run_batch(text, context)
        finally:
            if previous is not None and not previous.done():
                # cancelled while queued: release the next batch only after ours would have run
                previous.add_done_callback(lambda _f: self._settle(link))
            else:
                self._settle(link)

    def _settle(self, link: asyncio.Future) -> None:
        if not link.done():
            link.set_result(None)
        if self._tail is link:
            self._tail = None

    async def _run_batch(self, text: str, context: Any) -> HistoryEntry:
        steps = order_steps(self.parser.resolve(text))

        entry = HistoryEntry(
            text=text,
            steps=[StepRecord(command_name=s.name, arguments=list(s.arguments)) for s in steps],
        )
        self.history.append(entry)

        fail_hard = False
        for step, record in zip(steps, entry.steps):
            if fail_hard:
                record.status = StepStatus.SKIPPED
                continue

            record.target_context = context
            self.events.trigger(BEFORE_EXECUTE_COMMAND, step.name)
            try:
                result = step.command.handler(context, *step.arguments)
                if inspect.isawaitable(result):
                    await result
                new_context = context
                if step.command.context_reassign is not None:
                    new_context = step.command.context_reassign(context)
            except Exception as e:
                fail_hard = True
                record.status = StepStatus.UNRECOGNIZED if step.command.unrecognized else StepStatus.FAILED
                record.reason = str(e)
                logger.error("Command '%s' failed with error: %s", step.name, e)
                logger.debug("Traceback for '%s'", step.name, exc_info=True)
                self.events.trigger(COMMAND_FAILED, step.name, str(e))
                continue

            record.status = StepStatus.SUCCEEDED
            if new_context is not None and new_context is not context:
                context = new_context

        return entry
