# graceful/commands/events.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

BEFORE_EXECUTE_COMMAND = "before_execute_command"
COMMAND_FAILED = "command_failed"


@dataclass(frozen=True)
class ListenerId:
    event: str
    id: int


class Observable:
    """Synchronous observer list keyed by event name."""

    def __init__(self) -> None:
        self._events: Dict[str, Dict[int, Tuple[Callable, bool]]] = {}
        self._next_id: Dict[str, int] = {}

    def on(self, event: str, func: Callable, once: bool = False) -> ListenerId:
        listeners = self._events.setdefault(event, {})
        self._next_id[event] = self._next_id.get(event, 0) + 1
        ident = self._next_id[event]
        listeners[ident] = (func, once)
        return ListenerId(event, ident)

    def once(self, event: str, func: Callable) -> ListenerId:
        return self.on(event, func, once=True)

    def off(self, listener: ListenerId) -> bool:
        return self._events.get(listener.event, {}).pop(listener.id, None) is not None

    def trigger(self, event: str, *args) -> int:
        """Call every listener of ``event``; returns how many were called."""
        listeners: List[Tuple[int, Tuple[Callable, bool]]] = list(self._events.get(event, {}).items())
        for ident, (func, once) in listeners:
            if once:
                self._events[event].pop(ident, None)
            try:
                func(*args)
            except Exception:
                logger.exception("Listener for '%s' raised.", event)
        return len(listeners)
