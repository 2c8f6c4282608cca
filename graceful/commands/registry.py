# graceful/commands/registry.py
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .template import EMPTY_TEMPLATE, Template, compile_template
from .types import TypeRegistry, default_types

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s")
_POSITIONAL_RE = re.compile(r"\{(\d+)\}")

Handler = Callable[..., Any]


@dataclass
class Command:
    """A registered command, or an alias when ``alias_target`` is set."""
    name: str
    handler: Optional[Handler] = None
    alias_target: Optional[str] = None
    argument_count: int = 0
    delimiter: str = " "
    run_last: bool = False
    template: Optional[Template] = EMPTY_TEMPLATE
    template_source: str = ""
    context_reassign: Optional[Callable[[Any], Any]] = None
    help: str = ""
    unrecognized: bool = False

    @property
    def is_alias(self) -> bool:
        return self.alias_target is not None

    @property
    def callable_by_text(self) -> bool:
        """False when a declared template failed to compile."""
        return self.template is not None


def normalize_name(name: str) -> str:
    return (name or "").strip().lower()


def _default_argument_count(template: Optional[Template]) -> int:
    if template is None or not template.descriptors:
        return 0
    if template.has_rest:
        return -1
    return len(template.descriptors)


class CommandRegistry:
    """Process-wide table of command name -> Command (aliases included)."""

    def __init__(self, types: TypeRegistry = default_types) -> None:
        self.types = types
        self._commands: Dict[str, Command] = {}

    def _check_name(self, name: str) -> Optional[str]:
        if not name or not name.strip():
            logger.warning("Cannot register a command without a valid name.")
            return None
        if _WHITESPACE_RE.search(name.strip()):
            logger.warning("Cannot register command '%s': names may not contain whitespace.", name)
            return None
        key = normalize_name(name)
        if key in self._commands:
            logger.warning("Cannot register command '%s'. It has already been registered.", key)
            return None
        return key

    def define(self, name: str, handler: Optional[Handler], template: Optional[str] = None,
               argument_count: Optional[int] = None, delimiter: Optional[str] = None,
               run_last: bool = False, context_reassign: Optional[Callable[[Any], Any]] = None,
               help: str = "") -> bool:
        key = self._check_name(name)
        if key is None:
            return False
        if handler is None or not callable(handler):
            logger.warning("Cannot register command '%s' without a command function.", key)
            return False

        delimiter = delimiter or " "
        compiled = compile_template(template, separator=delimiter, types=self.types, owner=key)

        if argument_count is None:
            argument_count = _default_argument_count(compiled)
        elif compiled is not None and 0 < argument_count < compiled.required_argument_count:
            logger.warning(
                "[%s] argument count %d is smaller than the %d required by template %r.",
                key, argument_count, compiled.required_argument_count, template,
            )

        self._commands[key] = Command(
            name=key,
            handler=handler,
            argument_count=argument_count,
            delimiter=delimiter,
            run_last=bool(run_last),
            template=compiled,
            template_source=template or "",
            context_reassign=context_reassign,
            help=help,
        )
        return True

    def alias(self, alias_name: str, target: str) -> bool:
        key = self._check_name(alias_name)
        if key is None:
            return False
        if not target or not target.strip():
            logger.warning("Cannot register alias '%s' without a target.", key)
            return False

        self._commands[key] = Command(
            name=key,
            alias_target=target,
            argument_count=len(set(_POSITIONAL_RE.findall(target))),
            help=f"alias for: {target}",
        )
        return True

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(normalize_name(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def names(self) -> List[str]:
        return sorted(self._commands.keys())

    def commands(self) -> List[Command]:
        return [self._commands[k] for k in self.names() if not self._commands[k].is_alias]

    def aliases(self) -> List[Command]:
        return [self._commands[k] for k in self.names() if self._commands[k].is_alias]


class CommandDefinition:
    """
    Base class for extension commands. Subclasses set the class attributes and
    implement ``run(context, *args)``; the loader registers one instance each.
    """
    name: str = ''
    template: Optional[str] = None
    argument_count: Optional[int] = None
    delimiter: str = ' '
    run_last: bool = False
    aliases: List[str] = []
    help: str = ''

    # Optional: def reassign_context(self, context) -> new context | None

    def run(self, context, *args) -> Any:
        raise NotImplementedError('CommandDefinition.run must be implemented')
