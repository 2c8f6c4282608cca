# graceful/commands/parser.py
"""
Invocation parser: raw command-bar text -> ordered list of ResolvedStep.

Text is processed one line at a time. Aliases expand into new text which is
resolved in place, so one input line may yield several steps. Expansion runs
on an explicit work stack that carries the chain of aliases leading to each
line; meeting a name already in its chain raises CircularAliasError.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .errors import ArgumentError, CircularAliasError, CommandError, CommandNotFoundError, TemplateError
from .registry import Command, CommandRegistry, normalize_name
from .types import ArgValue, TypeRegistry

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_POSITIONAL_RE = re.compile(r"\{(\d+)\}")


@dataclass
class ResolvedStep:
    command: Command
    arguments: List[ArgValue] = field(default_factory=list)
    source: str = ""

    @property
    def name(self) -> str:
        return self.command.name


def _failing_command(name: str, error: CommandError, unrecognized: bool = False) -> Command:
    """A synthetic command whose invocation always raises ``error``."""
    def fail(context, *args):
        raise error
    return Command(name=name, handler=fail, unrecognized=unrecognized)


def shape_arguments(text: str, delimiter: str, argument_count: int) -> List[str]:
    """
    Apply the whole-command argument rule to the text after the command name:
    0 -> no arguments, negative -> everything as one argument, N -> at most N
    tokens with the overflow re-joined into the last one.
    """
    if argument_count == 0:
        return []
    if argument_count < 0:
        return [text] if text else []
    if not text:
        return []
    tokens = text.split(delimiter)
    if len(tokens) > argument_count:
        head = tokens[:argument_count - 1]
        head.append(delimiter.join(tokens[argument_count - 1:]))
        tokens = head
    return tokens


def substitute_positionals(target: str, args: Sequence[str]) -> str:
    def repl(m: re.Match) -> str:
        idx = int(m.group(1))
        return args[idx] if idx < len(args) else ""
    return _POSITIONAL_RE.sub(repl, target)


class InvocationParser:
    def __init__(self, registry: CommandRegistry, types: Optional[TypeRegistry] = None) -> None:
        self.registry = registry
        self.types = types or registry.types

    def resolve(self, text: str, chain: Sequence[str] = ()) -> List[ResolvedStep]:
        steps: List[ResolvedStep] = []
        # LIFO work stack; lines are pushed in reverse so they pop in order
        stack: List[Tuple[str, Tuple[str, ...]]] = [
            (line, tuple(chain)) for line in reversed(_LINE_BREAK_RE.split(text or ""))
        ]

        while stack:
            line, line_chain = stack.pop()
            line = line.strip()
            if not line:
                continue

            name, remainder = self._split_name(line)
            key = normalize_name(name)
            command = self.registry.get(key)

            if command is None:
                logger.debug("Unrecognized command '%s'.", key)
                steps.append(ResolvedStep(
                    command=_failing_command(key, CommandNotFoundError(key), unrecognized=True),
                    source=line,
                ))
                continue

            if key in line_chain:
                raise CircularAliasError(list(line_chain) + [key])

            if command.is_alias:
                raw_args = shape_arguments(remainder, command.delimiter, command.argument_count)
                expanded = substitute_positionals(command.alias_target, raw_args)
                expanded_chain = line_chain + (key,)
                for sub_line in reversed(_LINE_BREAK_RE.split(expanded)):
                    stack.append((sub_line, expanded_chain))
                continue

            steps.append(self._bind(command, remainder, line))

        return steps

    # ---- helpers ----
    @staticmethod
    def _split_name(line: str) -> Tuple[str, str]:
        parts = line.split(None, 1)
        return parts[0], (parts[1].strip() if len(parts) > 1 else "")

    def _bind(self, command: Command, remainder: str, line: str) -> ResolvedStep:
        template = command.template
        if template is None:
            return ResolvedStep(
                command=_failing_command(command.name, TemplateError(command.name, command.template_source)),
                source=line,
            )

        raw_args = shape_arguments(remainder, command.delimiter, command.argument_count)

        if not template.descriptors:
            # templateless commands receive their shaped tokens untouched
            return ResolvedStep(command=command, arguments=list(raw_args), source=line)

        joined = command.delimiter.join(raw_args)
        captures = template.match(joined)
        if captures is None:
            return self._argument_failure(command, line, "input does not match the template")

        arguments: List[ArgValue] = []
        for descriptor, capture in zip(template.descriptors, captures):
            if capture is None:
                arguments.append([] if descriptor.rest else None)
                continue
            if descriptor.rest:
                value = self._cast_rest(template, capture, descriptor.type)
            else:
                value = self.types.cast(capture, descriptor.type)
            if value is None:
                return self._argument_failure(
                    command, line, f"could not read {capture!r} as {descriptor.type} for '{descriptor.name}'",
                )
            arguments.append(value)

        return ResolvedStep(command=command, arguments=arguments, source=line)

    def _cast_rest(self, template, capture: str, type_name: str) -> Optional[list]:
        elements = template.explode(capture)
        if elements is None:
            return None
        out: list = []
        for element in elements:
            value = self.types.cast(element, type_name)
            if value is None:
                return None
            # repeated arrays are concatenated into one list
            if self.types.is_array(type_name):
                out.extend(value)
            else:
                out.append(value)
        return out

    @staticmethod
    def _argument_failure(command: Command, line: str, reason: str) -> ResolvedStep:
        error = ArgumentError(command.name, command.template_source, reason)
        return ResolvedStep(command=_failing_command(command.name, error), source=line)
