# graceful/commands/template.py
"""
Template compiler.

A template describes a command's arguments with placeholders embedded in
literal text, e.g.

    {type?:string} {link?:boolean}
    {count:number} {...items:array<string>}
    {name?} ({count:number}, {...items:array<string>})

Placeholder syntax is ``{`` [``...``] name [``?``] [``:type``] ``}``:

- ``...`` marks a rest (variadic) argument, allowed on the last placeholder only,
- ``?`` marks the argument optional; every later placeholder must be optional too,
- ``:type`` picks an entry of the type registry (default ``string``).

The literal text in front of a placeholder is that argument's delimiter; the
text after the last placeholder is the trailing delimiter. Compilation is pure:
the same source always yields an equal Template.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple

from .types import DEFAULT_TYPE, TypeRegistry, default_types

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(
    r"\{(?P<rest>\.\.\.)?\s*(?P<name>[A-Za-z_][\w-]*)\s*(?P<optional>\?)?\s*(?::\s*(?P<type>[^{}]*?)\s*)?\}"
)


@dataclass(frozen=True)
class ArgumentDescriptor:
    name: str
    type: str = DEFAULT_TYPE
    delimiter: str = ""
    optional: bool = False
    rest: bool = False

    def describe(self) -> str:
        head = ("..." if self.rest else "") + self.name + ("?" if self.optional else "")
        return "{" + head + ":" + self.type + "}"


@dataclass(frozen=True)
class Template:
    source: str
    descriptors: Tuple[ArgumentDescriptor, ...] = ()
    trailing_delimiter: str = ""
    separator: str = " "
    pattern: Optional[Pattern] = field(default=None, compare=False)
    pattern_text: str = r"\A\Z"
    rest_pattern: Optional[Pattern] = field(default=None, compare=False)
    rest_pattern_text: Optional[str] = None

    @property
    def required_argument_count(self) -> int:
        return sum(1 for d in self.descriptors if not d.optional)

    @property
    def has_rest(self) -> bool:
        return bool(self.descriptors) and self.descriptors[-1].rest

    @property
    def rest_separator(self) -> str:
        if not self.has_rest:
            return ""
        return self.descriptors[-1].delimiter or self.separator

    def match(self, text: str) -> Optional[List[Optional[str]]]:
        """Return one capture per descriptor (None where an optional one is absent)."""
        m = self.pattern.match(text)
        if not m:
            return None
        return list(m.groups())

    def explode(self, text: str) -> Optional[List[str]]:
        """Split a rest capture into its repeated elements."""
        if self.rest_pattern is None:
            return [text]
        sep = self.rest_separator
        subject = text + sep
        out: List[str] = []
        pos = 0
        while pos < len(subject):
            m = self.rest_pattern.match(subject, pos)
            if not m or m.end() == pos:
                return None
            out.append(m.group(1))
            pos = m.end()
        return out

    def __str__(self) -> str:
        return self.source


EMPTY_TEMPLATE = Template(source="", pattern=re.compile(r"\A\Z"))


def _parse_placeholders(source: str, types: TypeRegistry, owner: str) -> Tuple[List[ArgumentDescriptor], str]:
    matches = list(PLACEHOLDER_RE.finditer(source))
    descriptors: List[ArgumentDescriptor] = []
    seen_optional = False
    last_end = 0

    for idx, m in enumerate(matches):
        delimiter = source[last_end:m.start()]
        last_end = m.end()
        name = m.group("name")
        rest = bool(m.group("rest"))
        optional = bool(m.group("optional"))
        type_name = (m.group("type") or DEFAULT_TYPE).strip().lower() or DEFAULT_TYPE

        if rest and idx != len(matches) - 1:
            logger.warning("[%s] rest marker on '%s' ignored: only the last argument may be variadic.", owner, name)
            rest = False

        if type_name not in types:
            logger.warning("[%s] unknown type '%s' for argument '%s'; using '%s'.", owner, type_name, name, DEFAULT_TYPE)
            type_name = DEFAULT_TYPE

        if seen_optional and not optional:
            logger.warning("[%s] required argument '%s' follows an optional one; treating it as optional.", owner, name)
            optional = True
        seen_optional = seen_optional or optional

        descriptors.append(ArgumentDescriptor(
            name=name, type=type_name, delimiter=delimiter, optional=optional, rest=rest,
        ))

    return descriptors, source[last_end:]


def _build_pattern(descriptors: List[ArgumentDescriptor], trailing: str, separator: str, types: TypeRegistry) -> Tuple[str, Optional[str]]:
    parts: List[str] = []
    rest_text: Optional[str] = None

    for d in descriptors:
        fragment = f"(?:{types.pattern_for(d.type)})"
        if d.rest:
            # elements may contain the separator; explode() validates them
            sep = re.escape(d.delimiter or separator)
            body = ".+?"
            rest_text = f"({fragment}){sep}"
        else:
            body = fragment
        segment = f"{re.escape(d.delimiter)}({body})"
        if d.optional:
            segment = f"(?:{segment})?"
        parts.append(segment)

    return r"\A" + "".join(parts) + re.escape(trailing) + r"\Z", rest_text


def compile_template(source: Optional[str], separator: str = " ", types: TypeRegistry = default_types,
                     owner: str = "template") -> Optional[Template]:
    """
    Compile a template string. Returns EMPTY_TEMPLATE for an empty source and
    None when a non-empty source contains no placeholder at all.
    """
    if not source:
        return EMPTY_TEMPLATE

    descriptors, trailing = _parse_placeholders(source, types, owner)
    if not descriptors:
        logger.warning("[%s] template %r contains no placeholders; it cannot be matched.", owner, source)
        return None

    pattern_text, rest_text = _build_pattern(descriptors, trailing, separator, types)
    return Template(
        source=source,
        descriptors=tuple(descriptors),
        trailing_delimiter=trailing,
        separator=separator,
        pattern=re.compile(pattern_text),
        pattern_text=pattern_text,
        rest_pattern=re.compile(rest_text) if rest_text else None,
        rest_pattern_text=rest_text,
    )
