# graceful/commands/types.py
"""
Argument types understood by command templates.

Each type contributes two things:

- a pattern fragment (no capturing groups) used when a template is compiled
  into its matching pattern,
- a cast that turns the captured text into a typed value, returning None when
  the text cannot be converted.

Cast results form a closed set of values: float, str, bool, or a list of
floats/strings. Handlers receive these values as positional arguments.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

ArgValue = Union[float, str, bool, List[float], List[str], List[Union[float, str]]]


class ArgType(str, Enum):
    NUMBER       = "number"
    STRING       = "string"
    BOOLEAN      = "boolean"
    ARRAY        = "array"
    ARRAY_STRING = "array<string>"
    ARRAY_NUMBER = "array<number>"


DEFAULT_TYPE = ArgType.STRING.value

# ---- pattern fragments ----
NUMBER_PATTERN  = r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
# quoted, or a lazy bare run that neither starts nor ends with whitespace
STRING_PATTERN  = r"'[^']*'|\"[^\"]*\"|[^'\",\s](?:[^'\",]*?[^'\",\s])?"
BOOLEAN_PATTERN = r"\w+"
ARRAY_PATTERN   = r"\[[^\]]*\]"

_NUMBER_RE = re.compile(NUMBER_PATTERN)
_STRING_RE = re.compile(STRING_PATTERN)

_TRUE_WORDS = ("true", "yes", "y")
_FALSE_WORDS = ("false", "no", "n")


# ---- casts ----
def cast_number(text: str) -> Optional[float]:
    text = text.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    try:
        return float(text)
    except ValueError:
        return None


def cast_string(text: str) -> Optional[str]:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def cast_boolean(text: str) -> Optional[bool]:
    word = text.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def _split_elements(body: str) -> List[str]:
    """Split an array body on commas that are not inside quotes."""
    items: List[str] = []
    buf: List[str] = []
    quote = None
    for ch in body:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
            buf.append(ch)
        elif ch == ",":
            items.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
    items.append("".join(buf).strip())
    return items


def _string_element(text: str) -> Optional[str]:
    if not _STRING_RE.fullmatch(text):
        return None
    return cast_string(text)


def _any_element(text: str) -> Optional[Union[float, str]]:
    number = cast_number(text)
    if number is not None:
        return number
    return _string_element(text)


def _array_cast(element_cast: Callable[[str], Optional[ArgValue]]) -> Callable[[str], Optional[list]]:
    def cast(text: str) -> Optional[list]:
        text = text.strip()
        if len(text) < 2 or text[0] != "[" or text[-1] != "]":
            return None
        body = text[1:-1].strip()
        if not body:
            return []
        out = []
        for element in _split_elements(body):
            value = element_cast(element)
            if value is None:
                return None
            out.append(value)
        return out
    return cast


# ---- canonical text (inverse of cast) ----
def to_text(value: ArgValue, type_name: str) -> str:
    """Render a value the way the matching cast expects to read it back."""
    if type_name == ArgType.NUMBER.value:
        return repr(float(value))
    if type_name == ArgType.BOOLEAN.value:
        return "true" if value else "false"
    if type_name in (ArgType.ARRAY.value, ArgType.ARRAY_STRING.value, ArgType.ARRAY_NUMBER.value):
        parts = []
        for item in value:
            if isinstance(item, str):
                parts.append(f'"{item}"')
            else:
                parts.append(repr(float(item)))
        return "[" + ", ".join(parts) + "]"
    return f'"{value}"'


@dataclass(frozen=True)
class TypeSpec:
    name: str
    pattern: str
    cast: Callable[[str], Optional[ArgValue]]


class TypeRegistry:
    """Maps type names to their pattern fragment and cast."""

    def __init__(self) -> None:
        self._types: Dict[str, TypeSpec] = {}
        self.register(ArgType.NUMBER.value, NUMBER_PATTERN, cast_number)
        self.register(ArgType.STRING.value, STRING_PATTERN, cast_string)
        self.register(ArgType.BOOLEAN.value, BOOLEAN_PATTERN, cast_boolean)
        self.register(ArgType.ARRAY.value, ARRAY_PATTERN, _array_cast(_any_element))
        self.register(ArgType.ARRAY_STRING.value, ARRAY_PATTERN, _array_cast(_string_element))
        self.register(ArgType.ARRAY_NUMBER.value, ARRAY_PATTERN, _array_cast(cast_number))

    def register(self, name: str, pattern: str, cast: Callable[[str], Optional[ArgValue]]) -> None:
        self._types[name] = TypeSpec(name=name, pattern=pattern, cast=cast)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def available(self) -> List[str]:
        return sorted(self._types.keys())

    def pattern_for(self, type_name: str) -> Optional[str]:
        spec = self._types.get(type_name)
        return spec.pattern if spec else None

    def cast(self, raw: str, type_name: str) -> Optional[ArgValue]:
        spec = self._types.get(type_name)
        if spec is None:
            return None
        return spec.cast(raw)

    @staticmethod
    def is_array(type_name: str) -> bool:
        return type_name.startswith(ArgType.ARRAY.value)


# Shared instance used when no registry is passed explicitly.
default_types = TypeRegistry()
