from __future__ import annotations
import math
from typing import Tuple

from graceful.commands.errors import CommandError
from graceful.commands.registry import CommandDefinition

_NATURAL = {
    "start": "0",
    "half": "50%",
    "middle": "50%",
    "end": "100%",
    "full": "100%",
}


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _parse_decimal(token: str) -> str:
    """Decimals <= 1 become percents, larger decimals plain numbers."""
    if "." not in token or "%" in token:
        return token
    try:
        value = float(token)
    except ValueError:
        return token
    return str(_round(value)) if value > 1 else f"{value * 100}%"


def _strip_sign(token: str, allow_plus: bool) -> Tuple[str, int]:
    if allow_plus and token[:1] == "+":
        return token[1:], 1
    if token[:1] == "-":
        return token[1:], -1
    return token, 0


def _resolve(token: str, length: int) -> int:
    if "%" in token:
        return _round(length * float(token.replace("%", "")) / 100)
    return int(token)


class Jump(CommandDefinition):
    """
    Move the cursor.

      jump 10        row 10, end of line
      jump 10 4      row 10, column 4
      jump +5 / -5   five rows down / up
      jump 50%       half way through the document (0.5 works too)
      jump end -3    last row, three columns before the end of the line
      jump start     first row (also: middle, half, end, full)
    """
    name = "jump"
    template = "{row:string} {column?:string}"
    aliases = ["j"]
    help = "Move the cursor: jump ROW [COLUMN] (numbers, +n/-n, n%, start|middle|end)"

    def run(self, pane, row, column=None) -> None:
        if pane is None:
            raise CommandError("No pane focused.")

        lines = pane.lines
        y, rel_y = _strip_sign(row.lower(), allow_plus=True)
        x, rel_x = _strip_sign((column or "").lower(), allow_plus=False)

        if y in _NATURAL:
            y, rel_y = _NATURAL[y], 0
        if x in _NATURAL:
            x, rel_x = _NATURAL[x], 0

        y = _parse_decimal(y)
        x = _parse_decimal(x)

        try:
            target_row = _resolve(y, len(lines))
        except ValueError:
            raise CommandError(f"Cannot jump to row '{row}'.")

        if rel_y:
            target_row = pane.row + target_row * rel_y
        target_row = min(max(target_row, 1), len(lines))

        line_length = len(lines[target_row - 1])
        if not x:
            target_column = line_length
        else:
            try:
                target_column = _resolve(x, line_length)
            except ValueError:
                target_column = line_length
            if rel_x:
                target_column = line_length - target_column
        target_column = min(max(target_column, 0), line_length)

        pane.row, pane.column = target_row, target_column


class Insert(CommandDefinition):
    name = "insert"
    argument_count = -1
    aliases = ["i"]
    help = "Append a line of text to this pane: insert TEXT"

    def run(self, pane, text: str = "") -> None:
        if pane is None:
            raise CommandError("No pane focused.")
        pane.text = f"{pane.text}\n{text}" if pane.text else text
        lines = pane.lines
        pane.row, pane.column = len(lines), len(lines[-1])
