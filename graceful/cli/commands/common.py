from __future__ import annotations
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from graceful.commands.manager import CommandManager
from graceful.commands.registry import CommandDefinition
from graceful.commands.sequencer import StepStatus
from ..loader import register_definition

_STATUS_STYLE = {
    StepStatus.SUCCEEDED: "green",
    StepStatus.FAILED: "red",
    StepStatus.UNRECOGNIZED: "red",
    StepStatus.SKIPPED: "dim",
    StepStatus.PENDING: "yellow",
}


def _print_table(console: Console, headers: List[str], rows: List[List[str]], title: Optional[str] = None) -> None:
    table = Table(show_header=True, header_style="bold", title=title)
    for h in headers:
        table.add_column(h)
    for r in rows:
        table.add_row(*[escape(str(x)) for x in r])
    console.print(table)


class _Builtin(CommandDefinition):
    def __init__(self, manager: CommandManager, console: Console) -> None:
        self.manager = manager
        self.console = console


class Help(_Builtin):
    name = 'help'
    argument_count = 0
    aliases = ['?']
    help = 'List the available commands'

    def run(self, context, *args) -> None:
        rows = []
        for cmd in self.manager.registry.commands():
            flags = []
            if cmd.run_last:
                flags.append('last')
            if not cmd.callable_by_text:
                flags.append('no-text')
            rows.append([cmd.name, cmd.template_source or '-', ','.join(flags), cmd.help])
        _print_table(self.console, ['command', 'arguments', 'flags', 'description'], rows)


class History(_Builtin):
    name = 'history'
    template = '{count?:number}'
    help = 'Show the last N batches and the status of each step (default 10)'

    def run(self, context, count=None) -> None:
        n = int(count) if count is not None else 10
        entries = self.manager.history.last(n)
        if not entries:
            self.console.print('History is empty.')
            return
        table = Table(show_header=True, header_style="bold")
        for h in ('time', 'input', 'command', 'arguments', 'status'):
            table.add_column(h)
        for entry in entries:
            stamp = entry.timestamp.strftime('%H:%M:%S')
            text = escape(entry.text.replace("\n", " | "))
            if not entry.steps:
                table.add_row(stamp, text, '', '', '')
            for i, step in enumerate(entry.steps):
                style = _STATUS_STYLE.get(step.status, "")
                table.add_row(
                    stamp if i == 0 else '',
                    text if i == 0 else '',
                    escape(step.command_name),
                    escape(repr(step.arguments)) if step.arguments else '',
                    f"[{style}]{escape(step.describe())}[/{style}]",
                )
        self.console.print(table)


class Aliases(_Builtin):
    name = 'aliases'
    argument_count = 0
    help = 'List command aliases and what they expand to'

    def run(self, context, *args) -> None:
        rows = [[a.name, a.alias_target.replace('\n', ' | ')] for a in self.manager.registry.aliases()]
        if not rows:
            self.console.print('No aliases defined.')
            return
        _print_table(self.console, ['alias', 'expands to'], rows)


def load_common_commands(manager: CommandManager, console: Optional[Console] = None) -> None:
    console = console or Console()
    for cls in (Help, History, Aliases):
        register_definition(manager, cls(manager, console))
