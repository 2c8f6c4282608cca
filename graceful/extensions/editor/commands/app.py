from __future__ import annotations
from graceful.commands.registry import CommandDefinition


class Quit(CommandDefinition):
    name = "quit"
    argument_count = 0
    run_last = True
    aliases = ["q", "exit"]
    help = "Exit after the rest of the batch has run"

    def run(self, pane, *args) -> None:
        if pane is not None:
            pane.editor.quit_requested = True
