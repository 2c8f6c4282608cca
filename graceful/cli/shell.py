from __future__ import annotations
import asyncio
import sys
from typing import Callable, Optional

from graceful.commands.errors import CircularAliasError
from graceful.commands.manager import CommandManager
from graceful.config import Settings, load_settings
from graceful.logs import setup_logging
from .commands.common import load_common_commands
from .loader import discover_commands
from .state import EditorState

CONTINUATION_PROMPT = "... "


def build_manager(settings: Settings) -> CommandManager:
    manager = CommandManager(history_limit=settings.history_limit)
    load_common_commands(manager)
    for package_root in settings.extensions:
        discover_commands(manager, package_root)
    return manager


def make_reader(stdin, stdout) -> Callable[[str], str]:
    def readline(prompt: str) -> str:
        if stdin is sys.stdin:
            return input(prompt)
        stdout.write(prompt)
        stdout.flush()
        line = stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")
    return readline


def read_batch(readline: Callable[[str], str], prompt: str) -> str:
    """Read one batch; a trailing backslash continues it on the next line."""
    lines = []
    current = prompt
    while True:
        line = readline(current)
        if line.endswith("\\"):
            lines.append(line[:-1])
            current = CONTINUATION_PROMPT
            continue
        lines.append(line)
        return "\n".join(lines)


def run_loop(manager: CommandManager, state: EditorState, readline: Callable[[str], str],
             stdout, prompt: str = "graceful> ") -> None:
    def report_failure(name: str, reason: str) -> None:
        print(f"[Command Error] {name}: {reason}", file=stdout)

    listener = manager.on_command_failed(report_failure)
    try:
        while not state.quit_requested:
            try:
                text = read_batch(readline, f"{state.prompt_prefix()}{prompt}")
            except (EOFError, KeyboardInterrupt):
                print(file=stdout)
                break

            if not text.strip():
                continue

            try:
                asyncio.run(manager.run_command(text, state.focus_pane()))
            except CircularAliasError as e:
                print(f"[error] {e}", file=stdout)
            except KeyboardInterrupt:
                print("\n[interrupted]", file=stdout)
    finally:
        manager.events.off(listener)


def run(stdin=None, stdout=None, settings: Optional[Settings] = None,
        manager: Optional[CommandManager] = None, state: Optional[EditorState] = None) -> EditorState:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    settings = settings or load_settings()
    setup_logging(settings)

    manager = manager or build_manager(settings)
    state = state or EditorState()

    run_loop(manager, state, make_reader(stdin, stdout), stdout, prompt=settings.prompt)
    return state
