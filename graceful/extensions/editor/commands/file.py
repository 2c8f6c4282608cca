from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Optional

from graceful.commands.errors import CommandError
from graceful.commands.registry import CommandDefinition


def resolve_path(current: Optional[str], path: Optional[str]) -> Optional[Path]:
    """
    Resolve ``path`` against the directory of the buffer's current file.

    resolve_path('/dir/file.txt', 'new.txt')     -> /dir/new.txt
    resolve_path('/dir/file.txt', '../new.txt')  -> /new.txt
    resolve_path('/dir/file.txt', '/abs/x.txt')  -> /abs/x.txt
    resolve_path(None, 'new.txt')                -> <cwd>/new.txt
    """
    if not path:
        return None
    p = Path(path).expanduser()
    if not p.is_absolute():
        base = Path(current).parent if current else Path.cwd()
        p = base / p
    return p.resolve()


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _write(path: Path, text: str) -> None:
    # create missing directories on the way
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class Open(CommandDefinition):
    name = "open"
    template = "{path?:string}"
    aliases = ["e"]
    help = "Open a file into this pane: open [path]"

    async def run(self, pane, path=None) -> None:
        if pane is None:
            raise CommandError("Cannot open file: no pane focused")

        target = resolve_path(pane.filepath, path) or (Path(pane.filepath) if pane.filepath else None)
        if target is None:
            raise CommandError("Cannot open file: no path given")
        if target.is_dir():
            raise CommandError(f"Cannot open '{target}': it is a directory")
        if not target.exists():
            raise CommandError(f"Cannot open '{target}': no such file")

        contents = await asyncio.to_thread(_read, target)
        pane.text = contents
        pane.filepath = str(target)
        pane.row, pane.column = 1, 0


class Save(CommandDefinition):
    name = "save"
    template = "{keyword?:string} {path?:string}"
    aliases = ["w"]
    help = "Save this pane: save | save PATH | save as PATH"

    async def run(self, pane, keyword=None, path=None) -> None:
        if pane is None:
            raise CommandError("Cannot save file: no pane focused")

        save_as = False
        if keyword and keyword.lower() == "as":
            save_as = True
            if not path:
                raise CommandError("Usage: save as PATH")
        elif keyword:
            # the template splits unquoted paths with spaces
            path = f"{keyword} {path}" if path else keyword

        target = resolve_path(pane.filepath, path)
        if target is None and not save_as:
            target = Path(pane.filepath) if pane.filepath else None
        if target is None:
            raise CommandError("Could not save the file: no path given")

        if target.is_dir():
            target = target / pane.title

        await asyncio.to_thread(_write, target, pane.text)
        pane.filepath = str(target)
