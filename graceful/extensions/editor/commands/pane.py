from __future__ import annotations
from typing import List, Optional

from graceful.commands.errors import CommandError
from graceful.commands.registry import CommandDefinition
from graceful.cli.state import Pane

ALIASES = {
    # split both ways, e.g. 'sb true' adds two linked input panes
    "sb": "split_v input {0}\nsplit_h input {0}",
}


def _require_pane(pane: Optional[Pane]) -> Pane:
    if pane is None:
        raise CommandError("No pane focused.")
    return pane


def _add_split(pane: Optional[Pane], direction: str, kind: Optional[str], link: Optional[bool]) -> Pane:
    pane = _require_pane(pane)
    kind = (kind or "input").lower()
    new_pane = pane.editor.add_pane(kind=kind, after=pane)
    new_pane.direction = direction
    if link:
        new_pane.link_to(pane)
    return new_pane


class SplitHorizontal(CommandDefinition):
    name = "split_h"
    template = "{type?:string} {link?:boolean}"
    help = "Open a horizontal split: split_h [input|preview] [link]"

    def run(self, pane, kind=None, link=None) -> None:
        _add_split(pane, "horizontal", kind, link)


class SplitVertical(CommandDefinition):
    name = "split_v"
    template = "{type?:string} {link?:boolean}"
    help = "Open a vertical split: split_v [input|preview] [link]"

    def run(self, pane, kind=None, link=None) -> None:
        _add_split(pane, "vertical", kind, link)


class Focus(CommandDefinition):
    name = "focus"
    template = "{index:number}"
    aliases = ["f"]
    help = "Focus the pane with the given index: focus N"

    def run(self, pane, index) -> None:
        pane = _require_pane(pane)
        target = pane.editor.get_pane(index)
        if target is None:
            raise CommandError(f"Invalid pane index '{index:g}' specified.")
        pane.editor.focus(target)

    def reassign_context(self, pane):
        # later commands in the batch act on the newly focused pane
        return pane.editor.focus_pane() if pane is not None else None


class Link(CommandDefinition):
    name = "link"
    template = "{target:string}"
    help = "Link this pane to pane N, or 'link break' to remove the link"

    def run(self, pane, target) -> None:
        pane = _require_pane(pane)
        if target.lower() == "break":
            pane.link_to(None)
            return
        other = pane.editor.get_pane(target)
        if other is None:
            raise CommandError(f"Invalid pane index '{target}' specified.")
        if other is pane:
            pane.link_to(None)
        else:
            pane.link_to(other)


class Close(CommandDefinition):
    name = "close"
    template = "{...panes?:string}"
    help = "Close panes: close | close 1 2 | close this | close all | close all but 0"

    def run(self, pane, panes=None) -> None:
        pane = _require_pane(pane)
        editor = pane.editor
        names: List[str] = [str(p) for p in (panes or [])]

        if "this" in names:
            names.append(str(pane.index))

        if not names:
            doomed = [pane]
        elif len(names) >= 2 and f"{names[0]} {names[1]}".lower() == "all but":
            keep = set(names[2:])
            keep_focus = not keep
            doomed = [p for p in editor.panes
                      if not (keep_focus and p is pane) and str(p.index) not in keep]
        elif names[0].lower() == "all":
            # close the context pane last
            doomed = [p for p in editor.panes if p is not pane] + [pane]
        else:
            doomed = [p for p in editor.panes if str(p.index) in names]

        for p in doomed:
            editor.remove_pane(p)
        if not editor.panes:
            editor.add_pane()

    def reassign_context(self, pane):
        return pane.editor.focus_pane() if pane is not None else None
