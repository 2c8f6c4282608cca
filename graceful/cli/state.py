from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

PANE_TYPES = ("input", "preview")


@dataclass(eq=False)
class Pane:
    editor: "EditorState" = field(repr=False)
    kind: str = "input"
    direction: str = ""  # split direction this pane was created with
    text: str = ""
    filepath: Optional[str] = None
    row: int = 1          # 1-based
    column: int = 0
    linked_to: Optional["Pane"] = field(default=None, repr=False)

    @property
    def index(self) -> int:
        return self.editor.panes.index(self)

    @property
    def title(self) -> str:
        if self.filepath:
            return self.filepath.replace("\\", "/").rsplit("/", 1)[-1]
        return "untitled"

    @property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    def link_to(self, other: Optional["Pane"]) -> bool:
        if other is self:
            return False
        self.linked_to = other
        return True


@dataclass(eq=False)
class EditorState:
    panes: List[Pane] = field(default_factory=list)
    focus_index: int = 0

    # set by the 'quit' command; the shell exits after the current batch
    quit_requested: bool = False

    def __post_init__(self) -> None:
        if not self.panes:
            self.panes.append(Pane(editor=self))

    # === panes ===
    def focus_pane(self) -> Optional[Pane]:
        if not self.panes:
            return None
        self.focus_index = min(max(self.focus_index, 0), len(self.panes) - 1)
        return self.panes[self.focus_index]

    def focus(self, pane: Pane) -> Pane:
        self.focus_index = self.panes.index(pane)
        return pane

    def get_pane(self, index: Union[int, float, str, None]) -> Optional[Pane]:
        try:
            idx = int(float(index))
        except (TypeError, ValueError):
            return None
        if 0 <= idx < len(self.panes):
            return self.panes[idx]
        return None

    def add_pane(self, kind: str = "input", after: Optional[Pane] = None) -> Pane:
        pane = Pane(editor=self, kind=kind if kind in PANE_TYPES else "input")
        pos = self.panes.index(after) + 1 if after in self.panes else len(self.panes)
        self.panes.insert(pos, pane)
        return pane

    def remove_pane(self, pane: Pane) -> bool:
        if pane not in self.panes:
            return False
        focused = self.focus_pane()
        self.panes.remove(pane)
        for other in self.panes:
            if other.linked_to is pane:
                other.linked_to = None
        if focused is not pane and focused in self.panes:
            self.focus_index = self.panes.index(focused)
        return True

    def prompt_prefix(self) -> str:
        pane = self.focus_pane()
        if pane is None:
            return "(no panes) "
        return f"({pane.index}:{pane.title}) "
