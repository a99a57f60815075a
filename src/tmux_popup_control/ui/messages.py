"""Messages flowing through the popup model.

Key names follow textual's naming ("escape", "ctrl+u", "pageup", ...);
printable keys also carry their text.

PUBLIC API:
  - KeyMsg: Key press
  - ResizeMsg: Terminal size change
  - MouseScrollMsg: Mouse wheel over the view
  - CategoryLoadedMsg: Loader finished for a pending level
  - BackendEventMsg: One event from the backend watcher
  - BackendDoneMsg: Watcher stream closed
  - PreviewLoadedMsg: Preview capture finished
  - QuitMsg: Ask the runtime to exit
  - quit_cmd: Command producing QuitMsg
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..menu.types import Item


@dataclass
class KeyMsg:
    key: str
    text: str = ""

    @property
    def printable(self) -> bool:
        return bool(self.text) and self.text.isprintable()


@dataclass
class ResizeMsg:
    width: int
    height: int


@dataclass
class MouseScrollMsg:
    delta: int


@dataclass
class CategoryLoadedMsg:
    id: str
    title: str
    items: List[Item] = field(default_factory=list)
    err: Optional[BaseException] = None


@dataclass
class BackendEventMsg:
    event: Any


@dataclass
class BackendDoneMsg:
    pass


@dataclass
class PreviewLoadedMsg:
    level_id: str
    target: str
    seq: int
    lines: List[str] = field(default_factory=list)
    err: Optional[BaseException] = None
    kind: str = ""
    raw_ansi: bool = False


@dataclass
class QuitMsg:
    info: str = ""


def quit_cmd() -> QuitMsg:
    return QuitMsg()
