"""Plain records shared by the registry, the menus and the UI.

PUBLIC API:
  - Item: One selectable menu row
  - Context: Snapshot data handed to loaders and actions
  - ActionResult: Terminal outcome of an action
  - SessionPrompt / WindowPrompt / PanePrompt: Open a text-entry form
  - WindowSwapPrompt / PaneSwapPrompt: Open the second step of a swap
  - CommandPromptMsg: Close and open tmux's own command prompt
  - Loader / Action / Cmd: Callable shapes used by the registry
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, NamedTuple, Optional

from ..tmux.types import Pane, Session, Window


class Item(NamedTuple):
    """Menu row. `id` is the payload, `label` what is rendered."""

    id: str
    label: str


@dataclass
class Context:
    """Everything a loader or action may need, assembled per call."""

    socket: Optional[str] = None
    client_id: str = ""
    sessions: List[Session] = field(default_factory=list)
    current: str = ""
    include_current: bool = True
    windows: List[Window] = field(default_factory=list)
    current_window_id: str = ""
    current_window_label: str = ""
    current_window_session: str = ""
    window_include_current: bool = True
    panes: List[Pane] = field(default_factory=list)
    current_pane_id: str = ""
    current_pane_label: str = ""
    pane_include_current: bool = True
    tracer: Any = None


@dataclass
class ActionResult:
    info: str = ""
    err: Optional[BaseException] = None


@dataclass
class SessionPrompt:
    context: Context
    action: str = "session:new"
    target: str = ""
    initial: str = ""


@dataclass
class WindowPrompt:
    context: Context
    target: str = ""
    initial: str = ""


@dataclass
class PanePrompt:
    context: Context
    target: str = ""
    initial: str = ""


@dataclass
class WindowSwapPrompt:
    context: Context
    first: Item


@dataclass
class PaneSwapPrompt:
    context: Context
    first: Item


@dataclass
class CommandPromptMsg:
    command: str
    label: str = ""


Cmd = Callable[[], Any]
Loader = Callable[[Context], List[Item]]
Action = Callable[[Context, Item], Optional[Cmd]]
