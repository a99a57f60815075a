"""Menu registry and the session, window, pane and tool menus.

PUBLIC API:
  - Registry / Node: Menu tree with loaders and actions
  - default_registry: The popup's full menu tree
  - root_items: Top-level entries
  - Item / Context: Rows and the snapshot data menus work from
  - ActionResult and the prompt messages actions may return
"""

from .types import (
    ActionResult,
    CommandPromptMsg,
    Context,
    Item,
    PanePrompt,
    PaneSwapPrompt,
    SessionPrompt,
    WindowPrompt,
    WindowSwapPrompt,
)
from .registry import Node, Registry
from .catalog import MULTI_SELECT, ROOT_IDS, default_registry, root_items

__all__ = [
    "Registry",
    "Node",
    "default_registry",
    "root_items",
    "ROOT_IDS",
    "MULTI_SELECT",
    "Item",
    "Context",
    "ActionResult",
    "SessionPrompt",
    "WindowPrompt",
    "PanePrompt",
    "WindowSwapPrompt",
    "PaneSwapPrompt",
    "CommandPromptMsg",
]
