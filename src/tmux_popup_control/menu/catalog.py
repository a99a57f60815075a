"""The popup's menu tables and the registry built from them.

PUBLIC API:
  - root_items: Top-level entries
  - category_loaders: Loaders for top-level entries
  - action_loaders: Loaders for nested menus
  - action_handlers: Terminal actions keyed by node id
  - MULTI_SELECT: Nodes that allow tab-marking several rows
  - default_registry: Registry over all of the above
"""

from typing import Dict, List

from . import clipboard, command, keybinding, pane, process, session, window
from .common import pretty_label
from .registry import Registry, build_registry
from .types import Action, Item, Loader

ROOT_IDS = ["process", "clipboard", "keybinding", "command", "pane", "window", "session"]

MULTI_SELECT = ["window:kill", "pane:join", "pane:kill"]


def root_items() -> List[Item]:
    return [Item(id, pretty_label(id)) for id in ROOT_IDS]


def category_loaders() -> Dict[str, Loader]:
    return {
        "process": process.load_process_menu,
        "clipboard": clipboard.load_clipboard_menu,
        "keybinding": keybinding.load_keybinding_menu,
        "command": command.load_command_menu,
        "pane": pane.load_pane_menu,
        "window": window.load_window_menu,
        "session": session.load_session_menu,
    }


def action_loaders() -> Dict[str, Loader]:
    loaders: Dict[str, Loader] = {
        "session:switch": session.load_session_switch,
        "session:rename": session.load_session_rename,
        "session:detach": session.load_session_detach,
        "session:kill": session.load_session_kill,
        "window:switch": window.load_window_switch,
        "window:link": window.load_window_link,
        "window:move": window.load_window_move,
        "window:swap": window.load_window_swap,
        "window:rename": window.load_window_rename,
        "window:kill": window.load_window_kill,
        "pane:switch": pane.load_pane_switch,
        "pane:break": pane.load_pane_break,
        "pane:join": pane.load_pane_join,
        "pane:swap": pane.load_pane_swap,
        "pane:kill": pane.load_pane_kill,
        "pane:rename": pane.load_pane_rename,
        "pane:layout": pane.load_pane_layout,
        "pane:resize": pane.load_pane_resize,
        "clipboard:buffer": clipboard.load_buffer_menu,
    }
    for direction in pane.RESIZE_DIRECTIONS:
        loaders[f"pane:resize:{direction}"] = pane.resize_loader(direction)
    return loaders


def action_handlers() -> Dict[str, Action]:
    handlers: Dict[str, Action] = {
        "session:new": session.session_new_action,
        "session:switch": session.session_switch_action,
        "session:rename": session.session_rename_action,
        "session:detach": session.session_detach_action,
        "session:kill": session.session_kill_action,
        "window:switch": window.window_switch_action,
        "window:link": window.window_link_action,
        "window:move": window.window_move_action,
        "window:swap": window.window_swap_action,
        "window:rename": window.window_rename_action,
        "window:kill": window.window_kill_action,
        "keybinding": keybinding.keybinding_action,
        "command": command.command_action,
        "pane:switch": pane.pane_switch_action,
        "pane:break": pane.pane_break_action,
        "pane:join": pane.pane_join_action,
        "pane:swap": pane.pane_swap_action,
        "pane:kill": pane.pane_kill_action,
        "pane:rename": pane.pane_rename_action,
        "pane:layout": pane.pane_layout_action,
        "clipboard:buffer": clipboard.buffer_paste_action,
    }
    for direction in pane.RESIZE_DIRECTIONS:
        handlers[f"pane:resize:{direction}"] = pane.resize_action(direction)
    handlers.update(process.process_handlers())
    return handlers


def default_registry() -> Registry:
    return build_registry(root_items(), category_loaders(), action_loaders(), action_handlers(), MULTI_SELECT)
