"""Process menu: inspect or signal the current pane's foreground process.

PUBLIC API:
  - PROCESS_ACTIONS: Sub-menu ids in display order
  - SIGNALS: Action id to signal mapping
  - load_process_menu: Static action list
  - pane_process: Foreground process of the current pane
  - process_handlers: Action handlers keyed by registry id
"""

import os
import signal
from typing import Dict, List, Optional

from .. import tmux
from ..procs import ProcessNode, describe_chain, foreground_process, process_chain
from .common import items_from_ids, run_action, tracer_of
from .types import Action, Cmd, Context, Item

PROCESS_ACTIONS = ["display", "tree", "terminate", "kill", "interrupt", "continue", "stop", "quit", "hangup"]

SIGNALS = {
    "terminate": signal.SIGTERM,
    "kill": signal.SIGKILL,
    "continue": signal.SIGCONT,
    "stop": signal.SIGSTOP,
    "quit": signal.SIGQUIT,
    "hangup": signal.SIGHUP,
}


def load_process_menu(ctx: Context) -> List[Item]:
    return items_from_ids(PROCESS_ACTIONS)


def _current_pane(ctx: Context):
    target = ctx.current_pane_id.strip()
    if not target:
        raise ValueError("no current pane")
    for pane in ctx.panes:
        if pane.id == target:
            return pane
    raise ValueError(f"pane {target} not found")


def pane_process(ctx: Context) -> ProcessNode:
    """Deepest process under the current pane's shell.

    Raises:
        ValueError: No current pane, or no readable process for it.
    """
    pane = _current_pane(ctx)
    if pane.pid <= 0:
        raise ValueError(f"no process id for pane {pane.id}")
    node: Optional[ProcessNode] = foreground_process(pane.pid)
    if node is None:
        raise ValueError(f"no process found for pane {pane.id}")
    return node


def _display_action(ctx: Context, item: Item) -> Cmd:
    def work() -> str:
        node = pane_process(ctx)
        return f"{node.name} (pid {node.pid}, state {node.state}): {node.cmdline}"

    return lambda: run_action(work)


def _tree_action(ctx: Context, item: Item) -> Cmd:
    def work() -> str:
        pane = _current_pane(ctx)
        chain = process_chain(pane.pid)
        if not chain:
            raise ValueError(f"no process found for pane {pane.id}")
        return describe_chain(chain)

    return lambda: run_action(work)


def _interrupt_action(ctx: Context, item: Item) -> Cmd:
    def work() -> str:
        pane = _current_pane(ctx)
        tracer_of(ctx).pane.signal(pane.pid, "SIGINT")
        tmux.send_keys(ctx.socket, pane.id, "C-c")
        return f"Interrupted {pane.id}"

    return lambda: run_action(work)


def _signal_action(sig: signal.Signals) -> Action:
    def action(ctx: Context, item: Item) -> Cmd:
        def work() -> str:
            node = pane_process(ctx)
            tracer_of(ctx).pane.signal(node.pid, sig.name)
            os.kill(node.pid, sig)
            return f"Sent {sig.name} to {node.name} ({node.pid})"

        return lambda: run_action(work)

    return action


def process_handlers() -> Dict[str, Action]:
    handlers: Dict[str, Action] = {
        "process:display": _display_action,
        "process:tree": _tree_action,
        "process:interrupt": _interrupt_action,
    }
    for name, sig in SIGNALS.items():
        handlers[f"process:{name}"] = _signal_action(sig)
    return handlers
