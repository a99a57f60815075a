"""Session menu: switch, rename, detach, kill and new.

PUBLIC API:
  - SESSION_ACTIONS: Sub-menu ids in display order
  - session_switch_items / session_rename_items / session_items: Row builders
  - load_* / *_action: Loaders and action handlers for the registry
  - session_command: Command run when a session form is submitted
"""

from typing import List, Optional

from .. import tmux
from ..table import LEFT, RIGHT, format_table
from ..tmux.types import Session
from .common import fail, items_from_ids, run_action, tracer_of
from .types import Cmd, Context, Item, SessionPrompt

SESSION_ACTIONS = ["kill", "detach", "rename", "new", "switch"]


def session_status(session: Session) -> str:
    if not session.attached:
        return ""
    if len(session.clients) > 1:
        return f"attached ({len(session.clients)})"
    return "attached"


def session_table_items(sessions: List[Session]) -> List[Item]:
    """Aligned rows: name, window count, attach status, current marker."""
    rows = [
        [s.name, f"{s.windows} windows", session_status(s), "current" if s.current else ""]
        for s in sessions
    ]
    labels = format_table(rows, [LEFT, RIGHT, LEFT, LEFT])
    return [Item(s.name, label) for s, label in zip(sessions, labels)]


def session_switch_items(ctx: Context) -> List[Item]:
    visible = [s for s in ctx.sessions if ctx.include_current or not s.current]
    return session_table_items(visible)


def session_rename_items(sessions: List[Session]) -> List[Item]:
    """Rename rows, with the current session moved to the end."""
    ordered = [s for s in sessions if not s.current] + [s for s in sessions if s.current]
    return session_table_items(ordered)


def session_items(sessions: List[Session]) -> List[Item]:
    return [Item(s.name, s.label) for s in sessions]


def _session_label(ctx: Context, name: str, fallback: str) -> str:
    for session in ctx.sessions:
        if session.name == name and session.label:
            return session.label
    return fallback.strip() or name


def load_session_menu(ctx: Context) -> List[Item]:
    return items_from_ids(SESSION_ACTIONS)


def load_session_switch(ctx: Context) -> List[Item]:
    return session_switch_items(ctx)


def load_session_rename(ctx: Context) -> List[Item]:
    return session_rename_items(ctx.sessions)


def load_session_detach(ctx: Context) -> List[Item]:
    return session_items(ctx.sessions)


def load_session_kill(ctx: Context) -> List[Item]:
    return session_items(ctx.sessions)


def session_new_action(ctx: Context, item: Item) -> Cmd:
    def prompt():
        tracer_of(ctx).session.new_prompt(len(ctx.sessions))
        return SessionPrompt(context=ctx, action="session:new")

    return prompt


def session_switch_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid session target")
    label = _session_label(ctx, target, item.label)

    def work() -> str:
        tracer_of(ctx).session.switch(target)
        tmux.switch_client(ctx.socket, ctx.client_id, target)
        return f"Switched to {label}"

    return lambda: run_action(work)


def session_rename_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid session target")

    def prompt():
        tracer_of(ctx).session.rename_prompt(target)
        return SessionPrompt(context=ctx, action="session:rename", target=target, initial=target)

    return prompt


def session_detach_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid session target")

    def work() -> str:
        tracer_of(ctx).session.detach(target)
        tmux.detach_sessions(ctx.socket, [target])
        return f"Detached {item.label.strip()}"

    return lambda: run_action(work)


def session_kill_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid session target")

    def work() -> str:
        tracer_of(ctx).session.kill(target)
        tmux.kill_sessions(ctx.socket, [target])
        return f"Killed {item.label.strip()}"

    return lambda: run_action(work)


def session_create_command(ctx: Context, name: str) -> Cmd:
    def work() -> str:
        tracer_of(ctx).session.create(name)
        tmux.new_session(ctx.socket, name)
        return f"Created session {name}"

    return lambda: run_action(work)


def session_rename_command(ctx: Context, target: str, name: str) -> Cmd:
    def work() -> str:
        if not target:
            raise ValueError("session target required")
        if not name:
            raise ValueError("session name required")
        tracer_of(ctx).session.rename(target, name)
        tmux.rename_session(ctx.socket, target, name)
        return f"Renamed {target} to {name}"

    return lambda: run_action(work)


def session_command(action_id: str, ctx: Context, target: str, name: str) -> Optional[Cmd]:
    if action_id == "session:rename":
        return session_rename_command(ctx, target, name)
    return session_create_command(ctx, name)
