"""Helpers shared by the menu modules.

PUBLIC API:
  - pretty_label: "even-horizontal" -> "even horizontal"
  - items_from_ids: Items labelled with pretty_label
  - split_ids: Split a combined multi-select id
  - tracer_of: The context's tracer, or a silent one
  - fail: Command that reports an error
  - run_action: Run a tmux call, converting failures into ActionResult
"""

import logging
import re
from typing import Callable, Iterable, List

from ..events import Tracer
from ..tmux import TmuxError
from .types import ActionResult, Cmd, Context, Item

logger = logging.getLogger(__name__)

_SILENT = Tracer(None)


def pretty_label(id: str) -> str:
    """Split on '-', '_' and spaces, lowercase all but each part's first letter."""
    parts = [part for part in re.split(r"[-_ ]", id) if part]
    return " ".join(part[0] + part[1:].lower() for part in parts)


def items_from_ids(ids: Iterable[str]) -> List[Item]:
    return [Item(id, pretty_label(id)) for id in ids]


def split_ids(raw: str, separators: str = "\n,") -> List[str]:
    """Split a combined id on any of `separators`, dropping blanks and duplicates."""
    raw = raw.strip()
    if not raw:
        return []
    pattern = "[" + re.escape(separators) + "]"
    ids = []
    for part in re.split(pattern, raw):
        part = part.strip()
        if part and part not in ids:
            ids.append(part)
    return ids or [raw]


def tracer_of(ctx: Context) -> Tracer:
    return ctx.tracer if ctx.tracer is not None else _SILENT


def fail(message: str) -> Cmd:
    err = ValueError(message)
    return lambda: ActionResult(err=err)


def run_action(work: Callable[[], str]) -> ActionResult:
    """Run `work` and wrap its info string, or the error it raised."""
    try:
        return ActionResult(info=work())
    except (TmuxError, ValueError, OSError) as e:
        logger.warning(f"Action failed: {e}")
        return ActionResult(err=e)
