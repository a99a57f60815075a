"""Action bus: run a menu action handler and trace what it produced.

PUBLIC API:
  - Request: Action id, label, handler and the chosen item
  - ActionBus: Turns a Request into a command for the runtime
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..events import Tracer
from ..menu.types import Action, Cmd, Context, Item

logger = logging.getLogger(__name__)


@dataclass
class Request:
    id: str
    label: str
    handler: Optional[Action]
    item: Item


class ActionBus:
    def __init__(self, tracer: Optional[Tracer] = None):
        self.tracer = tracer or Tracer(None)

    def execute(self, ctx: Context, req: Request) -> Cmd:
        """Queue `req` and return the command that runs it.

        The command yields the handler's result message, or None when
        there is no handler or the handler has nothing to do.
        """
        self.tracer.command.queue(req.id, req.label)

        def run() -> Any:
            if req.handler is None:
                self.tracer.command.skip(req.id, req.label)
                return None
            cmd = req.handler(ctx, req.item)
            if cmd is None:
                self.tracer.command.noop(req.id, req.label)
                return None
            msg = cmd()
            self.tracer.command.result(req.id, req.label, type(msg).__name__)
            logger.debug(f"Action {req.id} produced {type(msg).__name__}")
            return msg

        return run
