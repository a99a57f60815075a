"""Synchronous driver for the popup model.

Runs every command inline and feeds the resulting messages back until
nothing is left, so a whole interaction can be replayed without a
terminal.

PUBLIC API:
  - Harness: Send messages and keys to a Model and observe the outcome
"""

import logging
from collections import deque
from typing import Any, Deque, List

from ..menu.types import Cmd
from .messages import KeyMsg, QuitMsg
from .model import Model

logger = logging.getLogger(__name__)

__all__ = ["Harness"]

_KEY_TEXT = {"space": " "}


class Harness:
    """Drive a Model without a runtime.

    Args:
        model: The model under test. Its backend, if any, is not polled.
        max_steps: Upper bound on messages processed per send().
    """

    def __init__(self, model: Model, max_steps: int = 1000):
        self.model = model
        self.max_steps = max_steps
        self.quit = False
        self.info = ""
        self.messages: List[Any] = []

    def send(self, msg: Any) -> "Harness":
        queue: Deque[Any] = deque([msg])
        steps = 0
        while queue:
            steps += 1
            if steps > self.max_steps:
                raise RuntimeError(f"Model did not settle after {self.max_steps} messages")
            current = queue.popleft()
            self.messages.append(current)
            if isinstance(current, QuitMsg):
                self.quit = True
                self.info = current.info
                continue
            for result in self.run(self.model.update(current)):
                queue.append(result)
        return self

    def run(self, cmds: List[Cmd]) -> List[Any]:
        results = []
        for cmd in cmds:
            result = cmd()
            if result is not None:
                results.append(result)
        return results

    def press(self, *keys: str) -> "Harness":
        for key in keys:
            self.send(KeyMsg(key, _KEY_TEXT.get(key, key if len(key) == 1 else "")))
        return self

    def type(self, text: str) -> "Harness":
        for ch in text:
            self.send(KeyMsg("space", " ") if ch == " " else KeyMsg(ch, ch))
        return self
