"""Named trace events.

Every trace entry the popup writes goes through one of these emitters so
event names and payload keys stay in one place.

PUBLIC API:
  - Tracer: Bundle of per-area emitters bound to one TraceLog
"""

from typing import Any, Dict, List, Optional

from .tracing import TraceLog

REASON_ESCAPE = "escape"
REASON_EMPTY = "empty"


class _Emitter:
    def __init__(self, log: Optional[TraceLog]):
        self._log = log

    def _emit(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        if self._log is not None:
            self._log.emit(event, payload)


class AppEvents(_Emitter):
    def start(self, payload: Dict[str, Any]) -> None:
        self._emit("app.start", payload)


class UIEvents(_Emitter):
    def menu_enter(self, level: str, item: str, label: str, filter_text: str) -> None:
        self._emit("menu.enter", {"level": level, "item": item, "label": label, "filter": filter_text})

    def menu_cursor(self, level: str, cursor: int) -> None:
        self._emit("menu.cursor", {"level": level, "cursor": cursor})


class FilterEvents(_Emitter):
    def append(self, level: str, filter_text: str) -> None:
        self._emit("filter.append", {"level": level, "filter": filter_text})

    def backspace(self, level: str, filter_text: str) -> None:
        self._emit("filter.backspace", {"level": level, "filter": filter_text})

    def word_backspace(self, level: str, filter_text: str) -> None:
        self._emit("filter.word-backspace", {"level": level, "filter": filter_text})

    def cleared(self, level: str) -> None:
        self._emit("filter.clear", {"level": level})

    def cursor(self, level: str, pos: int) -> None:
        self._emit("filter.cursor", {"level": level, "cursor": pos})

    def cursor_word(self, level: str, pos: int) -> None:
        self._emit("filter.cursor-word", {"level": level, "cursor": pos})


class CommandEvents(_Emitter):
    def queue(self, id: str, label: str) -> None:
        self._emit("command.queue", {"id": id, "label": label})

    def skip(self, id: str, label: str) -> None:
        self._emit("command.skip", {"id": id, "label": label})

    def noop(self, id: str, label: str) -> None:
        self._emit("command.noop", {"id": id, "label": label})

    def result(self, id: str, label: str, msg_type: str) -> None:
        self._emit("command.result", {"id": id, "label": label, "msg": msg_type})


class ActionEvents(_Emitter):
    def success(self, info: str) -> None:
        self._emit("action.success", {"info": info})

    def error(self, err: Any) -> None:
        if err is None:
            return
        self._emit("action.error", {"error": str(err)})


class SessionEvents(_Emitter):
    def switch(self, target: str) -> None:
        self._emit("session.switch", {"target": target})

    def new_prompt(self, existing: int) -> None:
        self._emit("session.new.prompt", {"existing": existing})

    def rename_prompt(self, target: str) -> None:
        self._emit("session.rename.prompt", {"target": target})

    def detach(self, target: str) -> None:
        self._emit("session.detach", {"target": target})

    def kill(self, target: str) -> None:
        self._emit("session.kill", {"target": target})

    def create(self, name: str) -> None:
        self._emit("session.new.create", {"name": name})

    def rename(self, target: str, name: str) -> None:
        self._emit("session.rename", {"target": target, "name": name})

    def cancel_rename(self, target: str, reason: str) -> None:
        self._emit("session.rename.cancel", {"target": target, "reason": reason})

    def cancel_new(self, reason: str) -> None:
        self._emit("session.new.cancel", {"reason": reason})

    def submit_rename(self, target: str, name: str) -> None:
        self._emit("session.rename.submit", {"target": target, "name": name})

    def submit_new(self, name: str) -> None:
        self._emit("session.new.submit", {"name": name})


class WindowEvents(_Emitter):
    def switch(self, target: str) -> None:
        self._emit("window.switch", {"target": target})

    def kill(self, targets: List[str]) -> None:
        self._emit("window.kill", {"targets": targets})

    def rename_prompt(self, target: str) -> None:
        self._emit("window.rename.prompt", {"target": target})

    def rename(self, target: str, name: str) -> None:
        self._emit("window.rename", {"target": target, "name": name})

    def link(self, source: str, session: str) -> None:
        self._emit("window.link", {"source": source, "session": session})

    def move(self, source: str, session: str) -> None:
        self._emit("window.move", {"source": source, "session": session})

    def swap_select(self, first: str) -> None:
        self._emit("window.swap.select", {"first": first})

    def swap(self, first: str, second: str) -> None:
        self._emit("window.swap", {"first": first, "second": second})

    def cancel_rename(self, target: str, reason: str) -> None:
        self._emit("window.rename.cancel", {"target": target, "reason": reason})

    def submit_rename(self, target: str, name: str) -> None:
        self._emit("window.rename.submit", {"target": target, "name": name})


class PaneEvents(_Emitter):
    def switch(self, target: str) -> None:
        self._emit("pane.switch", {"target": target})

    def kill(self, targets: List[str]) -> None:
        self._emit("pane.kill", {"targets": targets})

    def join(self, sources: List[str], target: str) -> None:
        self._emit("pane.join", {"sources": sources, "target": target})

    def break_(self, target: str, destination: str) -> None:
        self._emit("pane.break", {"target": target, "destination": destination})

    def swap_select(self, first: str) -> None:
        self._emit("pane.swap.select", {"first": first})

    def swap(self, first: str, second: str) -> None:
        self._emit("pane.swap", {"first": first, "second": second})

    def layout(self, layout: str) -> None:
        self._emit("pane.layout", {"layout": layout})

    def resize(self, direction: str, amount: int) -> None:
        self._emit("pane.resize", {"direction": direction, "amount": amount})

    def rename_prompt(self, target: str) -> None:
        self._emit("pane.rename.prompt", {"target": target})

    def rename(self, target: str, title: str) -> None:
        self._emit("pane.rename", {"target": target, "title": title})

    def cancel_rename(self, target: str, reason: str) -> None:
        self._emit("pane.rename.cancel", {"target": target, "reason": reason})

    def submit_rename(self, target: str, title: str) -> None:
        self._emit("pane.rename.submit", {"target": target, "title": title})

    def signal(self, pid: int, signal_name: str) -> None:
        self._emit("pane.process.signal", {"pid": pid, "signal": signal_name})


class Tracer:
    """Per-area trace emitters sharing one TraceLog.

    Args:
        log: Destination log, or None to drop every event.
    """

    def __init__(self, log: Optional[TraceLog] = None):
        self.log = log
        self.app = AppEvents(log)
        self.ui = UIEvents(log)
        self.filter = FilterEvents(log)
        self.command = CommandEvents(log)
        self.action = ActionEvents(log)
        self.session = SessionEvents(log)
        self.window = WindowEvents(log)
        self.pane = PaneEvents(log)

    def error(self, err: BaseException) -> None:
        if self.log is not None:
            self.log.error(err)
