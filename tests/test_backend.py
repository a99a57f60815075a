"""Snapshot stores, the dispatcher and the background watcher."""

import threading
import time

from builders import pane, session, window
from tmux_popup_control.backend import Dispatcher, Event, Kind, Throttle, Watcher
from tmux_popup_control.state import PaneStore, SessionStore, WindowStore
from tmux_popup_control.tmux import TmuxCommandError
from tmux_popup_control.tmux.types import PaneSnapshot, SessionSnapshot, WindowSnapshot


def _dispatcher():
    return Dispatcher(SessionStore(), WindowStore(), PaneStore())


class TestStores:
    def test_entries_are_copies(self):
        store = SessionStore()
        store.set_entries([session("dev")])
        entries = store.entries()
        entries[0].name = "changed"
        assert store.entries()[0].name == "dev"

    def test_client_id_kept_when_snapshot_has_none(self):
        store = SessionStore()
        store.apply(SessionSnapshot(sessions=[], current="dev", client_id="/dev/pts/1"))
        store.apply(SessionSnapshot(sessions=[], current="dev"))
        assert store.client_id == "/dev/pts/1"

    def test_window_store_pointers(self):
        store = WindowStore()
        store.apply(WindowSnapshot(windows=[window("dev", 1)], current_id="dev:1", current_label="x", current_session="dev"))
        assert (store.current_id, store.current_session) == ("dev:1", "dev")
        assert len(store.entries()) == 1


class TestDispatcher:
    def test_routes_by_kind(self):
        dispatcher = _dispatcher()
        result = dispatcher.handle(Event(Kind.PANES, data=PaneSnapshot(panes=[pane("s:0.0")], current_id="s:0.0")))
        assert result.panes_updated and not result.sessions_updated
        assert result.any
        assert dispatcher.panes.current_id == "s:0.0"

    def test_error_event_changes_nothing(self):
        dispatcher = _dispatcher()
        dispatcher.sessions.set_entries([session("dev")])
        result = dispatcher.handle(Event(Kind.SESSIONS, err=TmuxCommandError(["list-sessions"], 1, "boom")))
        assert not result.any
        assert [s.name for s in dispatcher.sessions.entries()] == ["dev"]

    def test_mismatched_payload_ignored(self):
        result = _dispatcher().handle(Event(Kind.WINDOWS, data=SessionSnapshot()))
        assert not result.any


class TestWatcher:
    def _drain(self, watcher, count, timeout=2.0):
        events = []
        deadline = time.monotonic() + timeout
        while len(events) < count and time.monotonic() < deadline:
            event = watcher.next_event(timeout=0.2)
            if event is not None:
                events.append(event)
        return events

    def test_polls_each_kind(self):
        fetchers = {
            Kind.SESSIONS: lambda socket: SessionSnapshot(current="dev"),
            Kind.WINDOWS: lambda socket: WindowSnapshot(),
        }
        watcher = Watcher("/tmp/sock", interval=10, fetchers=fetchers, throttle_interval=0).start()
        try:
            events = self._drain(watcher, 2)
        finally:
            watcher.stop()
        assert {event.kind for event in events} == {Kind.SESSIONS, Kind.WINDOWS}
        assert all(event.err is None for event in events)

    def test_fetch_error_becomes_event(self):
        def failing(socket):
            raise TmuxCommandError(["list-panes"], 1, "no server running")

        watcher = Watcher(None, interval=10, fetchers={Kind.PANES: failing}, throttle_interval=0).start()
        try:
            [event] = self._drain(watcher, 1)
        finally:
            watcher.stop()
        assert event.kind == Kind.PANES
        assert str(event.err) == "list-panes: no server running"

    def test_socket_passed_to_fetchers(self):
        seen = []
        watcher = Watcher("/tmp/sock", interval=10, fetchers={Kind.SESSIONS: seen.append}, throttle_interval=0)
        watcher.start()
        try:
            self._drain(watcher, 1)
        finally:
            watcher.stop()
        assert seen[0] == "/tmp/sock"

    def test_stream_closes_after_stop(self):
        watcher = Watcher(None, interval=10, fetchers={Kind.SESSIONS: lambda socket: None}, throttle_interval=0)
        watcher.start()
        self._drain(watcher, 1)
        watcher.stop()
        assert watcher.stopped
        deadline = time.monotonic() + 2.0
        while watcher.next_event(timeout=0.2) is not None and time.monotonic() < deadline:
            pass
        assert watcher.next_event(timeout=0.2) is None

    def test_stop_is_idempotent(self):
        watcher = Watcher(None, interval=10, fetchers={}, throttle_interval=0).start()
        watcher.stop()
        watcher.stop()
        assert watcher.stopped

    def test_undecodable_output_keeps_polling(self):
        calls = []

        def flaky(socket):
            calls.append(socket)
            if len(calls) == 1:
                raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
            return SessionSnapshot(current="dev")

        watcher = Watcher(None, interval=0.05, fetchers={Kind.SESSIONS: flaky}, throttle_interval=0).start()
        try:
            first, second = self._drain(watcher, 2)
        finally:
            watcher.stop()
        assert isinstance(first.err, UnicodeDecodeError)
        assert second.err is None
        assert second.data.current == "dev"

    def test_stop_interrupts_throttle(self):
        watcher = Watcher(None, interval=0, fetchers={Kind.SESSIONS: lambda socket: None}, throttle_interval=30)
        watcher.start()
        self._drain(watcher, 1)
        start = time.monotonic()
        watcher.stop(timeout=5)
        assert time.monotonic() - start < 2


class TestThrottle:
    def test_disabled(self):
        throttle = Throttle(0)
        start = time.monotonic()
        for _ in range(50):
            throttle.wait()
        assert time.monotonic() - start < 0.5

    def test_spaces_calls(self):
        throttle = Throttle(0.05)
        stamps = []
        lock = threading.Lock()

        def call():
            throttle.wait()
            with lock:
                stamps.append(time.monotonic())

        threads = [threading.Thread(target=call) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        stamps.sort()
        gaps = [b - a for a, b in zip(stamps, stamps[1:])]
        assert all(gap >= 0.04 for gap in gaps)

    def test_cancelled_wait_returns_early(self):
        throttle = Throttle(30)
        cancel = threading.Event()
        assert throttle.wait(cancel)
        timer = threading.Timer(0.05, cancel.set)
        timer.start()
        start = time.monotonic()
        assert not throttle.wait(cancel)
        assert time.monotonic() - start < 2
        timer.join()
