"""tmux adapter: parsing, error mapping, transports and preview capture."""

import io
from types import SimpleNamespace

import pytest

from tmux_popup_control.tmux import (
    TmuxCommandError,
    TmuxError,
    check_tmux,
    fetch_panes,
    fetch_sessions,
    fetch_windows,
    install_transport,
    pane_preview,
    resolve_socket_path,
    run_tmux,
)
from tmux_popup_control.tmux import core
from tmux_popup_control.tmux.commands import command_prompt
from tmux_popup_control.tmux.control import ControlClient, quote_argument
from tmux_popup_control.tmux.core import base_args, split_format_line


class TestCore:
    def test_base_args(self):
        assert base_args(None) == []
        assert base_args("  ") == []
        assert base_args("/tmp/tmux-1000/work") == ["-S", "/tmp/tmux-1000/work"]

    def test_check_tmux_raises_with_stderr(self, fake_tmux):
        fake_tmux.respond("kill-pane", code=1, stderr="can't find pane: %9\n")
        with pytest.raises(TmuxCommandError) as exc:
            check_tmux(["kill-pane", "-t", "%9"])
        assert str(exc.value) == "kill-pane: can't find pane: %9"
        assert exc.value.returncode == 1

    def test_check_tmux_without_stderr(self, fake_tmux):
        fake_tmux.respond("list-keys", code=2)
        with pytest.raises(TmuxCommandError, match="list-keys: exit status 2"):
            check_tmux(["list-keys"])

    def test_split_format_line(self):
        assert split_format_line("a\t b \tc\td", 3) == ["a", "b", "c\td"]
        assert split_format_line("a\tb", 3) is None

    def test_socket_resolution(self, monkeypatch):
        for name in ("TMUX_POPUP_CONTROL_SOCKET", "TMUX_POPUP_SOCKET", "TMUX"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("TMUX_TMPDIR", "/run/user/1000")
        assert resolve_socket_path("/tmp/flag") == "/tmp/flag"
        assert resolve_socket_path().startswith("/run/user/1000/tmux-")
        monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,4242,0")
        assert resolve_socket_path() == "/tmp/tmux-1000/default"
        monkeypatch.setenv("TMUX_POPUP_SOCKET", "/tmp/popup")
        assert resolve_socket_path() == "/tmp/popup"

    def test_command_prompt_escapes(self, fake_tmux):
        command_prompt(None, 'display "$HOME" ')
        assert fake_tmux.calls == [["run-shell", "-b", 'sleep 0.03; tmux command-prompt -I "display \\"\\$HOME\\" "']]

    def test_run_process_replaces_undecodable_output(self, monkeypatch):
        seen = {}

        def fake_run(cmd, **kwargs):
            seen["cmd"] = cmd
            stdout = b"caf\xff\n".decode("utf-8", kwargs.get("errors", "strict"))
            return SimpleNamespace(returncode=0, stdout=stdout, stderr="")

        monkeypatch.setattr(core.subprocess, "run", fake_run)
        assert core.run_process(["list-sessions"], "/tmp/sock") == (0, "caf�\n", "")
        assert seen["cmd"] == ["tmux", "-S", "/tmp/sock", "list-sessions"]


class _Transport:
    def __init__(self, alive=True, fail=False):
        self.alive = alive
        self.fail = fail
        self.calls = []

    def run(self, args):
        self.calls.append(args)
        if self.fail:
            raise TmuxError("control-mode connection closed")
        return 0, "via control\n", ""


class TestTransport:
    def test_uses_control_client(self, fake_tmux):
        transport = _Transport()
        install_transport(transport)
        assert run_tmux(["list-sessions"]) == (0, "via control\n", "")
        assert fake_tmux.calls == []

    def test_falls_back_when_client_fails(self, fake_tmux):
        fake_tmux.respond("list-sessions", stdout="dev\t1\n")
        install_transport(_Transport(fail=True))
        assert run_tmux(["list-sessions"]) == (0, "dev\t1\n", "")

    def test_skips_dead_client(self, fake_tmux):
        transport = _Transport(alive=False)
        install_transport(transport)
        run_tmux(["list-sessions"])
        assert transport.calls == []
        assert fake_tmux.calls == [["list-sessions"]]


class TestSnapshots:
    def test_sessions(self, fake_tmux):
        fake_tmux.respond("list-sessions", stdout="dev\t2\nwork\t1\n")
        fake_tmux.respond("list-clients", stdout="/dev/pts/1\tdev\t0\n/dev/pts/9\twork\t1\n")
        snapshot = fetch_sessions(environ={})
        assert snapshot.current == "dev"
        assert snapshot.client_id == "/dev/pts/1"
        assert not snapshot.include_current
        dev, work = snapshot.sessions
        assert dev.label == "dev: 2 windows (attached)"
        assert dev.current and dev.clients == ["/dev/pts/1"]
        # control-mode clients never count as attached
        assert work.label == "work: 1 window"
        assert not work.attached

    def test_sessions_custom_format(self, fake_tmux):
        fake_tmux.respond("list-sessions", stdout="dev\t2\tdev: custom\n")
        snapshot = fetch_sessions(environ={"TMUX_POPUP_CONTROL_SESSION_FORMAT": "custom"})
        assert snapshot.sessions[0].label == "dev: custom"
        assert fake_tmux.calls[0][-1].endswith("\t#S: custom")

    def test_sessions_failure(self, fake_tmux):
        fake_tmux.respond("list-sessions", code=1, stderr="no server running on /tmp/x")
        with pytest.raises(TmuxCommandError):
            fetch_sessions(environ={})

    def test_windows(self, fake_tmux):
        fake_tmux.respond("list-windows", stdout="@1\tdev:0\tdev\t0\tshell\t1\tdev:0: shell\n@2\twork:1\twork\t1\tlogs\t1\twork:1: logs\n")
        fake_tmux.respond("list-clients", stdout="/dev/pts/1\tdev\t0\n")
        snapshot = fetch_windows(environ={})
        assert snapshot.current_id == "dev:0"
        assert snapshot.current_session == "dev"
        assert [w.internal_id for w in snapshot.windows] == ["@1", "@2"]
        assert [w.current for w in snapshot.windows] == [True, False]

    def test_windows_filter_fallback(self, fake_tmux):
        fake_tmux.respond("list-windows", stdout="@1\tdev:0\tdev\t0\tshell\t1\n")
        fake_tmux.respond("list-windows", "-a", "-f", code=1, stderr="bad filter")
        snapshot = fetch_windows(environ={"TMUX_POPUP_CONTROL_WINDOW_FILTER": "#{==:x,y}"})
        assert [w.label for w in snapshot.windows] == ["dev:0 shell"]

    def test_panes(self, fake_tmux):
        line = "%1\tdev:0.0\tdev\tshell\t0\t0\t1\t1\tvim\tzsh\t80\t24\t4242\tdev:0.0: editor"
        other = "%2\twork:1.0\twork\tlogs\t1\t0\t1\t1\t\ttail\t80\t24\t4300\twork:1.0: logs"
        fake_tmux.respond("list-panes", stdout=f"{line}\n{other}\n")
        fake_tmux.respond("list-clients", stdout="/dev/pts/1\tdev\t0\n")
        snapshot = fetch_panes(environ={})
        assert snapshot.current_id == "dev:0.0"
        assert snapshot.current_window == "dev:0"
        first = snapshot.panes[0]
        assert (first.pane_id, first.title, first.pid, first.label) == ("%1", "vim", 4242, "dev:0.0: editor")
        assert not snapshot.panes[1].current


class TestPreview:
    def test_strips_escapes_and_trailing_blank_lines(self, fake_tmux):
        fake_tmux.respond("capture-pane", stdout="\x1b[31mred\x1b[0m text  \r\nnext\n\n\n")
        assert pane_preview(None, "s:0.1") == ["red text", "next"]
        assert fake_tmux.calls == [["capture-pane", "-p", "-t", "s:0.1", "-S", "-40"]]

    def test_empty_pane(self, fake_tmux):
        assert pane_preview(None, "s:0.1") == ["(pane is empty)"]

    def test_capture_failure(self, fake_tmux):
        fake_tmux.respond("capture-pane", code=1, stderr="can't find pane: s:0.9")
        with pytest.raises(TmuxCommandError, match="capture-pane: can't find pane"):
            pane_preview(None, "s:0.9")

    def test_preview_bypasses_control_client(self, fake_tmux):
        transport = _Transport()
        install_transport(transport)
        pane_preview(None, "s:0.1")
        assert transport.calls == []


class _FakeProc:
    def __init__(self, output):
        self.stdin = io.StringIO()
        self.stdout = io.StringIO(output)
        self.exited = False

    def poll(self):
        return 0 if self.exited else None

    def wait(self, timeout=None):
        self.exited = True
        return 0


class TestControlClient:
    def _client(self, output):
        client = ControlClient("/tmp/sock")
        client._proc = _FakeProc(output)
        return client

    def test_quote_argument(self):
        assert quote_argument("dev:1.0") == "dev:1.0"
        assert quote_argument("hello world") == "'hello world'"
        assert quote_argument("it's") == "'it'\\''s'"
        assert quote_argument("") == "''"

    def test_run_reads_block(self):
        client = self._client("%window-add @3\n%begin 1 5 0\nfirst\nsecond\n%end 1 5 0\n")
        assert client.run(["display-message", "-p", "a b"]) == (0, "first\nsecond\n", "")
        assert client._proc.stdin.getvalue() == "display-message -p 'a b'\n"

    def test_run_error_block(self):
        client = self._client("%begin 1 6 0\nunknown command: nope\n%error 1 6 0\n")
        assert client.run(["nope"]) == (1, "", "unknown command: nope")

    def test_closed_connection(self):
        client = self._client("%begin 1 7 0\n")
        with pytest.raises(TmuxError, match="connection closed"):
            client.run(["list-sessions"])
        assert not client.alive

    def test_shutdown_is_idempotent(self):
        client = self._client("")
        client.shutdown()
        client.shutdown()
        assert not client.alive
        with pytest.raises(TmuxError, match="not running"):
            client.run(["list-sessions"])
