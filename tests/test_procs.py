"""Process tree lookup from a fake /proc."""

import pytest

from tmux_popup_control.procs import describe_chain, foreground_process, process_chain, read_process, scan_processes


def _proc(root, pid, name, ppid, state="S", cmdline=""):
    entry = root / str(pid)
    entry.mkdir()
    (entry / "comm").write_text(name + "\n")
    (entry / "stat").write_text(f"{pid} ({name}) {state} {ppid} {pid} {pid} 0 -1\n")
    (entry / "cmdline").write_bytes(cmdline.encode().replace(b" ", b"\x00"))


@pytest.fixture
def proc_root(tmp_path):
    _proc(tmp_path, 100, "zsh", 1, cmdline="-zsh")
    _proc(tmp_path, 200, "vim", 100, cmdline="vim notes.md")
    _proc(tmp_path, 250, "sleep", 100)
    _proc(tmp_path, 300, "python3", 200, state="T", cmdline="python3 -m http.server")
    (tmp_path / "self").mkdir()
    return tmp_path


class TestProcs:
    def test_read_process(self, proc_root):
        node = read_process(300, str(proc_root))
        assert (node.name, node.ppid, node.cmdline) == ("python3", 200, "python3 -m http.server")
        assert node.is_stopped

    def test_cmdline_falls_back_to_name(self, proc_root):
        assert read_process(250, str(proc_root)).cmdline == "sleep"

    def test_missing_process(self, proc_root):
        assert read_process(999, str(proc_root)) is None

    def test_name_with_parenthesis(self, tmp_path):
        _proc(tmp_path, 400, "odd) name", 1, state="R")
        node = read_process(400, str(tmp_path))
        assert (node.state, node.ppid) == ("R", 1)

    def test_chain_follows_first_child(self, proc_root):
        processes = scan_processes(str(proc_root))
        assert set(processes) == {100, 200, 250, 300}
        chain = process_chain(100, processes)
        assert describe_chain(chain) == "zsh(100) → vim(200) → python3(300)"
        assert foreground_process(100, processes).pid == 300

    def test_unknown_root(self, proc_root):
        assert process_chain(7, scan_processes(str(proc_root))) == []
        assert foreground_process(7, {}) is None
