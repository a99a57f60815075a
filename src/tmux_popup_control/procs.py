"""Process lookup for the pane process menu, read from /proc.

PUBLIC API:
  - ProcessNode: One process with its children
  - scan_processes: Read every process from /proc
  - process_tree: Tree rooted at a PID
  - process_chain: Root-to-leaf chain following the first child
  - foreground_process: Deepest process in a pane's chain
  - describe_chain: One-line rendering of a chain
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

PROC_ROOT = "/proc"


@dataclass
class ProcessNode:
    """Process entry.

    Attributes:
        pid: Process ID.
        name: Process name (comm).
        cmdline: Command line, falling back to the name.
        state: Single-letter state (R, S, T, ...).
        ppid: Parent process ID.
        children: Child processes, ordered by PID.
    """

    pid: int
    name: str
    cmdline: str
    state: str
    ppid: int
    children: List["ProcessNode"] = field(default_factory=list)

    @property
    def is_stopped(self) -> bool:
        return self.state in ("T", "t")


def _read(path: str) -> str:
    try:
        with open(path, "rb") as f:
            return f.read().decode("utf-8", "replace")
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return ""


def read_process(pid: int, root: str = PROC_ROOT) -> Optional[ProcessNode]:
    """Read one process, or None if it vanished or is unreadable."""
    name = _read(f"{root}/{pid}/comm").strip()
    stat = _read(f"{root}/{pid}/stat").strip()
    if not name or not stat:
        return None
    # comm may contain ")" so fields start after the last one
    right_paren = stat.rfind(")")
    if right_paren == -1:
        return None
    fields = stat[right_paren + 1 :].split()
    if len(fields) < 2:
        return None
    try:
        ppid = int(fields[1])
    except ValueError:
        return None
    cmdline = _read(f"{root}/{pid}/cmdline").replace("\x00", " ").strip() or name
    return ProcessNode(pid=pid, name=name, cmdline=cmdline, state=fields[0], ppid=ppid)


def scan_processes(root: str = PROC_ROOT) -> Dict[int, ProcessNode]:
    """Read every process under `root`, keyed by PID."""
    processes = {}
    try:
        entries = os.listdir(root)
    except OSError as e:
        logger.error(f"Error scanning {root}: {e}")
        return processes
    for entry in entries:
        if not entry.isdigit():
            continue
        node = read_process(int(entry), root)
        if node is not None:
            processes[node.pid] = node
    return processes


def process_tree(root_pid: int, processes: Optional[Dict[int, ProcessNode]] = None) -> Optional[ProcessNode]:
    """Attach children to `root_pid` from a flat process map."""
    processes = scan_processes() if processes is None else processes
    if root_pid not in processes:
        return None
    children: Dict[int, List[int]] = {}
    for pid, node in processes.items():
        children.setdefault(node.ppid, []).append(pid)

    visited = set()

    def attach(node: ProcessNode) -> None:
        visited.add(node.pid)
        node.children = []
        for child_pid in sorted(children.get(node.pid, [])):
            if child_pid in visited:
                continue
            child = processes[child_pid]
            node.children.append(child)
            attach(child)

    root = processes[root_pid]
    attach(root)
    return root


def process_chain(root_pid: int, processes: Optional[Dict[int, ProcessNode]] = None) -> List[ProcessNode]:
    """Follow the first child from `root_pid` down to a leaf (shell -> app -> subprocess)."""
    chain = []
    node = process_tree(root_pid, processes)
    seen = set()
    while node is not None and node.pid not in seen:
        seen.add(node.pid)
        chain.append(node)
        node = node.children[0] if node.children else None
    return chain


def foreground_process(pane_pid: int, processes: Optional[Dict[int, ProcessNode]] = None) -> Optional[ProcessNode]:
    chain = process_chain(pane_pid, processes)
    return chain[-1] if chain else None


def describe_chain(chain: List[ProcessNode]) -> str:
    return " → ".join(f"{node.name}({node.pid})" for node in chain)
