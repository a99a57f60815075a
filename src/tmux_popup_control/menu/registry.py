"""Menu tree keyed by colon-separated ids.

PUBLIC API:
  - Node: One menu definition
  - Registry: Lookup over the built tree
  - build_registry: Assemble the tree from loader and action tables
  - parent_key: Split "a:b:c" into ("a:b", "c")
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .types import Action, Item, Loader

ROOT_ID = "root"


@dataclass
class Node:
    id: str
    loader: Optional[Loader] = None
    action: Optional[Action] = None
    children: Dict[str, "Node"] = field(default_factory=dict)
    multi_select: bool = False

    def is_leaf(self) -> bool:
        return self.loader is None and not self.children


def parent_key(id: str) -> Tuple[str, str]:
    """Return (parent id, child key). Top-level ids hang off the root."""
    if ":" not in id:
        return ROOT_ID, id
    parent, _, key = id.rpartition(":")
    return parent, key


class Registry:
    """Read-only view of the menu tree."""

    def __init__(self, root: Node, nodes: Dict[str, Node]):
        self._root = root
        self._nodes = nodes

    def root(self) -> Node:
        return self._root

    def find(self, id: str) -> Optional[Node]:
        return self._nodes.get(id)

    def child(self, parent_id: str, key: str) -> Optional[Node]:
        parent = self._nodes.get(parent_id)
        if parent is None:
            return None
        return parent.children.get(key)

    def __contains__(self, id: str) -> bool:
        return id in self._nodes


def build_registry(
    root_items: Iterable[Item],
    category_loaders: Mapping[str, Loader],
    action_loaders: Mapping[str, Loader],
    action_handlers: Mapping[str, Action],
    multi_select: Iterable[str] = (),
) -> Registry:
    """Build the tree once at startup.

    Nodes named by any table are created on demand and attached to their
    parent by splitting on the last ':'.
    """
    nodes: Dict[str, Node] = {}

    def ensure(id: str) -> Node:
        node = nodes.get(id)
        if node is None:
            node = Node(id=id)
            nodes[id] = node
        return node

    root_items = list(root_items)
    root = ensure(ROOT_ID)
    root.loader = lambda ctx: list(root_items)

    for id, loader in category_loaders.items():
        ensure(id).loader = loader
    for id, loader in action_loaders.items():
        ensure(id).loader = loader
    for id, action in action_handlers.items():
        ensure(id).action = action
    for id in multi_select:
        if id in nodes:
            nodes[id].multi_select = True

    for id, node in list(nodes.items()):
        if id == ROOT_ID:
            continue
        parent_id, key = parent_key(id)
        ensure(parent_id).children[key] = node

    return Registry(root, nodes)
