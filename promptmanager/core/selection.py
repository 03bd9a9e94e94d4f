# promptmanager/core/selection.py
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Set
from loguru import logger

from .models import FileRecord, TreeNode

class SelectionStore:
    """Ids of the tree nodes the user has checked. Validated lazily, never eagerly."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: Set[str] = set(ids)

    def add(self, node_id: str) -> bool:
        """Returns True if the id was not already selected."""
        if node_id in self._ids:
            return False
        self._ids.add(node_id)
        return True

    def remove(self, node_id: str) -> bool:
        if node_id not in self._ids:
            return False
        self._ids.discard(node_id)
        return True

    def contains(self, node_id: str) -> bool:
        return node_id in self._ids

    def clear(self) -> bool:
        had_ids = bool(self._ids)
        self._ids.clear()
        return had_ids

    def snapshot(self) -> FrozenSet[str]:
        return frozenset(self._ids)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())


def flatten_tree(nodes: Sequence[TreeNode]) -> List[TreeNode]:
    """Depth-first, pre-order list of every node (folders included)."""
    flat: List[TreeNode] = []
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        flat.append(node)
        if node.children:
            stack.extend(reversed(node.children))
    return flat


def resolve_selected_files(
    tree: Optional[TreeNode],
    files: Sequence[FileRecord],
    selection: Iterable[str],
) -> List[FileRecord]:
    """
    Maps the selected leaves of `tree` onto their FileRecord, in tree order.

    Folder ids in the selection are ignored, and leaves without a record
    (binary or unreadable files) contribute nothing.
    """
    if tree is None:
        return []
    selected_ids = selection if isinstance(selection, (set, frozenset)) else set(selection)
    records_by_path: Dict[Path, FileRecord] = {record.path: record for record in files}

    selected: List[FileRecord] = []
    for node in flatten_tree([tree]):
        if not node.is_leaf or node.id not in selected_ids:
            continue
        record = records_by_path.get(node.path)
        if record is None:
            logger.trace(f"Selected leaf has no text record: {node.path}")
            continue
        selected.append(record)
    return selected
