"""Disk-backed B+ tree mapping record ids to data page ids."""

from __future__ import annotations

import struct
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field

from bonsaidb.file_manager import FileManager
from bonsaidb.page import PAGE_SIZE

BPLUS_TREE_ORDER = 50
"""A node is split once it holds this many keys."""

MIN_KEYS = (BPLUS_TREE_ORDER - 1) // 2
"""Fewest keys a non-root node is meant to keep."""

_HEADER = struct.Struct("<?III")
_COUNT = struct.Struct("<Q")
_NO_PAGE = 0


@dataclass
class BPlusNode:
    """One tree node, stored in a page of its own."""

    is_leaf: bool = False
    self_page_id: int = 0
    parent_page_id: int = 0
    keys: list[int] = field(default_factory=list)
    children_page_ids: list[int] = field(default_factory=list)
    data_page_ids: list[int] = field(default_factory=list)
    next_leaf_id: int = 0

    def _arrays(self) -> tuple[tuple[list[int], str], ...]:
        return (
            (self.keys, "i"),
            (self.children_page_ids, "I"),
            (self.data_page_ids, "I"),
        )

    def serialize(self) -> bytes:
        """Encode the node into exactly ``PAGE_SIZE`` bytes."""
        try:
            parts = [
                _HEADER.pack(
                    self.is_leaf,
                    self.self_page_id,
                    self.parent_page_id,
                    self.next_leaf_id,
                )
            ]
            for values, code in self._arrays():
                parts.append(_COUNT.pack(len(values)))
                parts.append(struct.pack(f"<{len(values)}{code}", *values))
        except struct.error as exc:
            raise ValueError(f"node field out of range: {exc}") from exc
        body = b"".join(parts)
        if len(body) > PAGE_SIZE:
            raise ValueError(f"node needs {len(body)} bytes; a page holds {PAGE_SIZE}")
        return body.ljust(PAGE_SIZE, b"\0")

    @classmethod
    def deserialize(cls, buffer: bytes | bytearray | memoryview) -> BPlusNode:
        """Decode a node from a page buffer."""
        try:
            is_leaf, self_id, parent_id, next_leaf = _HEADER.unpack_from(buffer, 0)
        except struct.error as exc:
            raise ValueError("buffer too short for a node header") from exc
        offset = _HEADER.size
        arrays: list[list[int]] = []
        for code in ("i", "I", "I"):
            if offset + _COUNT.size > len(buffer):
                raise ValueError("buffer too short for a node")
            (count,) = _COUNT.unpack_from(buffer, offset)
            offset += _COUNT.size
            if offset + count * 4 > len(buffer):
                raise ValueError(f"node claims {count} entries that do not fit the buffer")
            arrays.append(list(struct.unpack_from(f"<{count}{code}", buffer, offset)))
            offset += count * 4
        keys, children, data = arrays
        return cls(
            is_leaf=is_leaf,
            self_page_id=self_id,
            parent_page_id=parent_id,
            keys=keys,
            children_page_ids=children,
            data_page_ids=data,
            next_leaf_id=next_leaf,
        )


class BPlusTree:
    """Index whose nodes live in pages of a ``FileManager``.

    The root page id is kept in the file's metadata page; an empty file
    gets a fresh leaf root.
    """

    def __init__(self, file_manager: FileManager) -> None:
        self._fm = file_manager
        self._root_page_id = file_manager.read_root_page_id()
        if self._root_page_id == _NO_PAGE:
            self._root_page_id = file_manager.allocate_page()
            root = BPlusNode(is_leaf=True, self_page_id=self._root_page_id)
            self._write_node(root)
            file_manager.write_root_page_id(self._root_page_id)

    @property
    def root_page_id(self) -> int:
        """Page id of the current root node."""
        return self._root_page_id

    def _read_node(self, page_id: int) -> BPlusNode:
        node = BPlusNode.deserialize(self._fm.read_raw_page(page_id))
        node.self_page_id = page_id
        return node

    def _write_node(self, node: BPlusNode) -> None:
        self._fm.write_raw_page(node.self_page_id, node.serialize())

    def _find_leaf(self, key: int) -> BPlusNode:
        node = self._read_node(self._root_page_id)
        while not node.is_leaf:
            node = self._read_node(node.children_page_ids[bisect_right(node.keys, key)])
        return node

    def search(self, key: int) -> int | None:
        """Return the data page id stored for ``key``, or None."""
        leaf = self._find_leaf(key)
        pos = bisect_left(leaf.keys, key)
        if pos < len(leaf.keys) and leaf.keys[pos] == key:
            return leaf.data_page_ids[pos]
        return None

    def insert(self, key: int, data_page_id: int) -> None:
        """Map ``key`` to ``data_page_id``; an existing key is left unchanged."""
        node = self._find_leaf(key)
        pos = bisect_left(node.keys, key)
        if pos < len(node.keys) and node.keys[pos] == key:
            return
        node.keys.insert(pos, key)
        node.data_page_ids.insert(pos, data_page_id)

        if len(node.keys) < BPLUS_TREE_ORDER:
            self._write_node(node)
            return

        mid = len(node.keys) // 2
        promoted = node.keys[mid]
        sibling = BPlusNode(
            is_leaf=True,
            self_page_id=self._fm.allocate_page(),
            parent_page_id=node.parent_page_id,
            keys=node.keys[mid:],
            data_page_ids=node.data_page_ids[mid:],
            next_leaf_id=node.next_leaf_id,
        )
        del node.keys[mid:]
        del node.data_page_ids[mid:]
        node.next_leaf_id = sibling.self_page_id

        self._write_node(node)
        self._write_node(sibling)
        self._insert_into_parent(node, promoted, sibling.self_page_id)

    def _insert_into_parent(self, left: BPlusNode, key: int, right_id: int) -> None:
        if left.parent_page_id == _NO_PAGE:
            new_root = BPlusNode(
                self_page_id=self._fm.allocate_page(),
                keys=[key],
                children_page_ids=[left.self_page_id, right_id],
            )
            self._root_page_id = new_root.self_page_id
            left.parent_page_id = new_root.self_page_id
            right = self._read_node(right_id)
            right.parent_page_id = new_root.self_page_id

            self._write_node(new_root)
            self._write_node(left)
            self._write_node(right)
            self._fm.write_root_page_id(self._root_page_id)
            return

        parent = self._read_node(left.parent_page_id)
        pos = bisect_right(parent.keys, key)
        parent.keys.insert(pos, key)
        parent.children_page_ids.insert(pos + 1, right_id)

        if len(parent.keys) < BPLUS_TREE_ORDER:
            self._write_node(parent)
            return

        mid = len(parent.keys) // 2
        promoted = parent.keys[mid]
        sibling = BPlusNode(
            self_page_id=self._fm.allocate_page(),
            parent_page_id=parent.parent_page_id,
            keys=parent.keys[mid + 1:],
            children_page_ids=parent.children_page_ids[mid + 1:],
        )
        del parent.keys[mid:]
        del parent.children_page_ids[mid + 1:]

        for child_id in sibling.children_page_ids:
            child = self._read_node(child_id)
            child.parent_page_id = sibling.self_page_id
            self._write_node(child)

        self._write_node(parent)
        self._write_node(sibling)
        self._insert_into_parent(parent, promoted, sibling.self_page_id)

    def remove(self, key: int) -> bool:
        """Drop ``key`` from its leaf; return False when it is absent."""
        leaf = self._find_leaf(key)
        pos = bisect_left(leaf.keys, key)
        if pos == len(leaf.keys) or leaf.keys[pos] != key:
            return False
        del leaf.keys[pos]
        del leaf.data_page_ids[pos]
        self._write_node(leaf)
        return True

    def get_all_data_page_ids(self) -> list[int]:
        """Distinct data page ids in key order, walking the leaf chain."""
        node = self._read_node(self._root_page_id)
        while not node.is_leaf:
            if not node.children_page_ids:
                return []
            node = self._read_node(node.children_page_ids[0])

        ids: list[int] = []
        seen: set[int] = set()
        page_id = node.self_page_id
        while page_id != _NO_PAGE:
            leaf = self._read_node(page_id)
            if not leaf.is_leaf:
                break
            for data_id in leaf.data_page_ids:
                if data_id not in seen:
                    seen.add(data_id)
                    ids.append(data_id)
            page_id = leaf.next_leaf_id
        return ids