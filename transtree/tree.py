"""Case-insensitive tree of translation keys addressed by dotted paths."""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from transtree.exceptions import DuplicateKeyError, GenericParserError


def split_path(path: str) -> Optional[List[str]]:
    """Split a dotted path into segments, or return None if the path or any segment is empty."""
    if not path:
        return None
    segments = path.split('.')
    if any(not segment for segment in segments):
        return None
    return segments


@dataclass(frozen=True)
class TreeLeaf:
    """A terminal key of a node. The text itself lives in the Translation entry."""
    key: str
    is_templated: bool


class TreeNode:
    """
    A group of keys. Children are looked up case-insensitively, while the node and
    leaf names keep the casing they were created with. The full path of a node is
    not stored; it is the names of its ancestors joined by '.'.
    """

    def __init__(self, name: str):
        self.name = name
        self._children: Dict[str, "TreeNode"] = {}
        self.keys: Dict[str, TreeLeaf] = {}

    @property
    def child_nodes(self) -> Dict[str, "TreeNode"]:
        """Children keyed by their original-case names."""
        return {child.name: child for child in self._children.values()}

    def get_child(self, name: str) -> Optional["TreeNode"]:
        return self._children.get(name.lower())

    def has_leaf(self, key: str) -> bool:
        lowered = key.lower()
        return any(existing.lower() == lowered for existing in self.keys)

    def find_node(self, path: str) -> Optional["TreeNode"]:
        """
        Resolve a dotted path relative to this node without creating anything.

        Returns None if the path is empty, has an empty segment, or names a missing node.
        """
        if not path:
            return None
        own_name, sep, rest = path.partition('.')
        if not own_name:
            return None
        child = self.get_child(own_name)
        if child is None or not sep:
            return child
        return child.find_node(rest)

    def make_node(self, path: str) -> Optional["TreeNode"]:
        """
        Resolve a dotted path relative to this node, creating missing nodes on the way.

        Returns None for an empty path or a path with an empty segment; such paths
        leave the tree unchanged.
        """
        if split_path(path) is None:
            return None
        return self._make_node(path)

    def _make_node(self, path: str) -> "TreeNode":
        own_name, sep, rest = path.partition('.')
        child = self.get_child(own_name)
        if child is None:
            child = TreeNode(own_name)
            self._children[own_name.lower()] = child
        if not sep:
            return child
        return child._make_node(rest)

    def add_leaf(self, key: str, is_templated: bool) -> TreeLeaf:
        if self.has_leaf(key):
            raise DuplicateKeyError(key)
        leaf = TreeLeaf(key, is_templated)
        self.keys[key] = leaf
        return leaf

    def walk(self, prefix: str = "") -> Iterator[Tuple[str, TreeLeaf]]:
        """Yield (qualified key, leaf) for every leaf of this node and its descendants."""
        for key, leaf in self.keys.items():
            yield (f"{prefix}.{key}" if prefix else key), leaf
        for child in self._children.values():
            child_prefix = f"{prefix}.{child.name}" if prefix else child.name
            yield from child.walk(child_prefix)

    def __repr__(self) -> str:
        return f"TreeNode({self.name!r}, children={len(self._children)}, keys={len(self.keys)})"


class TranslationTree:
    """The keys of one translation source organized by group."""

    def __init__(self):
        self.root = TreeNode("")

    def find_node(self, path: str) -> Optional[TreeNode]:
        return self.root.find_node(path)

    def make_node(self, path: str) -> Optional[TreeNode]:
        return self.root.make_node(path)

    def add_entry(self, qualified_key: str, is_templated: bool) -> TreeLeaf:
        """
        Insert a leaf for a qualified key, creating its groups as needed.

        Raises:
            GenericParserError: If the key is empty or has an empty segment.
            DuplicateKeyError: If the owning node already has a leaf with that name.
        """
        if split_path(qualified_key) is None:
            raise GenericParserError(f"Key '{qualified_key}' could not be used to build a tree of translation entries")
        group, _, key = qualified_key.rpartition('.')
        node = self.root.make_node(group) if group else self.root
        try:
            return node.add_leaf(key, is_templated)
        except DuplicateKeyError:
            raise DuplicateKeyError(qualified_key) from None

    def walk(self) -> Iterator[Tuple[str, TreeLeaf]]:
        return self.root.walk()
