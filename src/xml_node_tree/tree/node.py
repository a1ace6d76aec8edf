"""The :class:`Node` element model.

A node owns its children; the link back to the parent is a weak reference, so
a tree holds no reference cycles and stays alive only as long as the caller
keeps a reference to its root. Upward navigation from a node whose root is no
longer referenced finds no parent:

    >>> leaf = Node("root").create_path("a", "b")
    >>> leaf.parent is None
    True
    >>> root = Node("root")
    >>> root.create_path("a", "b").parent.parent is root
    True
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


def _no_parent() -> None:
    return None


@dataclass(eq=False, repr=False)
class Node:
    """A single markup element with attributes, text and ordered children.

    Nodes compare by identity; use :meth:`equals` for structural comparison.

    Each node has one text slot. When a document interleaves text with child
    elements, only the last text segment is kept.
    """

    tag: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    inner_text: str = ""
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate values and establish parent-child relationships."""
        if self.attributes is None:
            self.attributes = {}
        for name in self.attributes:
            if not name:
                raise ValueError("Attribute name cannot be empty")
        self._parent = _no_parent

        children, self.children = self.children, []
        for child in children:
            self.append_child(child)

    def __repr__(self) -> str:
        return (
            f"<Node {self.tag!r} attributes={len(self.attributes)} "
            f"children={len(self.children)}>"
        )

    def __str__(self) -> str:
        """Return the node and its subtree as indented markup."""
        from .serializer import NodeSerializer
        from xml_node_tree.shared import SerializerConfig

        return NodeSerializer(SerializerConfig(pretty=True)).serialize(self)

    def __bytes__(self) -> bytes:
        return str(self).encode("utf-8")

    @property
    def parent(self) -> Optional["Node"]:
        """The parent Node or None; held through a weak reference."""
        return self._parent()

    @parent.setter
    def parent(self, node: Optional["Node"]) -> None:
        self._parent = _no_parent if node is None else weakref.ref(node)

    # Search

    def iter_descendants(self, include_self: bool = False) -> Iterator["Node"]:
        """Iterate over the descendants in pre-order (document order)."""
        stack = [self] if include_self else list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_child(self, tag: str) -> Optional["Node"]:
        """Find the first node with ``tag``, searching depth-first in pre-order.

        The node itself is checked first, so ``node.find_child(node.tag)``
        returns ``node``. Returns None if no node in the subtree matches.
        """
        for node in self.iter_descendants(include_self=True):
            if node.tag == tag:
                return node
        return None

    def find_all(self, tag: str) -> List["Node"]:
        """Find all nodes with ``tag`` in the subtree, including this node."""
        return [node for node in self.iter_descendants(include_self=True) if node.tag == tag]

    # Children

    def append_child(self, node: "Node") -> "Node":
        """Append ``node`` as the last child and return ``node``.

        No cycle check is made; appending an ancestor produces a cyclic graph.
        The receiver is referenced only weakly by ``node``; keep a reference to
        the root to navigate upwards later.
        """
        if not isinstance(node, Node):
            raise TypeError("Child must be a Node instance")

        node.parent = self
        self.children.append(node)
        return node

    def chain_append_child(self, node: "Node") -> "Node":
        """Append ``node`` as the last child and return this node."""
        self.append_child(node)
        return self

    def chain_append_children(self, *nodes: "Node") -> "Node":
        """Append all ``nodes`` in order and return this node."""
        for node in nodes:
            self.append_child(node)
        return self

    def remove_children_with_tag(self, tag: str) -> int:
        """Remove every direct child with ``tag``; return how many were removed.

        The remaining children keep their relative order.
        """
        kept = []
        removed = 0
        for child in self.children:
            if child.tag == tag:
                child.parent = None
                removed += 1
            else:
                kept.append(child)
        self.children = kept
        return removed

    # Attributes

    def set_attribute(self, name: str, value: str) -> None:
        if not name:
            raise ValueError("Attribute name cannot be empty")
        self.attributes[name] = value

    def get_attribute(self, name: str) -> str:
        """Return the attribute value, or an empty string if it is not set."""
        return self.attributes.get(name, "")

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    # Paths

    def check_path(self, *tags: str) -> bool:
        """Check whether a chain of direct descendants with ``tags`` exists.

        Every child matching the current tag is tried in turn until one of
        them leads to a full match. An empty path always exists.
        """
        if not tags:
            return True
        head, rest = tags[0], tags[1:]
        return any(
            child.check_path(*rest) for child in self.children if child.tag == head
        )

    def create_path(self, *tags: str) -> "Node":
        """Append a new chain of nodes, one per tag, and return the deepest.

        Existing children are never reused. Returns this node if ``tags`` is
        empty.
        The intermediate nodes are kept alive by this node only.
        """
        node = self
        for tag in tags:
            node = node.append_child(Node(tag))
        return node

    def create_unique_path(self, *tags: str) -> "Node":
        """Replace all direct children named ``tags[0]`` with a new chain.

        Returns the deepest created node, or this node if ``tags`` is empty.
        """
        if not tags:
            return self
        self.remove_children_with_tag(tags[0])
        return self.create_path(*tags)

    def ensure_path(self, *tags: str) -> "Node":
        """Walk down ``tags`` reusing existing children, creating what is missing.

        At each level the first child with the matching tag is reused. On the
        first miss the rest of the path is created. Returns the final node.
        As with :meth:`create_path`, the returned node reaches its ancestors
        only while this node is referenced.
        """
        node = self
        for index, tag in enumerate(tags):
            for child in node.children:
                if child.tag == tag:
                    node = child
                    break
            else:
                return node.create_path(*tags[index:])
        return node

    # Tree structure

    def ancestors(self) -> Iterator["Node"]:
        """Yield the parent, then the parent's parent, etcetera."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def root(self) -> "Node":
        """Return the root node of the tree containing this node."""
        root = self
        for root in self.ancestors():
            pass
        return root

    def get_path(self) -> str:
        """Get the tag path from the root, e.g. ``/library/section/book``."""
        tags = [node.tag for node in self.ancestors()]
        tags.reverse()
        tags.append(self.tag)
        return "/" + "/".join(tags)

    def get_depth(self) -> int:
        """Number of ancestors; 0 for a root node."""
        return sum(1 for _ in self.ancestors())

    def copy(self) -> "Node":
        """Return a deep copy of this node and its subtree.

        The copy has no parent and shares no attribute mapping or child list
        with the original.
        """
        return Node(
            tag=self.tag,
            attributes=dict(self.attributes),
            inner_text=self.inner_text,
            children=[child.copy() for child in self.children],
        )

    def equals(self, other: "Node") -> bool:
        """Return True if ``other`` has the same tag, attributes, text and
        equal children in the same order.

        Attribute order is not significant.
        """
        return (
            isinstance(other, Node)
            and self.tag == other.tag
            and self.inner_text == other.inner_text
            and self.attributes == other.attributes
            and len(self.children) == len(other.children)
            and all(a.equals(b) for a, b in zip(self.children, other.children))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node and its subtree to plain dictionaries."""
        return {
            "tag": self.tag,
            "attributes": dict(self.attributes),
            "inner_text": self.inner_text,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """Build a tree from the structure produced by :meth:`to_dict`."""
        return cls(
            tag=data.get("tag", ""),
            attributes=dict(data.get("attributes") or {}),
            inner_text=data.get("inner_text", ""),
            children=[cls.from_dict(child) for child in data.get("children", [])],
        )
