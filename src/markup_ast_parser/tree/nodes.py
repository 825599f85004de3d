"""AST node types produced by the markup parser.

All types are frozen dataclasses holding tuples, so a tree is immutable once
the parser returns it. A node's body is an ordered mix of ``Text`` runs and
child ``Node`` objects; attribute values are either a ``Literal`` (quoted in
the source) or a ``VariableReference`` (braced in the source).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Literal:
    """Attribute value written as ``name="value"``."""

    value: str

    kind = "literal"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "value": self.value}


@dataclass(frozen=True)
class VariableReference:
    """Attribute value written as ``name={variable}``."""

    name: str

    kind = "variable_reference"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "name": self.name}


Value = Union[Literal, VariableReference]


@dataclass(frozen=True)
class Attribute:
    """One attribute of a node.

    ``id`` is unique within the owning node only, assigned from 0 in the order
    attributes appear. ``value`` is None for a bare attribute (``<a x>``),
    which is distinct from an empty literal (``<a x="">``).
    """

    id: int
    name: str
    value: Optional[Value] = None

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError("Attribute id must be >= 0")
        if not self.name:
            raise ValueError("Attribute name cannot be empty")

    @property
    def is_bare(self) -> bool:
        return self.value is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value.to_dict() if self.value is not None else None,
        }


@dataclass(frozen=True)
class Text:
    """A trimmed, non-empty run of text between tags."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Text body cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "value": self.value}


@dataclass(frozen=True)
class Node:
    """A tag in the document tree.

    Provides navigation helpers in the spirit of an element tree: pre-order
    iteration, lookup by name and attribute access. ``id`` is unique across
    the whole parse and increases in the order nodes were opened; ``parent_id``
    is None only for the root.
    """

    id: int
    name: str
    parent_id: Optional[int] = None
    children: Tuple["Body", ...] = field(default_factory=tuple)
    attributes: Tuple[Attribute, ...] = field(default_factory=tuple)
    self_closing: bool = False

    def __post_init__(self) -> None:
        """Validate node values."""
        if not self.name:
            raise ValueError("Node name cannot be empty")
        if self.id < 0:
            raise ValueError("Node id must be >= 0")
        if self.self_closing and self.children:
            raise ValueError("A self-closing node cannot have children")
        for child in self.children:
            if isinstance(child, Node) and child.parent_id != self.id:
                raise ValueError(
                    f"Child node {child.id} has parent_id {child.parent_id}, "
                    f"expected {self.id}"
                )

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def element_children(self) -> List["Node"]:
        """Get direct child nodes, skipping text runs."""
        return [child for child in self.children if isinstance(child, Node)]

    @property
    def texts(self) -> List[str]:
        """Get the direct text runs of this node."""
        return [child.value for child in self.children if isinstance(child, Text)]

    @property
    def text_content(self) -> str:
        """Get all text in this subtree, runs joined by a single space."""
        parts = []
        stack: List[Body] = list(reversed(self.children))
        while stack:
            item = stack.pop()
            if isinstance(item, Text):
                parts.append(item.value)
            else:
                stack.extend(reversed(item.children))
        return " ".join(parts)

    @property
    def height(self) -> int:
        """Get the number of levels in this subtree, counting this node."""
        height = 0
        stack: List[Tuple[Node, int]] = [(self, 1)]
        while stack:
            node, level = stack.pop()
            height = max(height, level)
            stack.extend((child, level + 1) for child in node.element_children)
        return height

    def iter_nodes(self) -> Iterator["Node"]:
        """Iterate over this node and all descendants in pre-order."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.element_children))

    def find(self, name: str) -> Optional["Node"]:
        """Find first descendant node with matching name (pre-order)."""
        for node in self.iter_nodes():
            if node is not self and node.name == name:
                return node
        return None

    def find_all(self, name: str) -> List["Node"]:
        """Find all descendant nodes with matching name."""
        return [
            node for node in self.iter_nodes()
            if node is not self and node.name == name
        ]

    def find_by_id(self, node_id: int) -> Optional["Node"]:
        """Find the node with the given id in this subtree."""
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def get_attribute(self, name: str) -> Optional[Attribute]:
        """Get the first attribute with the given name."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    def _shallow_dict(self, children: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "type": "node",
            "id": self.id,
            "parent_id": self.parent_id,
            "name": self.name,
            "self_closing": self.self_closing,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
            "children": children,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to nested dictionaries.

        Built top-down from an explicit stack, so the depth of the tree is not
        limited by the interpreter's recursion limit.
        """
        root = self._shallow_dict([])
        stack: List[Tuple[Body, List[Dict[str, Any]]]] = [
            (child, root["children"]) for child in reversed(self.children)
        ]
        while stack:
            item, target = stack.pop()
            if isinstance(item, Text):
                target.append(item.to_dict())
                continue
            data = item._shallow_dict([])
            target.append(data)
            stack.extend((child, data["children"]) for child in reversed(item.children))
        return root

    def structure(self) -> Tuple[Any, ...]:
        """Get an id-free structural signature of the subtree.

        Two trees with equal signatures have the same names, attribute order,
        value kinds, values and child order.
        """
        # Reversed pre-order visits every child before its parent
        signatures: Dict[int, Tuple[Any, ...]] = {}
        for node in reversed(list(self.iter_nodes())):
            signatures[id(node)] = (
                node.name,
                node.self_closing,
                tuple(
                    (attribute.name, attribute.value) for attribute in node.attributes
                ),
                tuple(
                    signatures[id(child)] if isinstance(child, Node) else child
                    for child in node.children
                ),
            )
        return signatures[id(self)]


Body = Union[Text, Node]
