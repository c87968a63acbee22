"""
The document tree that templates are held in.

A tree is made of four node kinds: scalars, sequences, mappings (which keep their keys in insertion order so a
template can be written back the way it was read), and aliases, which can be held in a tree but never resolved.
Every node may carry a comment. Comments are kept when nodes are read, replaced or cloned, but they take no part in
equality, diffs or reference scanning.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from stackshape.constants import TEMPLATE_PATH_LOG_ATTRIBUTE
from stackshape.engine.exceptions import (
    EncodingError,
    IndexOutOfRangeError,
    NotIndexableError,
    PathTypeError,
    UnknownKeyError,
    UnsupportedNodeError,
)
from stackshape.engine.paths import Path, PathSegment, is_index, is_key, to_path

LOG = logging.getLogger(__name__)

SCALAR_TYPES = (str, bool, int, float)


class NodeKind(Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    ALIAS = "alias"


class ScalarType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


def scalar_type(value: Any) -> ScalarType:
    """Infer the primitive type of a scalar value."""
    if value is None:
        return ScalarType.NULL
    # check bool before int, as bool is a subclass of int
    if isinstance(value, bool):
        return ScalarType.BOOLEAN
    if isinstance(value, (int, float)):
        return ScalarType.NUMBER
    return ScalarType.STRING


def scalars_equal(first: Any, second: Any) -> bool:
    """Whether two scalar values are equal: same inferred type and value, where NaN equals NaN."""
    if scalar_type(first) != scalar_type(second):
        return False
    # NaN is the only value that is not equal to itself
    return first == second or (first != first and second != second)


class PathNode(NamedTuple):
    """A node together with its path relative to the node the traversal started at."""

    path: Path
    content: "Node"


class Node:
    """Base class of all tree nodes."""

    kind: NodeKind
    comment: Optional[str]

    def __init__(self, comment: Optional[str] = None):
        self.comment = comment

    def get(self, path: Iterable[PathSegment] = ()) -> "Node":
        """
        Returns the node at ``path`` below this node.

        :param path: sequence of mapping keys (str) and sequence indices (int)
        :return: the node found at the end of the path, or this node for an empty path
        :raises PathError: if the path cannot be followed
        """
        path = to_path(path)
        node = self
        for position, segment in enumerate(path):
            node = node._child(segment, path[: position + 1])
        return node

    def set(self, path: Iterable[PathSegment], value: Any) -> None:
        """
        Stores ``value`` at ``path`` below this node, creating missing mapping entries and appending to sequences
        on the way. The tree is only changed once the whole path has been validated and the value encoded, so a
        failed call leaves it as it was.

        :param path: non-empty sequence of mapping keys (str) and sequence indices (int)
        :param value: host value (or node) to store
        :raises PathError: if the path cannot be followed
        :raises EncodingError: if the value cannot be encoded
        """
        path = to_path(path)
        if not path:
            raise PathTypeError("Unable to assign a node to an empty path")

        node = self
        for position, segment in enumerate(path):
            at = path[: position + 1]
            existing = node._child_for_write(segment, at)
            if existing is not None and position < len(path) - 1:
                node = existing
                continue

            replacement = build_node(path[position + 1 :], value, at)
            if existing is not None and replacement.comment is None:
                replacement.comment = existing.comment
            node._assign(segment, replacement)
            return

    def to_value(self) -> Any:
        """Decodes this node into a host value (dict, list or primitive)."""
        raise NotImplementedError

    def clone(self) -> "Node":
        raise NotImplementedError

    def children(self) -> Iterator[Tuple[PathSegment, "Node"]]:
        """Yields ``(segment, child)`` pairs, ordered by sorted key or ascending index."""
        return iter(())

    def nodes(self) -> List[PathNode]:
        """
        Flattens the tree into a list of path/node pairs, depth-first and pre-order, visiting children by sorted key
        or ascending index. The first entry is this node with the empty path.
        """
        result = [PathNode((), self)]
        for segment, child in self.children():
            for entry in child.nodes():
                result.append(PathNode((segment,) + entry.path, entry.content))
        return result

    def _child(self, segment: PathSegment, at: Path) -> "Node":
        raise NotImplementedError

    def _child_for_write(self, segment: PathSegment, at: Path) -> Optional["Node"]:
        """Returns the child a write descends into, or None if the write creates it."""
        raise NotImplementedError

    def _assign(self, segment: PathSegment, node: "Node") -> None:
        raise NotImplementedError


class ScalarNode(Node):
    kind = NodeKind.SCALAR

    def __init__(self, value: Any = None, comment: Optional[str] = None):
        super().__init__(comment)
        if value is not None and not isinstance(value, SCALAR_TYPES):
            raise EncodingError(f"Unsupported scalar type {type(value).__name__}")
        self.value = value

    @property
    def type(self) -> ScalarType:
        return scalar_type(self.value)

    @property
    def text(self) -> str:
        """String representation of the value, as it would be written in a template."""
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)

    def to_value(self) -> Any:
        return self.value

    def clone(self) -> "ScalarNode":
        return ScalarNode(self.value, comment=self.comment)

    def _child(self, segment, at):
        raise NotIndexableError("Attempted to index a scalar", at)

    def _child_for_write(self, segment, at):
        raise NotIndexableError("Attempted to index a scalar", at)

    def __eq__(self, other):
        if not isinstance(other, ScalarNode):
            return False
        return scalars_equal(self.value, other.value)

    __hash__ = None

    def __repr__(self):
        return f"ScalarNode({self.value!r})"


class SequenceNode(Node):
    kind = NodeKind.SEQUENCE

    def __init__(self, content: Optional[Iterable[Node]] = None, comment: Optional[str] = None):
        super().__init__(comment)
        self.content: List[Node] = list(content or [])

    def __len__(self):
        return len(self.content)

    def to_value(self) -> list:
        return [child.to_value() for child in self.content]

    def clone(self) -> "SequenceNode":
        return SequenceNode([child.clone() for child in self.content], comment=self.comment)

    def children(self):
        return iter(enumerate(self.content))

    def _check_index(self, segment, at):
        if not is_index(segment):
            raise PathTypeError(f"Attempted to index a sequence with a {type(segment).__name__}", at)

    def _child(self, segment, at):
        self._check_index(segment, at)
        if segment < 0 or segment >= len(self.content):
            raise IndexOutOfRangeError(f"Sequence index out of range: {segment}", at)
        return self.content[segment]

    def _child_for_write(self, segment, at):
        self._check_index(segment, at)
        if segment < 0 or segment > len(self.content):
            raise IndexOutOfRangeError(f"Sequence index out of range: {segment}", at)
        if segment == len(self.content):
            return None
        return self.content[segment]

    def _assign(self, segment, node):
        if segment == len(self.content):
            self.content.append(node)
        else:
            self.content[segment] = node

    def __eq__(self, other):
        if not isinstance(other, SequenceNode):
            return False
        return self.content == other.content

    __hash__ = None

    def __repr__(self):
        return f"SequenceNode({self.content!r})"


class MappingNode(Node):
    kind = NodeKind.MAPPING

    def __init__(
        self, content: Optional[Iterable[Tuple[str, Node]]] = None, comment: Optional[str] = None
    ):
        super().__init__(comment)
        self.content: List[Tuple[str, Node]] = []
        seen = set()
        for key, node in content or []:
            if not is_key(key):
                raise EncodingError(f"Mappings may only have string keys, not '{key!r}'")
            if key in seen:
                raise EncodingError(f"Duplicate mapping key '{key}'", (key,))
            seen.add(key)
            self.content.append((key, node))

    def __len__(self):
        return len(self.content)

    def __contains__(self, key):
        return any(existing == key for existing, _ in self.content)

    def keys(self) -> List[str]:
        """Returns the keys in storage order. Callers that need a stable order must sort them."""
        return [key for key, _ in self.content]

    def items(self) -> List[Tuple[str, Node]]:
        return list(self.content)

    def to_value(self) -> dict:
        return {key: child.to_value() for key, child in self.content}

    def clone(self) -> "MappingNode":
        return MappingNode(
            [(key, child.clone()) for key, child in self.content], comment=self.comment
        )

    def children(self):
        return iter(sorted(self.content, key=lambda item: item[0]))

    def _find(self, key: str) -> Optional[Node]:
        for existing, child in self.content:
            if existing == key:
                return child
        return None

    def _check_key(self, segment, at):
        if not is_key(segment):
            raise PathTypeError(f"Attempted to index a mapping with a {type(segment).__name__}", at)

    def _child(self, segment, at):
        self._check_key(segment, at)
        child = self._find(segment)
        if child is None:
            raise UnknownKeyError(f"Unable to find map key '{segment}'", at)
        return child

    def _child_for_write(self, segment, at):
        self._check_key(segment, at)
        return self._find(segment)

    def _assign(self, segment, node):
        for index, (existing, _) in enumerate(self.content):
            if existing == segment:
                self.content[index] = (segment, node)
                return
        self.content.append((segment, node))

    def __eq__(self, other):
        if not isinstance(other, MappingNode):
            return False
        return dict(self.content) == dict(other.content)

    __hash__ = None

    def __repr__(self):
        return f"MappingNode({self.content!r})"


class AliasNode(Node):
    """Reference to an anchored node elsewhere in the document, which is never resolved."""

    kind = NodeKind.ALIAS

    def __init__(self, anchor: str, comment: Optional[str] = None):
        super().__init__(comment)
        self.anchor = anchor

    def to_value(self) -> Any:
        raise UnsupportedNodeError(f"Alias nodes are not supported (alias of '{self.anchor}')")

    def clone(self) -> "AliasNode":
        return AliasNode(self.anchor, comment=self.comment)

    def _child(self, segment, at):
        raise UnsupportedNodeError("Alias nodes are not supported", at)

    def _child_for_write(self, segment, at):
        raise UnsupportedNodeError("Alias nodes are not supported", at)

    def __eq__(self, other):
        if not isinstance(other, AliasNode):
            return False
        return self.anchor == other.anchor

    __hash__ = None

    def __repr__(self):
        return f"AliasNode({self.anchor!r})"


def encode(value: Any, path: Iterable[PathSegment] = ()) -> Node:
    """
    Converts a host value into a tree: mappings become ``MappingNode``, lists and tuples become ``SequenceNode`` and
    primitives become ``ScalarNode``. Nodes are cloned.

    :param value: the value to encode
    :param path: location of the value, used in error messages
    :raises EncodingError: for non-string mapping keys or values of unsupported types
    """
    path = to_path(path)
    if isinstance(value, Node):
        return value.clone()
    if isinstance(value, Mapping):
        items = []
        for key, item in value.items():
            if not is_key(key):
                raise EncodingError(
                    f"Mappings may only have string keys, not '{type(key).__name__}'", path
                )
            items.append((key, encode(item, path + (key,))))
        return MappingNode(items)
    if isinstance(value, (list, tuple)):
        return SequenceNode([encode(item, path + (index,)) for index, item in enumerate(value)])
    if value is None or isinstance(value, SCALAR_TYPES):
        return ScalarNode(value)
    raise EncodingError(f"Unsupported value type {type(value).__name__}", path)


def build_node(path: Path, value: Any, at: Path = ()) -> Node:
    """
    Builds a detached tree that holds ``value`` at ``path``. Each position along the path starts out without a kind
    and becomes a mapping or a sequence depending on the type of the segment that follows it; a new sequence can
    only be written at index 0.

    :param path: path from the new tree's root to the value
    :param value: host value to encode at the end of the path
    :param at: location of the new tree's root, used in error messages
    """
    for position, segment in enumerate(path):
        location = at + path[: position + 1]
        if is_key(segment):
            continue
        if not is_index(segment):
            raise PathTypeError(f"Unexpected path segment: {segment!r}", location)
        if segment != 0:
            raise IndexOutOfRangeError(f"Sequence index out of range: {segment}", location)

    node = encode(value, at + path)
    for segment in reversed(path):
        if is_key(segment):
            node = MappingNode([(segment, node)])
        else:
            node = SequenceNode([node])
    if path:
        LOG.debug("Created %d intermediate node(s)", len(path), extra={TEMPLATE_PATH_LOG_ATTRIBUTE: at})
    return node
