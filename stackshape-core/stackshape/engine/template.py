from typing import Any, Iterable, List, Optional

from stackshape.engine.diff import Diff, compare
from stackshape.engine.exceptions import EncodingError, UnresolvedDependencyError
from stackshape.engine.graph import Graph, build_graph, find_unresolved_dependencies
from stackshape.engine.nodes import MappingNode, Node, PathNode, encode
from stackshape.engine.paths import PathSegment, to_path


class Template:
    """
    A CloudFormation template, held as a tree whose root is a mapping of the top-level sections
    (``Parameters``, ``Resources``, ``Outputs``, ...).
    """

    root: MappingNode

    def __init__(self, root: Optional[MappingNode] = None):
        if root is not None and not isinstance(root, MappingNode):
            # host values go through from_value, only nodes are accepted here
            kind = root.kind.value if isinstance(root, Node) else type(root).__name__
            raise EncodingError(f"The root of a template must be a mapping node, not a {kind}")
        self.root = root if root is not None else MappingNode()

    @classmethod
    def from_value(cls, value: Any) -> "Template":
        """Returns a Template constructed from the provided mapping."""
        root = encode(value)
        if not isinstance(root, MappingNode):
            raise EncodingError(f"Error converting {type(value).__name__} to template, expected a mapping")
        return cls(root)

    def to_value(self) -> dict:
        """Returns the template as a dict."""
        return self.root.to_value()

    @property
    def comment(self) -> Optional[str]:
        return self.root.comment

    @comment.setter
    def comment(self, comment: Optional[str]):
        self.root.comment = comment

    def get(self, path: Iterable[PathSegment] = ()) -> Node:
        """
        Returns the node at ``path``.

        :raises PathError: if there is no value at the given path or the path is inaccessible
        """
        return self.root.get(path)

    def set(self, path: Iterable[PathSegment], value: Any) -> None:
        """
        Sets the value at ``path`` to ``value``. An empty path replaces the whole template, in which case the value
        must be a mapping.

        :raises PathError: if the path is inaccessible
        :raises EncodingError: if the value cannot be encoded
        """
        path = to_path(path)
        if path:
            self.root.set(path, value)
            return

        root = encode(value)
        if not isinstance(root, MappingNode):
            raise EncodingError(f"The root of a template must be a mapping, not a {root.kind.value}")
        if root.comment is None:
            root.comment = self.root.comment
        self.root = root

    def nodes(self) -> List[PathNode]:
        return self.root.nodes()

    def clone(self) -> "Template":
        return Template(self.root.clone())

    def diff(self, other: "Template") -> Diff:
        """Returns the difference between this template and ``other``."""
        return compare(self.to_value(), other.to_value())

    def graph(self, errors: Optional[List[UnresolvedDependencyError]] = None) -> Graph:
        """
        Returns the graph of connections between the elements of this template.

        :param errors: collects unresolved references instead of raising the first one
        :raises UnresolvedDependencyError: if a reference cannot be resolved and ``errors`` is not given
        """
        return build_graph(self.to_value(), errors)

    def unresolved_dependencies(self) -> List[UnresolvedDependencyError]:
        return find_unresolved_dependencies(self.to_value())

    def __eq__(self, other):
        if not isinstance(other, Template):
            return False
        return self.root == other.root

    __hash__ = None

    def __repr__(self):
        return f"Template(sections={self.root.keys()})"
