from stackshape.engine.diff import Diff, DiffEntry, DiffKind, compare
from stackshape.engine.exceptions import (
    CircularDependencyError,
    EncodingError,
    IndexOutOfRangeError,
    NotIndexableError,
    PathError,
    PathTypeError,
    TemplateError,
    UnknownKeyError,
    UnresolvedDependencyError,
    UnsupportedNodeError,
)
from stackshape.engine.graph import Element, Graph, build_graph
from stackshape.engine.nodes import (
    AliasNode,
    MappingNode,
    Node,
    NodeKind,
    PathNode,
    ScalarNode,
    ScalarType,
    SequenceNode,
    encode,
)
from stackshape.engine.parsing import load_template, parse_template, template_to_json, template_to_yaml
from stackshape.engine.paths import Path, PathSegment, format_path
from stackshape.engine.template import Template

__all__ = [
    "AliasNode",
    "CircularDependencyError",
    "Diff",
    "DiffEntry",
    "DiffKind",
    "Element",
    "EncodingError",
    "Graph",
    "IndexOutOfRangeError",
    "MappingNode",
    "Node",
    "NodeKind",
    "NotIndexableError",
    "Path",
    "PathError",
    "PathNode",
    "PathSegment",
    "PathTypeError",
    "ScalarNode",
    "ScalarType",
    "SequenceNode",
    "Template",
    "TemplateError",
    "UnknownKeyError",
    "UnresolvedDependencyError",
    "UnsupportedNodeError",
    "build_graph",
    "compare",
    "encode",
    "format_path",
    "load_template",
    "parse_template",
    "template_to_json",
    "template_to_yaml",
]
