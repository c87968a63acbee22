"""
Path addressing within a template tree.

A path is an ordered sequence of segments: a string addresses a mapping key, a non-negative integer addresses a
sequence index. Paths are stored as tuples so they can be hashed and compared.
"""

from typing import Any, Iterable, Tuple, Union

PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


def is_key(segment: Any) -> bool:
    return isinstance(segment, str)


def is_index(segment: Any) -> bool:
    # bool is a subclass of int, but True is not an index
    return isinstance(segment, int) and not isinstance(segment, bool)


def to_path(path: Iterable[PathSegment]) -> Path:
    return tuple(path) if path is not None else ()


def format_path(path: Iterable[PathSegment]) -> str:
    """
    Renders a path for diagnostics, e.g. ``("Resources", "Topic", "Properties", "Tags", 0)`` becomes
    ``Resources.Topic.Properties.Tags[0]``. The empty path is rendered as ``<root>``.
    """
    result = ""
    for segment in path:
        if is_index(segment):
            result += f"[{segment}]"
        elif result:
            result += f".{segment}"
        else:
            result = str(segment)
    return result or "<root>"
