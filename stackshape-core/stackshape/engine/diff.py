"""
Structural comparison of two decoded templates.

Every path found in either input is classified as added, removed, changed or unchanged. Mappings are compared by
key, sequences by position: reordering a sequence shows up as a series of changed, added and removed entries rather
than as a move. An added or removed subtree is reported once, at its root.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional

from stackshape.engine.nodes import scalars_equal
from stackshape.engine.paths import Path, PathSegment, to_path


class DiffKind(Enum):
    ADDED = "Added"
    REMOVED = "Removed"
    CHANGED = "Changed"
    UNCHANGED = "Unchanged"


@dataclass(frozen=True)
class DiffEntry:
    path: Path
    kind: DiffKind
    # None for added entries
    from_value: Any = None
    # None for removed entries
    to_value: Any = None


class Diff:
    """Ordered result of a comparison: depth-first, parents before children, mapping keys sorted."""

    def __init__(self, entries: Iterable[DiffEntry]):
        self._entries = list(entries)

    @property
    def mode(self) -> DiffKind:
        """The classification of the compared values as a whole."""
        return self._entries[0].kind

    def entries(self, long: bool = False) -> List[DiffEntry]:
        """
        Returns the entries of the diff.

        :param long: include unchanged entries as well
        """
        if long:
            return list(self._entries)
        return [entry for entry in self._entries if entry.kind != DiffKind.UNCHANGED]

    def get(self, path: Iterable[PathSegment]) -> Optional[DiffEntry]:
        path = to_path(path)
        for entry in self._entries:
            if entry.path == path:
                return entry
        return None

    def __iter__(self) -> Iterator[DiffEntry]:
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"Diff(mode={self.mode.value}, entries={len(self._entries)})"


def compare(from_value: Any, to_value: Any) -> Diff:
    """
    Compares two decoded values. Nodes and templates are decoded first.

    An added or removed subtree gets a single entry at its root, which also stands for all of its descendant paths.

    :return: the diff, whose first entry describes the root
    """
    entries: List[DiffEntry] = []
    _compare(_decode(from_value), _decode(to_value), (), entries)
    return Diff(entries)


def _decode(value: Any) -> Any:
    # nodes and templates
    if callable(getattr(value, "to_value", None)):
        return value.to_value()
    return value


def _compare(from_value: Any, to_value: Any, path: Path, entries: List[DiffEntry]) -> DiffKind:
    # reserve the parent's slot, its kind is only known after the children have been compared
    index = len(entries)
    entries.append(None)

    if isinstance(from_value, dict) and isinstance(to_value, dict):
        kind = DiffKind.UNCHANGED
        for key in sorted(set(from_value) | set(to_value)):
            child_path = path + (key,)
            if key not in to_value:
                entries.append(DiffEntry(child_path, DiffKind.REMOVED, from_value[key], None))
                kind = DiffKind.CHANGED
            elif key not in from_value:
                entries.append(DiffEntry(child_path, DiffKind.ADDED, None, to_value[key]))
                kind = DiffKind.CHANGED
            elif _compare(from_value[key], to_value[key], child_path, entries) != DiffKind.UNCHANGED:
                kind = DiffKind.CHANGED
    elif isinstance(from_value, list) and isinstance(to_value, list):
        kind = DiffKind.UNCHANGED
        for position in range(max(len(from_value), len(to_value))):
            child_path = path + (position,)
            if position >= len(to_value):
                entries.append(DiffEntry(child_path, DiffKind.REMOVED, from_value[position], None))
                kind = DiffKind.CHANGED
            elif position >= len(from_value):
                entries.append(DiffEntry(child_path, DiffKind.ADDED, None, to_value[position]))
                kind = DiffKind.CHANGED
            elif _compare(from_value[position], to_value[position], child_path, entries) != DiffKind.UNCHANGED:
                kind = DiffKind.CHANGED
    elif _is_container(from_value) or _is_container(to_value):
        # different shapes, the whole subtree is replaced
        kind = DiffKind.CHANGED
    elif scalars_equal(from_value, to_value):
        kind = DiffKind.UNCHANGED
    else:
        kind = DiffKind.CHANGED

    entries[index] = DiffEntry(path, kind, from_value, to_value)
    return kind


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))
