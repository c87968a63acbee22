from typing import Iterable, List, Optional

from stackshape.engine.paths import Path, PathSegment, format_path, to_path


class TemplateError(Exception):
    """Base class for all errors raised while reading, changing or analysing a template."""

    message: str
    path: Path

    def __init__(self, message: str, path: Optional[Iterable[PathSegment]] = None):
        super().__init__(message)
        self.message = message
        self.path = to_path(path)

    def __str__(self):
        if not self.path:
            return self.message
        return f"{self.message} (at {format_path(self.path)})"


class PathError(TemplateError):
    """Raised when a path cannot be followed through the tree."""


class PathTypeError(PathError):
    """A path segment has the wrong type for the node it addresses."""


class UnknownKeyError(PathError):
    """A mapping key that is read does not exist."""


class IndexOutOfRangeError(PathError):
    """A sequence index lies outside the readable or writable range."""


class NotIndexableError(PathError):
    """A path continues below a scalar."""


class UnsupportedNodeError(PathError):
    """An alias node was found where a concrete value is required."""


class EncodingError(TemplateError):
    """A host value or template text cannot be converted to or from a tree."""


class UnresolvedDependencyError(TemplateError):
    """An element references a name that is neither declared in the template nor a pseudo parameter."""

    def __init__(self, element, name: str):
        super().__init__(
            f"Template has unresolved dependency '{name}' at {element.section}: {element.name}",
            (element.section, element.name),
        )
        self.element = element
        self.name = name

    def __str__(self):
        return self.message


class CircularDependencyError(TemplateError):
    """The dependency graph contains a cycle, so its elements cannot be ordered."""

    def __init__(self, cycle: List):
        names = " -> ".join(str(element) for element in cycle + cycle[:1])
        super().__init__(f"Circular dependency between elements: {names}")
        self.cycle = cycle
