import heapq
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from stackshape import config
from stackshape.constants import (
    PSEUDO_PARAMETER_PREFIX,
    SECTION_OUTPUTS,
    SECTION_PARAMETERS,
    SECTION_PSEUDO_PARAMETERS,
    SECTION_RESOURCES,
    TEMPLATE_PATH_LOG_ATTRIBUTE,
)
from stackshape.engine.exceptions import CircularDependencyError, UnresolvedDependencyError
from stackshape.engine.references import get_depends_on, get_refs

LOG = logging.getLogger(__name__)

# sections whose entries can be referenced, in scan order (on name collisions the later section wins)
DECLARING_SECTIONS = (SECTION_PARAMETERS, SECTION_RESOURCES)

# sections whose entries are scanned for references
REFERENCING_SECTIONS = (SECTION_RESOURCES, SECTION_OUTPUTS)


@dataclass(frozen=True, order=True)
class Element:
    """A top-level entry of a template, e.g. a resource, parameter, or output."""

    # name of the entry within its section
    name: str
    # top-level section that contains the entry (e.g. Resources, Parameters)
    section: str

    def __str__(self):
        return f"{self.section}/{self.name}"


class Graph:
    """
    Directed graph of template elements. An edge ``a -> b`` means that ``a`` references ``b``.
    Adding a node or an edge that is already present has no effect.
    """

    def __init__(self):
        self._dependencies: Dict[Element, Dict[Element, None]] = {}

    def add(self, node: Element, *dependencies: Element) -> None:
        """Registers ``node`` and adds an edge from it to each of ``dependencies``."""
        self._dependencies.setdefault(node, {})
        for dependency in dependencies:
            self._dependencies.setdefault(dependency, {})
            self._dependencies[node][dependency] = None

    def get(self, node: Element) -> List[Element]:
        """Returns the direct dependencies of ``node``, sorted."""
        return sorted(self._dependencies.get(node, {}))

    def dependents(self, node: Element) -> List[Element]:
        """Returns the nodes that directly depend on ``node``, sorted."""
        return sorted(
            source for source, targets in self._dependencies.items() if node in targets
        )

    def edges(self) -> List[Tuple[Element, Element]]:
        return sorted(
            (source, target)
            for source, targets in self._dependencies.items()
            for target in targets
        )

    def nodes(self) -> List[Element]:
        """
        Returns all nodes so that every node comes after the nodes it depends on. Among the nodes that could go next,
        the smallest by ``(name, section)`` is picked, so the order is fully determined by the graph's contents.

        :raises CircularDependencyError: if the graph contains a cycle
        """
        remaining = {node: len(targets) for node, targets in self._dependencies.items()}
        dependents: Dict[Element, List[Element]] = {node: [] for node in self._dependencies}
        for source, targets in self._dependencies.items():
            for target in targets:
                dependents[target].append(source)

        ready = [node for node, count in remaining.items() if count == 0]
        heapq.heapify(ready)
        result = []
        while ready:
            node = heapq.heappop(ready)
            result.append(node)
            for dependent in dependents[node]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, dependent)

        if len(result) < len(self._dependencies):
            raise CircularDependencyError(self.find_cycle())
        return result

    def find_cycle(self) -> Optional[List[Element]]:
        """Returns the nodes of one cycle in the graph (in edge direction), or None if the graph is acyclic."""
        visited = set()

        for start in sorted(self._dependencies):
            if start in visited:
                continue
            # iterative depth-first search, the stack holds the current path
            stack = [(start, iter(self.get(start)))]
            on_path = {start: 0}
            visited.add(start)
            while stack:
                node, targets = stack[-1]
                target = next(targets, None)
                if target is None:
                    stack.pop()
                    on_path.pop(node)
                    continue
                if target in on_path:
                    return [entry for entry, _ in stack[on_path[target] :]]
                if target not in visited:
                    visited.add(target)
                    on_path[target] = len(stack)
                    stack.append((target, iter(self.get(target))))
        return None

    def __contains__(self, node):
        return node in self._dependencies

    def __len__(self):
        return len(self._dependencies)

    def __repr__(self):
        return f"Graph(nodes={len(self)}, edges={len(self.edges())})"


def index_elements(template: Dict[str, Any]) -> Dict[str, str]:
    """Maps the names of all parameters and resources to the section that declares them."""
    elements = {}
    for section in DECLARING_SECTIONS:
        entries = template.get(section)
        if not isinstance(entries, dict):
            continue
        for name in entries:
            if name in elements:
                LOG.warning(
                    "Element name %s is declared in both %s and %s, using %s",
                    name,
                    elements[name],
                    section,
                    section,
                    extra={TEMPLATE_PATH_LOG_ATTRIBUTE: (section, name)},
                )
            elements[name] = section
    return elements


def resolve_element(source: Element, name: str, elements: Dict[str, str]) -> Element:
    """
    Resolves a referenced name (with any attribute suffix removed) to the element it denotes.

    :raises UnresolvedDependencyError: if the name is neither declared nor a pseudo parameter
    """
    name = name.split(".")[0]
    section = elements.get(name)
    if section:
        return Element(name, section)
    if name.startswith(PSEUDO_PARAMETER_PREFIX):
        return Element(name, SECTION_PSEUDO_PARAMETERS)
    raise UnresolvedDependencyError(source, name)


def get_referenced_names(section: str, entry: Any) -> List[str]:
    names = get_refs(entry, scan_sub=config.CFN_SCAN_SUB_REFERENCES)
    if section == SECTION_RESOURCES and config.CFN_DEPENDS_ON_EDGES:
        names += get_depends_on(entry)
    return names


def build_graph(
    template: Dict[str, Any], errors: Optional[List[UnresolvedDependencyError]] = None
) -> Graph:
    """
    Builds the dependency graph of a decoded template.

    :param template: the decoded template
    :param errors: if given, unresolved references are appended to this list (and left out of the graph) instead of
        being raised, so that all of them can be reported at once
    :return: the graph of resources and outputs and the elements they reference
    :raises UnresolvedDependencyError: for the first unresolved reference, if ``errors`` is None
    """
    elements = index_elements(template)
    graph = Graph()

    for section in REFERENCING_SECTIONS:
        entries = template.get(section)
        if not isinstance(entries, dict):
            continue
        for name, entry in entries.items():
            source = Element(name, section)
            graph.add(source)
            for referenced in get_referenced_names(section, entry):
                try:
                    target = resolve_element(source, referenced, elements)
                except UnresolvedDependencyError as e:
                    if errors is None:
                        raise
                    LOG.debug(
                        "Skipping unresolved reference: %s", e, extra={TEMPLATE_PATH_LOG_ATTRIBUTE: e.path}
                    )
                    errors.append(e)
                    continue
                graph.add(source, target)

    return graph


def find_unresolved_dependencies(template: Dict[str, Any]) -> List[UnresolvedDependencyError]:
    """Returns an error for every reference in the decoded template that cannot be resolved."""
    errors: List[UnresolvedDependencyError] = []
    build_graph(template, errors)
    return errors

