"""
Scanning of intrinsic functions that make one template element depend on another.
"""

import re
from typing import Any, Dict, Iterator, List

INTRINSIC_REF = "Ref"
INTRINSIC_GET_ATT = "Fn::GetAtt"
INTRINSIC_SUB = "Fn::Sub"

ATTRIBUTE_DEPENDS_ON = "DependsOn"

# matches ${Name} and ${Name.Attribute}, but not the escaped literal ${!Name}
SUB_PLACEHOLDER_REGEX = re.compile(r"\$\{([^!}][^}]*)\}")


def get_refs(value: Any, scan_sub: bool = True) -> List[str]:
    """
    Collects the names referenced in ``value``, recursing through all nested mappings and sequences.

    Recognized forms are ``{"Ref": "Name"}``, ``{"Fn::GetAtt": ["Name", "Attribute"]}``,
    ``{"Fn::GetAtt": "Name.Attribute"}`` and, if ``scan_sub`` is set, the placeholders of ``Fn::Sub`` strings.
    Names are returned in document order as written, i.e., ``Name.Attribute`` for the string form of ``Fn::GetAtt``.

    :param value: decoded template fragment (dict, list or primitive)
    :param scan_sub: whether to include ``Fn::Sub`` placeholders
    :return: the referenced names, possibly with duplicates
    """
    return list(_iter_refs(value, scan_sub))


def _iter_refs(value: Any, scan_sub: bool) -> Iterator[str]:
    if isinstance(value, list):
        for item in value:
            yield from _iter_refs(item, scan_sub)
        return
    if not isinstance(value, dict):
        return

    if len(value) == 1:
        key, argument = next(iter(value.items()))
        if key == INTRINSIC_REF and isinstance(argument, str):
            yield argument
            return
        if key == INTRINSIC_GET_ATT:
            if isinstance(argument, str):
                yield argument
                return
            if isinstance(argument, list) and len(argument) == 2 and isinstance(argument[0], str):
                yield argument[0]
                # the attribute name may itself be computed
                yield from _iter_refs(argument[1], scan_sub)
                return
        if key == INTRINSIC_SUB and scan_sub:
            yield from _iter_sub_refs(argument, scan_sub)
            return

    for item in value.values():
        yield from _iter_refs(item, scan_sub)


def _iter_sub_refs(argument: Any, scan_sub: bool) -> Iterator[str]:
    variables: Dict[str, Any] = {}
    if isinstance(argument, list) and argument and isinstance(argument[0], str):
        string = argument[0]
        if len(argument) > 1 and isinstance(argument[1], dict):
            variables = argument[1]
        for item in argument[1:]:
            # only the values of the variable map are template fragments, its keys are plain names
            if isinstance(item, dict):
                item = list(item.values())
            yield from _iter_refs(item, scan_sub)
    elif isinstance(argument, str):
        string = argument
    else:
        yield from _iter_refs(argument, scan_sub)
        return

    for placeholder in SUB_PLACEHOLDER_REGEX.findall(string):
        name = placeholder.strip()
        if name.split(".")[0] in variables:
            continue
        yield name


def get_depends_on(resource: Any) -> List[str]:
    """Returns the names listed in the ``DependsOn`` attribute of a resource definition."""
    if not isinstance(resource, dict):
        return []
    depends_on = resource.get(ATTRIBUTE_DEPENDS_ON)
    if isinstance(depends_on, str):
        return [depends_on]
    if isinstance(depends_on, list):
        return [name for name in depends_on if isinstance(name, str)]
    return []
