"""
Generic tree built from an lxml element, and null-tolerant navigation over it.

A tree value is a string (leaf), a dict (element with attributes or children)
or a list (repeated sibling elements).
"""
from typing import Any, Iterable, List, Optional
from lxml import etree

TEXT_KEY = "_"


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def _add(node: dict, key: str, value: Any) -> None:
    """Insert a child, turning repeated names into ordered lists."""
    if key not in node:
        node[key] = value
    elif isinstance(node[key], list):
        node[key].append(value)
    else:
        node[key] = [node[key], value]


def build_tree(element: etree._Element) -> Any:
    """
    Convert an element into a tree value.

    Elements without attributes or child elements collapse to their stripped
    text. Everything else becomes a dict with attributes merged in as keys and
    the element's own text (if any) under "_".
    """
    children = [child for child in element if isinstance(child.tag, str)]
    text = (element.text or "").strip()

    if not children and not element.attrib:
        return text

    node: dict = {}
    for name, value in element.attrib.items():
        _add(node, _local_name(name), value)
    for child in children:
        _add(node, _local_name(child.tag), build_tree(child))
    if text:
        node[TEXT_KEY] = text
    return node


def get(node: Any, path: Iterable[str], fallback: Any = None) -> Any:
    """
    Follow a path of child names, returning fallback as soon as a step is missing.

    When an intermediate value is a list, navigation continues through its
    first element. The value at the end of the path is returned as-is, so a
    repeated leaf comes back as a list.
    """
    current = node
    for key in path:
        if isinstance(current, list):
            current = current[0] if current else None
        if not isinstance(current, dict):
            return fallback
        current = current.get(key)
        if current is None:
            return fallback
    return current


def as_list(value: Any) -> List[Any]:
    """Normalize a possibly-single repeatable value into a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_of(value: Any) -> Optional[str]:
    """Plain text of a leaf, a value-holder dict or a list of leaves."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return text_of(value.get(TEXT_KEY))
    if isinstance(value, list):
        parts = [text_of(item) for item in value]
        return " ".join(part for part in parts if part)
    return str(value)
