# paper_sections/parsing/tree.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union
import xml.etree.ElementTree as ET


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


@dataclass
class Element:
    """
    One parsed XML element with its direct text, attributes and children.

    Attributes
    ----------
    own_text:
        Direct text of the element (its leading text plus the tails of its
        children), excluding the text of child elements. None if the element
        has no non-whitespace direct text.
    attributes:
        Attribute values by local name. Never part of extracted text.
    children:
        Child elements by local tag name, in document order of first
        occurrence. A tag that occurred once maps to a bare node, a tag that
        occurred several times maps to a list of nodes.
    """

    own_text: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    children: Dict[str, "TreeNode"] = field(default_factory=dict)


# A parsed node: plain text, an element, a repeated element, or absent.
TreeNode = Union[str, Element, List["TreeNode"], None]


class TeiParseError(ValueError):
    """
    Raised when a TEI document is not well-formed XML.
    """


# ---------------------------------------------------------------------------
# Cardinality helpers
# ---------------------------------------------------------------------------


def as_list(value: TreeNode) -> List[TreeNode]:
    """
    Normalize a field value to a list: absent -> [], single -> [value].
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def first(value: TreeNode) -> TreeNode:
    """
    First node of a field value, or None. A bare node is its own first node.
    """
    items = as_list(value)
    return items[0] if items else None


def own_text(node: TreeNode):
    """
    Direct text of a node: the string itself for text nodes, the element's
    own_text for elements, None for anything else.
    """
    if isinstance(node, str):
        return node
    if isinstance(node, Element):
        return node.own_text
    return None


# ---------------------------------------------------------------------------
# XML -> tree conversion
# ---------------------------------------------------------------------------


def _local_name(tag: str) -> str:
    """Strip a '{namespace}' prefix from a tag or attribute name."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _direct_text(el: ET.Element) -> Optional[str]:
    pieces = [el.text or ""]
    for child in el:
        pieces.append(child.tail or "")
    text = "".join(pieces)
    return text if text.strip() else None


def _new_node(el: ET.Element):
    """
    Node for ``el`` plus the element children still to be converted into it.
    """
    attributes = {_local_name(k): v for k, v in el.attrib.items()}
    # Comments / processing instructions have non-string tags
    element_children = [child for child in el if isinstance(child.tag, str)]

    # Leaf without attributes collapses to its text
    if not attributes and not element_children:
        return el.text or "", []

    return Element(own_text=_direct_text(el), attributes=attributes), element_children


def _add_child(children: Dict[str, TreeNode], name: str, node: TreeNode) -> None:
    if name not in children:
        children[name] = node
    elif isinstance(children[name], list):
        children[name].append(node)  # type: ignore[union-attr]
    else:
        children[name] = [children[name], node]


def _convert(root: ET.Element) -> TreeNode:
    # Explicit stack, so nesting depth is not bounded by the recursion limit
    node, pending = _new_node(root)
    stack = [(node, pending)] if pending else []

    while stack:
        parent, element_children = stack.pop()
        # Every child is attached in document order before any is filled in
        for child in element_children:
            child_node, grandchildren = _new_node(child)
            _add_child(parent.children, _local_name(child.tag), child_node)
            if grandchildren:
                stack.append((child_node, grandchildren))

    return node


def from_xml(xml_text: Union[str, bytes]) -> Element:
    """
    Parse XML text into a TreeNode graph.

    The result is a wrapper Element whose only child is the document's root
    element, keyed by its local name (e.g. ``wrapper.children["TEI"]``).
    Elements that occur once under a parent become bare nodes, repeated
    elements become lists, and namespace URIs are dropped from names.
    """
    try:
        # An XML declaration must be the very first thing in the document
        root = ET.fromstring(xml_text.lstrip())
    except ET.ParseError as exc:
        raise TeiParseError(f"Invalid TEI XML: {exc}") from exc

    return Element(children={_local_name(root.tag): _convert(root)})
