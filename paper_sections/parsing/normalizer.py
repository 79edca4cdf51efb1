# paper_sections/parsing/normalizer.py

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from paper_sections.config.settings import settings
from paper_sections.parsing.tree import Element, TreeNode

logger = logging.getLogger(__name__)


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def collect_text_parts(node: TreeNode, max_depth: Optional[int] = None) -> List[str]:
    """
    Walk a node depth-first and return every non-empty text fragment, trimmed.

    An element's own text comes before the text of its children; children
    are visited in key order and list items in list order. Attributes are
    never visited, and values that are not text, elements or lists
    contribute nothing.

    The walk uses an explicit stack rather than recursion. Nodes nested
    deeper than ``max_depth`` elements (``settings.MAX_TREE_DEPTH`` by
    default) are skipped and a warning is logged.
    """
    if max_depth is None:
        max_depth = settings.MAX_TREE_DEPTH

    parts: List[str] = []
    truncated = False
    stack: List[Tuple[TreeNode, int]] = [(node, 0)]

    while stack:
        current, depth = stack.pop()

        if current is None:
            continue

        if depth > max_depth:
            truncated = True
            continue

        if isinstance(current, str):
            text = current.strip()
            if text:
                parts.append(text)

        elif isinstance(current, list):
            # Repeated elements sit at the same depth as a single one would
            stack.extend((item, depth) for item in reversed(current))

        elif isinstance(current, Element):
            if isinstance(current.own_text, str):
                text = current.own_text.strip()
                if text:
                    parts.append(text)
            if isinstance(current.children, dict):
                children = [(value, depth + 1) for value in current.children.values()]
                stack.extend(reversed(children))

    if truncated:
        logger.warning(
            "Tree deeper than %d levels; deeper text was skipped.", max_depth
        )

    return parts


def collect_text(node: TreeNode, max_depth: Optional[int] = None) -> str:
    """
    Collect all text beneath ``node`` into one whitespace-normalized string.

    Absent nodes give "". Never raises for any TreeNode input.
    """
    parts = collect_text_parts(node, max_depth=max_depth)
    return normalize_whitespace(" ".join(parts))
