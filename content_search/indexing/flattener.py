"""Flattening of the remote content tree into cache records."""

import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..models import ContentRecord

logger = logging.getLogger(__name__)

Transform = Callable[[Mapping[str, Any], Optional[str]], ContentRecord]

DEFAULT_MAX_DEPTH = 64


def get_children(node: Mapping[str, Any]) -> List[Any]:
    """Get the children of a node, treating anything but a list as no children."""
    children = node.get("children")
    return children if isinstance(children, list) else []


def flatten(
    path_list: Optional[Sequence[Any]],
    transform: Transform,
    type_tag: Optional[str] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[ContentRecord]:
    """Flatten a remote tree into a list of records.

    Only nodes with at least one child become records; leaves are visited but not
    indexed. Records come out in pre-order.

    Args:
        path_list: Root nodes of the tree
        transform: Turns a node into a record
        type_tag: Type tag passed through to the transform
        max_depth: Deepest level that is still visited

    Returns:
        Flattened records
    """
    if not path_list:
        logger.warning("Nothing to flatten, path list is empty")
        return []

    records: List[ContentRecord] = []
    visiting = set()
    # (node, depth, leaving) entries; leaving entries release a node from the cycle check
    stack = [(node, 1, False) for node in reversed(path_list)]

    while stack:
        node, depth, leaving = stack.pop()
        if leaving:
            visiting.discard(id(node))
            continue

        if not isinstance(node, Mapping):
            logger.warning(f"Skipping malformed node of type {type(node).__name__}")
            continue
        if depth > max_depth:
            logger.warning(f"Skipping subtree deeper than {max_depth} levels")
            continue
        if id(node) in visiting:
            logger.warning("Skipping cyclic node reference")
            continue

        children = get_children(node)
        if not children:
            continue

        try:
            records.append(transform(node, type_tag))
        except Exception as e:
            logger.warning(f"Failed to transform node: {e}")

        visiting.add(id(node))
        stack.append((node, depth, True))
        stack.extend((child, depth + 1, False) for child in reversed(children))

    return records
