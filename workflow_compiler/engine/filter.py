"""Removal of presentation-only nodes from editor graphs."""
import logging
from typing import AbstractSet

from .graph import EditorGraph

logger = logging.getLogger(__name__)


def filter_ui_nodes(graph: EditorGraph, ui_types: AbstractSet[str]) -> EditorGraph:
    """Return a copy of ``graph`` without nodes whose type is in ``ui_types``.

    Links survive only when both endpoints survive. A removed node that sat
    between two execution nodes is not bridged: the path through it is lost.
    """
    nodes = tuple(node for node in graph.nodes if node.type not in ui_types)
    kept = {node.id for node in nodes}
    links = tuple(
        link for link in graph.links
        if link.source_node in kept and link.target_node in kept
    )

    dropped = len(graph.nodes) - len(nodes)
    if dropped:
        logger.debug(
            "Filtered %d UI-only nodes and %d links (%d nodes remain)",
            dropped, len(graph.links) - len(links), len(nodes),
        )
    return EditorGraph(nodes=nodes, links=links)
