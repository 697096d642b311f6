"""
Search overlay: highlighted vs. faded elements for a free-text node query.

Matched nodes are expanded by exactly one hop in either edge direction. Nodes
outside the expanded set are faded; an edge is faded unless both of its
endpoints are in the expanded set. Nothing is removed from the graph.
"""

import logging
from typing import Iterable, List, Sequence, Set

import networkx as nx

from .kg_core import GraphEdge, GraphNode, HighlightSet

logger = logging.getLogger(__name__)


def to_networkx(nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> nx.MultiDiGraph:
    """Convert a built graph to a NetworkX multigraph keyed by predicate."""
    G = nx.MultiDiGraph()
    for node in nodes:
        G.add_node(node.id, class_name=node.class_name, is_aggregate=node.is_aggregate)
    for edge in edges:
        G.add_edge(edge.source, edge.target, key=edge.predicate, level=edge.level)
    return G


def match_nodes(nodes: Iterable[GraphNode], query: str) -> List[str]:
    """Ids containing ``query`` as a case-insensitive substring, in node order."""
    needle = query.lower()
    return [n.id for n in nodes if needle in n.id.lower()]


def one_hop(G: nx.MultiDiGraph, seeds: Iterable[str]) -> Set[str]:
    """Seeds plus their direct neighbours (successors and predecessors). No further hops."""
    expanded: Set[str] = set()
    for node_id in seeds:
        expanded.add(node_id)
        expanded.update(G.successors(node_id))
        expanded.update(G.predecessors(node_id))
    return expanded


def search_highlight(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    query: str,
) -> HighlightSet:
    """Compute the highlight set for ``query``.

    Args:
        nodes: Graph nodes
        edges: Graph edges
        query: Free-text query; blank means no search

    Returns:
        Inactive HighlightSet for a blank query, otherwise the 1-hop neighbour
        set of matching nodes and the edges between them
    """
    if not query or not query.strip():
        return HighlightSet.inactive()

    G = to_networkx(nodes, edges)
    matched = match_nodes(nodes, query)
    expanded = one_hop(G, matched)
    kept_edges = frozenset(
        e.key for e in edges if e.source in expanded and e.target in expanded
    )
    logger.debug(f"Search {query!r}: {len(matched)} matches, {len(expanded)} highlighted nodes")
    return HighlightSet(frozenset(expanded), kept_edges, active=True)
