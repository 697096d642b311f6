"""Graph builders.

Converts a filtered triple subset into a node/edge graph at one of two
semantic levels:
- Level 1 (class aggregate): one node per class, one edge per distinct
  (subject class, object class, predicate) relation between two classes.
- Level 2 (entity): one node per entity, truncated to the first ``node_limit``
  entities in first-seen order.

Ordering is always first-seen / insertion order so repeated builds are identical.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..schema import UNKNOWN_CLASS
from ..store import Triple
from .kg_core import (
    BuiltGraph,
    GraphEdge,
    GraphNode,
    EDGE_LEVEL_CLASS,
    EDGE_LEVEL_RELATION,
    EDGE_LEVEL_TYPE,
    LEVEL_CLASS,
    LEVEL_ENTITY,
    SEMANTIC_LEVELS,
)

logger = logging.getLogger(__name__)

ClassResolver = Callable[[str], str]


def validate_node_limit(node_limit: object) -> int:
    """Reject anything that is not a positive integer."""
    if isinstance(node_limit, bool) or not isinstance(node_limit, int):
        raise ValueError(f"node_limit must be a positive integer, got {node_limit!r}")
    if node_limit < 1:
        raise ValueError(f"node_limit must be >= 1, got {node_limit}")
    return node_limit


def build_class_graph(
    triples: Sequence[Triple],
    class_map: Dict[str, str],
) -> BuiltGraph:
    """Build the level-1 class-aggregate graph."""
    classes = list(dict.fromkeys(t.object for t in triples if t.is_type))
    present = set(classes)
    nodes = [GraphNode(id=c, class_name=c, is_aggregate=True) for c in classes]

    seen: Dict[Tuple[str, str, str], GraphEdge] = {}
    for t in triples:
        if t.is_type:
            continue
        s_cls = class_map.get(t.subject)
        o_cls = class_map.get(t.object)
        if s_cls is None or o_cls is None or s_cls == o_cls:
            continue
        if s_cls not in present or o_cls not in present:
            continue
        key = (s_cls, o_cls, t.predicate)
        if key not in seen:
            seen[key] = GraphEdge(s_cls, o_cls, t.predicate, level=EDGE_LEVEL_CLASS)

    return BuiltGraph(level=LEVEL_CLASS, nodes=nodes, edges=list(seen.values()))


def build_entity_graph(
    triples: Sequence[Triple],
    node_limit: int,
    resolve_class: ClassResolver,
    *,
    include_type_edges: bool = False,
) -> BuiltGraph:
    """Build the level-2 entity graph, hard-capped at ``node_limit`` entities.

    Entities beyond the cap, and every edge touching them, are dropped.
    ``type`` triples contribute neither nodes nor edges unless
    ``include_type_edges`` is set.
    """
    node_limit = validate_node_limit(node_limit)
    relevant = [t for t in triples if include_type_edges or not t.is_type]

    entity_ids: Dict[str, None] = {}
    for t in relevant:
        entity_ids.setdefault(t.subject)
        entity_ids.setdefault(t.object)
    visible = list(entity_ids)[:node_limit]
    visible_set = set(visible)

    nodes = [GraphNode(id=eid, class_name=resolve_class(eid) or UNKNOWN_CLASS) for eid in visible]
    edges = [
        GraphEdge(
            t.subject,
            t.object,
            t.predicate,
            level=EDGE_LEVEL_TYPE if t.is_type else EDGE_LEVEL_RELATION,
        )
        for t in relevant
        if t.subject in visible_set and t.object in visible_set
    ]
    if len(entity_ids) > node_limit:
        logger.debug(f"Entity graph truncated: {len(entity_ids)} entities, limit {node_limit}")
    return BuiltGraph(level=LEVEL_ENTITY, nodes=nodes, edges=edges)


def build_graph(
    triples: Sequence[Triple],
    level: int,
    node_limit: int,
    class_map: Dict[str, str],
    *,
    resolve_class: Optional[ClassResolver] = None,
    include_type_edges: bool = False,
) -> BuiltGraph:
    """Build the graph for ``level``.

    Args:
        triples: Filtered triples
        level: 1 (class aggregate) or 2 (entity)
        node_limit: Entity cap for level 2 (must be >= 1)
        class_map: Entity id -> class name
        resolve_class: Optional class resolver for level-2 nodes; defaults to a
            class_map lookup with "Unknown" fallback
        include_type_edges: Emit level-3 ``type`` edges at level 2

    Returns:
        BuiltGraph (possibly empty)
    """
    if level not in SEMANTIC_LEVELS:
        raise ValueError(f"Semantic level must be 1 or 2, got {level!r}")
    validate_node_limit(node_limit)

    if level == LEVEL_CLASS:
        graph = build_class_graph(triples, class_map)
    else:
        resolver = resolve_class or (lambda eid: class_map.get(eid, UNKNOWN_CLASS))
        graph = build_entity_graph(
            triples,
            node_limit,
            resolver,
            include_type_edges=include_type_edges,
        )

    if graph.is_empty:
        logger.warning(f"Level {level} graph is empty ({len(triples)} filtered triples)")
    else:
        logger.debug(f"Built level {level} graph: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
    return graph
