"""
Render-ready model handed to the presentation layer.

Carries positions, fade/highlight flags, violation messages and display
metadata so a renderer can draw, label and tooltip without re-deriving any
domain logic.
"""

import json
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..schema import (
    DEFAULT_EDGE_COLOR,
    HIGHLIGHT_EDGE_COLOR,
    class_info,
    predicate_info,
    predicate_label,
)
from .kg_core import BuiltGraph, GraphEdge, HighlightSet, PositionedNode, ViolationReport

# Edge labels sit slightly off the edge midpoint.
LABEL_OFFSET_X = 6.0
LABEL_OFFSET_Y = -6.0


@dataclass
class RenderNode:
    id: str
    class_name: str
    is_aggregate: bool
    x: float
    y: float
    faded: bool = False
    highlighted: bool = False
    label: str = ""
    icon: str = ""
    color: str = ""
    violations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "class": self.class_name,
            "is_aggregate": self.is_aggregate,
            "x": self.x,
            "y": self.y,
            "faded": self.faded,
            "highlighted": self.highlighted,
            "label": self.label,
            "icon": self.icon,
            "color": self.color,
            "violations": list(self.violations),
        }


@dataclass
class LabelAnchor:
    """Where and at what angle (degrees) an edge label is drawn."""
    x: float
    y: float
    angle: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "angle": self.angle}


@dataclass
class RenderEdge:
    source: str
    target: str
    predicate: str
    level: int
    faded: bool = False
    highlighted: bool = False
    label: str = ""
    icon: str = ""
    color: str = DEFAULT_EDGE_COLOR
    anchor: Optional[LabelAnchor] = None

    @property
    def key(self):
        return (self.source, self.target, self.predicate)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "predicate": self.predicate,
            "level": self.level,
            "faded": self.faded,
            "highlighted": self.highlighted,
            "label": self.label,
            "icon": self.icon,
            "color": self.color,
            "anchor": self.anchor.to_dict() if self.anchor else None,
        }


@dataclass
class RenderModel:
    """One recomputation's output."""
    generation: int
    level: int
    nodes: List[RenderNode] = field(default_factory=list)
    edges: List[RenderEdge] = field(default_factory=list)
    violations: ViolationReport = field(default_factory=dict)
    query: str = ""
    search_active: bool = False
    task_label: Optional[str] = None
    iteration: int = 0
    settled: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get_node(self, node_id: str) -> Optional[RenderNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def stats(self) -> Dict[str, Any]:
        """Node/edge counts by class and predicate plus violation totals."""
        return {
            "node_count": len(self.nodes),
            "edge_count": len(self.edges),
            "classes": dict(Counter(n.class_name for n in self.nodes)),
            "predicates": dict(Counter(e.predicate for e in self.edges)),
            "nodes_with_violations": len(self.violations),
            "violation_count": sum(len(v) for v in self.violations.values()),
            "faded_nodes": sum(1 for n in self.nodes if n.faded),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation": self.generation,
            "level": self.level,
            "iteration": self.iteration,
            "settled": self.settled,
            "query": self.query,
            "search_active": self.search_active,
            "task": self.task_label,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "violations": {k: list(v) for k, v in self.violations.items()},
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def label_anchor(sx: float, sy: float, tx: float, ty: float) -> LabelAnchor:
    mx = (sx + tx) / 2
    my = (sy + ty) / 2
    angle = math.degrees(math.atan2(ty - sy, tx - sx))
    return LabelAnchor(mx + LABEL_OFFSET_X, my + LABEL_OFFSET_Y, angle)


def _edge_color(edge: GraphEdge, highlighted: bool) -> str:
    color = predicate_info(edge.predicate).color
    if color:
        return color
    return HIGHLIGHT_EDGE_COLOR if highlighted else DEFAULT_EDGE_COLOR


def assemble(
    graph: BuiltGraph,
    positions: Sequence[PositionedNode],
    violations: ViolationReport,
    search: HighlightSet,
    task: HighlightSet,
    *,
    generation: int = 0,
    query: str = "",
    task_label: Optional[str] = None,
    iteration: int = 0,
    settled: bool = False,
) -> RenderModel:
    """Combine the stage outputs into a RenderModel.

    ``positions`` must be parallel to ``graph.nodes``.
    """
    nodes: List[RenderNode] = []
    coords: Dict[str, tuple] = {}
    for node, pos in zip(graph.nodes, positions):
        info = class_info(node.class_name)
        coords[node.id] = (pos.x, pos.y)
        nodes.append(
            RenderNode(
                id=node.id,
                class_name=node.class_name,
                is_aggregate=node.is_aggregate,
                x=pos.x,
                y=pos.y,
                faded=search.is_faded_node(node.id),
                highlighted=task.active and node.id in task.nodes,
                label=f"{info.icon} {node.id}",
                icon=info.icon,
                color=info.color,
                violations=list(violations.get(node.id, [])),
            )
        )

    edges: List[RenderEdge] = []
    for edge in graph.edges:
        info = predicate_info(edge.predicate)
        highlighted = task.active and task.contains_edge(edge)
        anchor = None
        if edge.source in coords and edge.target in coords:
            anchor = label_anchor(*coords[edge.source], *coords[edge.target])
        edges.append(
            RenderEdge(
                source=edge.source,
                target=edge.target,
                predicate=edge.predicate,
                level=edge.level,
                faded=search.is_faded_edge(edge),
                highlighted=highlighted,
                label=predicate_label(edge.predicate),
                icon=info.icon,
                color=_edge_color(edge, highlighted),
                anchor=anchor,
            )
        )

    return RenderModel(
        generation=generation,
        level=graph.level,
        nodes=nodes,
        edges=edges,
        violations=violations,
        query=query,
        search_active=search.active,
        task_label=task_label,
        iteration=iteration,
        settled=settled,
    )
