"""
Graph Core - node/edge model shared by every pipeline stage

This module provides:
- Nodes (class aggregates or concrete entities)
- Edges tagged with their semantic level
- The built graph container with deterministic ordering
- Highlight sets and violation reports produced by the overlay stages
"""

from typing import List, Dict, Any, Optional, Tuple, FrozenSet
from dataclasses import dataclass, field
import json

from ..schema import UNKNOWN_CLASS


# (source, target, predicate)
EdgeKey = Tuple[str, str, str]

# node id -> ordered violation messages
ViolationReport = Dict[str, List[str]]

LEVEL_CLASS = 1
LEVEL_ENTITY = 2
SEMANTIC_LEVELS = (LEVEL_CLASS, LEVEL_ENTITY)

EDGE_LEVEL_CLASS = 1
EDGE_LEVEL_RELATION = 2
EDGE_LEVEL_TYPE = 3


@dataclass(frozen=True)
class GraphNode:
    """
    Graph Node.

    Attributes:
        id: Unique identifier (entity id, or class name for aggregates)
        class_name: Resolved class, "Unknown" if unresolved
        is_aggregate: True when the node stands for a whole class (level 1)
    """
    id: str
    class_name: str = UNKNOWN_CLASS
    is_aggregate: bool = False

    def __post_init__(self):
        """Validate node data."""
        if not self.id:
            raise ValueError("Node id cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "class": self.class_name,
            "is_aggregate": self.is_aggregate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphNode":
        """Create from dictionary representation."""
        return cls(
            id=data["id"],
            class_name=data.get("class", UNKNOWN_CLASS),
            is_aggregate=data.get("is_aggregate", False),
        )


@dataclass(frozen=True)
class GraphEdge:
    """
    Graph Edge.

    ``level`` tags the semantic weight for rendering: 1 = class-to-class,
    2 = entity-to-entity relation, 3 = entity ``type`` edge.
    """
    source: str
    target: str
    predicate: str
    level: int = EDGE_LEVEL_RELATION

    def __post_init__(self):
        """Validate edge data."""
        if not self.source or not self.target:
            raise ValueError("Edge source and target cannot be empty")
        if not self.predicate:
            raise ValueError("Edge predicate cannot be empty")
        if self.level not in (EDGE_LEVEL_CLASS, EDGE_LEVEL_RELATION, EDGE_LEVEL_TYPE):
            raise ValueError(f"Edge level must be 1, 2 or 3, got {self.level!r}")

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target, self.predicate)

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "source": self.source,
            "target": self.target,
            "predicate": self.predicate,
            "level": self.level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphEdge":
        """Create from dictionary representation."""
        return cls(
            source=data["source"],
            target=data["target"],
            predicate=data["predicate"],
            level=data.get("level", EDGE_LEVEL_RELATION),
        )


@dataclass
class BuiltGraph:
    """
    Node/edge graph at one semantic level.

    Nodes and edges are kept as flat lists in first-seen order; downstream
    stages refer to nodes by id (or by list index), never by object identity.
    """
    level: int
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def __post_init__(self):
        if self.level not in SEMANTIC_LEVELS:
            raise ValueError(f"Semantic level must be 1 or 2, got {self.level!r}")

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def index_of(self) -> Dict[str, int]:
        """Map node id -> position in ``nodes``."""
        return {n.id: i for i, n in enumerate(self.nodes)}

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def outgoing(self, node_id: str) -> List[GraphEdge]:
        return [e for e in self.edges if e.source == node_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    def to_json(self, indent: int = 2) -> str:
        """Export to JSON format."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


@dataclass(frozen=True)
class HighlightSet:
    """
    Highlighted node ids and edge keys.

    ``active`` is False when no search/task is in effect; in that case nothing
    is faded. When active, any graph element outside the sets is faded.
    """
    nodes: FrozenSet[str] = frozenset()
    edges: FrozenSet[EdgeKey] = frozenset()
    active: bool = False

    @classmethod
    def inactive(cls) -> "HighlightSet":
        return cls()

    def is_faded_node(self, node_id: str) -> bool:
        return self.active and node_id not in self.nodes

    def is_faded_edge(self, edge: GraphEdge) -> bool:
        return self.active and edge.key not in self.edges

    def contains_edge(self, edge: GraphEdge) -> bool:
        return edge.key in self.edges

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active": self.active,
            "nodes": sorted(self.nodes),
            "edges": [list(k) for k in sorted(self.edges)],
        }


@dataclass
class PositionedNode:
    """GraphNode plus the coordinates assigned by the layout engine."""
    node: GraphNode
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.node.id

    def to_dict(self) -> Dict[str, Any]:
        return {**self.node.to_dict(), "x": self.x, "y": self.y}
