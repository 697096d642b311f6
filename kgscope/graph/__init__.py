"""
Graph Module

This module provides:
- Graph model (nodes, edges, highlight sets)
- Filter pipeline and guided tasks
- Graph builders (class-aggregate and entity levels)
- Constraint checking
- Search overlay
- Force-directed layout
- Render model and exports (D3, Mermaid, PyVis)
"""

# Graph Core
from .kg_core import (
    GraphNode,
    GraphEdge,
    BuiltGraph,
    HighlightSet,
    PositionedNode,
    ViolationReport,
)

# Filters
from .filters import (
    ALL,
    DOMAIN_MODULES,
    FilterSelection,
    UnknownClassError,
    apply_filters,
    check_class,
    class_options,
    instance_options,
    module_options,
)

# Guided Tasks
from .guided_tasks import (
    ClauseKind,
    TaskClause,
    GuidedTask,
    GUIDED_TASKS,
    get_task,
    task_highlight,
    task_options,
)

# Builders
from .builders import build_graph, build_class_graph, build_entity_graph

# Constraints
from .constraints import check_constraints

# Search
from .search import search_highlight

# Layout
from .layout import ForceLayout, ForceParams, layout

# Render model
from .render_model import RenderModel, RenderNode, RenderEdge, assemble

# Visualization
from .visualization import GraphVisualizer, node_tooltip, edge_tooltip

__all__ = [
    # Graph Core
    "GraphNode",
    "GraphEdge",
    "BuiltGraph",
    "HighlightSet",
    "PositionedNode",
    "ViolationReport",
    # Filters
    "ALL",
    "DOMAIN_MODULES",
    "FilterSelection",
    "apply_filters",
    "UnknownClassError",
    "check_class",
    "class_options",
    "instance_options",
    "module_options",
    # Guided Tasks
    "ClauseKind",
    "TaskClause",
    "GuidedTask",
    "GUIDED_TASKS",
    "get_task",
    "task_highlight",
    "task_options",
    # Builders
    "build_graph",
    "build_class_graph",
    "build_entity_graph",
    # Constraints
    "check_constraints",
    # Search
    "search_highlight",
    # Layout
    "ForceLayout",
    "ForceParams",
    "layout",
    # Render model
    "RenderModel",
    "RenderNode",
    "RenderEdge",
    "assemble",
    # Visualization
    "GraphVisualizer",
    "node_tooltip",
    "edge_tooltip",
]
