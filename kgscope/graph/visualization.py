"""
Render Model Visualization Module

Provides exports of a computed render model in multiple formats:
- D3.js force-graph JSON (nodes + index-based links)
- Mermaid text format
- PyVis HTML format (positions fixed from the layout engine)
- Node and edge tooltip text
"""

from typing import Any, Dict, Optional
from pathlib import Path

from ..schema import ConstraintTable, class_info, predicate_info
from .render_model import RenderEdge, RenderModel, RenderNode

FADED_OPACITY = 0.1


def node_tooltip(node: RenderNode) -> str:
    """Tooltip text for a node: icon, id, class, explanation, violations."""
    info = class_info(node.class_name)
    lines = [f"{info.icon} {node.id}".strip(), f"Type: {node.class_name}"]
    if info.explanation:
        lines.append(info.explanation)
    if node.violations:
        lines.append("Violations:")
        lines.extend(f"- {v}" for v in node.violations)
    return "\n".join(lines)


def edge_tooltip(edge: RenderEdge, constraints: Optional[ConstraintTable] = None) -> str:
    """Tooltip text for an edge: icon, label, explanation, constraint."""
    info = predicate_info(edge.predicate)
    lines = [f"{edge.icon} {edge.label}".strip()]
    if info.explanation:
        lines.append(info.explanation)
    rule = constraints.get(edge.predicate) if constraints is not None else None
    if rule is not None and rule.description:
        lines.append(f"Constraint: {rule.description}")
    return "\n".join(lines)


class GraphVisualizer:
    """Render model visualizer for multiple export formats."""

    def __init__(self, model: RenderModel, constraints: Optional[ConstraintTable] = None):
        self.model = model
        self.constraints = constraints

    def to_d3_json(self) -> Dict[str, Any]:
        """Export to D3.js force-directed graph format.

        Links refer to nodes by index into the "nodes" array.
        """
        index = {node.id: i for i, node in enumerate(self.model.nodes)}
        nodes = []
        for node in self.model.nodes:
            nodes.append({
                "id": node.id,
                "name": node.label,
                "type": node.class_name,
                "color": node.color,
                "x": node.x,
                "y": node.y,
                "opacity": FADED_OPACITY if node.faded else 1.0,
                "violations": list(node.violations),
                "title": node_tooltip(node),
            })

        links = []
        for edge in self.model.edges:
            if edge.source not in index or edge.target not in index:
                continue
            links.append({
                "source": index[edge.source],
                "target": index[edge.target],
                "type": edge.predicate,
                "label": f"{edge.icon} {edge.label}".strip(),
                "level": edge.level,
                "color": edge.color,
                "highlighted": edge.highlighted,
                "opacity": FADED_OPACITY if edge.faded else 1.0,
                "title": edge_tooltip(edge, self.constraints),
            })

        return {"nodes": nodes, "links": links}

    def to_mermaid(self, direction: str = "LR") -> str:
        """Export to Mermaid diagram format."""
        lines = [f"graph {direction}"]

        node_id_map = {node.id: f"N{i}" for i, node in enumerate(self.model.nodes)}

        for node in self.model.nodes:
            safe_id = node_id_map[node.id]
            label = f"{node.id}<br/>({node.class_name})".replace('"', "'")
            lines.append(f'    {safe_id}["{label}"]')
            style = f"fill:{node.color},stroke:#fff,stroke-width:2px"
            if node.faded:
                style += ",opacity:0.1"
            if node.violations:
                style = style.replace("stroke:#fff", "stroke:#d32f2f")
            lines.append(f"    style {safe_id} {style}")

        for edge in self.model.edges:
            source_safe = node_id_map.get(edge.source, edge.source)
            target_safe = node_id_map.get(edge.target, edge.target)
            label = edge.label.replace('"', "'")
            arrow = "-.->" if edge.faded else "-->"
            lines.append(f'    {source_safe} {arrow}|"{label}"| {target_safe}')

        return "\n".join(lines)

    def save_mermaid(self, filepath: str, direction: str = "LR") -> None:
        """Save Mermaid diagram to file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_mermaid(direction=direction), encoding="utf-8")

    def to_pyvis_html(self, height: str = "800px", width: str = "100%") -> str:
        """Export to PyVis HTML format.

        Node coordinates come from the layout engine, so PyVis physics is disabled.
        """
        try:
            import pyvis.network as net
        except ImportError:
            raise ImportError("PyVis is required. Install with: pip install pyvis")

        g = net.Network(height=height, width=width, directed=True, notebook=False)
        g.toggle_physics(False)

        for node in self.model.nodes:
            g.add_node(
                node.id,
                label=node.label,
                color=node.color,
                title=node_tooltip(node),
                x=node.x,
                y=node.y,
                size=30,
                opacity=FADED_OPACITY if node.faded else 1.0,
                borderWidth=4 if node.violations else 2,
            )

        for edge in self.model.edges:
            g.add_edge(
                edge.source,
                edge.target,
                label=f"{edge.icon} {edge.label}".strip(),
                color=edge.color,
                title=edge_tooltip(edge, self.constraints),
                width=3,
                dashes=edge.faded,
            )

        return g.generate_html()

    def save_pyvis_html(self, filepath: str, height: str = "800px", width: str = "100%") -> None:
        """Save PyVis HTML visualization to file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_pyvis_html(height=height, width=width), encoding="utf-8")
