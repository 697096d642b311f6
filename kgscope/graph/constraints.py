"""Cardinality constraint checking over the currently built graph.

The check is structural over what is visible: results change as filters, level
and node limit change.
"""

import logging
from collections import Counter
from typing import Dict, List, Sequence, Tuple

from ..schema import ConstraintRule, ConstraintTable, predicate_label
from .kg_core import GraphEdge, GraphNode, ViolationReport

logger = logging.getLogger(__name__)


def missing_message(predicate: str, count: int, rule: ConstraintRule) -> str:
    return f'Missing required "{predicate_label(predicate)}" ({count}/{rule.min})'


def too_many_message(predicate: str, count: int, rule: ConstraintRule) -> str:
    return f'Too many "{predicate_label(predicate)}" ({count}/{rule.max})'


def check_constraints(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    constraints: ConstraintTable,
) -> ViolationReport:
    """Compute per-node cardinality violations.

    For every node and every constrained predicate, outgoing edges carrying the
    predicate are counted; ``count < min`` yields a "Missing required" message
    and ``count > max`` a "Too many" message. Nodes without violations are
    absent from the report.

    Args:
        nodes: Graph nodes
        edges: Graph edges
        constraints: Predicate -> rule table

    Returns:
        Mapping node id -> ordered violation messages
    """
    outgoing: Dict[str, Counter] = {}
    for edge in edges:
        outgoing.setdefault(edge.source, Counter())[edge.predicate] += 1

    report: ViolationReport = {}
    for node in nodes:
        counts = outgoing.get(node.id, Counter())
        messages: List[str] = []
        for predicate, rule in constraints.items():
            count = counts[predicate]
            if count < rule.min:
                messages.append(missing_message(predicate, count, rule))
            if rule.max is not None and count > rule.max:
                messages.append(too_many_message(predicate, count, rule))
        if messages:
            report[node.id] = messages

    if report:
        total = sum(len(v) for v in report.values())
        logger.debug(f"Constraint check: {total} violations on {len(report)} of {len(nodes)} nodes")
    return report


def violation_counts(report: ViolationReport) -> Tuple[int, int]:
    """(nodes with violations, total violation messages)."""
    return len(report), sum(len(messages) for messages in report.values())
