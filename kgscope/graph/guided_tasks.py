"""Guided tasks: named, pre-built triple filters exposed as one-click queries.

Each task is data (a tagged list of clauses) rather than an opaque callable, so
the catalog can be enumerated, serialized and tested clause by clause.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Any

from ..store import Triple
from .kg_core import HighlightSet


class ClauseKind(Enum):
    SUBJECT_IS = "subject_is"
    OBJECT_IS = "object_is"
    EITHER_END_IS = "either_end_is"
    PREDICATE_EXCEPT_SUBJECT = "predicate_except_subject"


@dataclass(frozen=True)
class TaskClause:
    """One match condition: the predicate must equal ``predicate`` and
    ``entity`` is checked according to ``kind``."""
    kind: ClauseKind
    predicate: str
    entity: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "predicate": self.predicate, "entity": self.entity}


@dataclass(frozen=True)
class GuidedTask:
    """A labelled task; a triple matches when any clause matches."""
    label: str
    clauses: Tuple[TaskClause, ...]

    def __post_init__(self):
        if not self.label:
            raise ValueError("GuidedTask label cannot be empty")
        if not self.clauses:
            raise ValueError(f"GuidedTask {self.label!r} must contain at least one clause")

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "clauses": [c.to_dict() for c in self.clauses]}


def matches_clause(clause: TaskClause, triple: Triple) -> bool:
    if triple.predicate != clause.predicate:
        return False
    kind = clause.kind
    if kind is ClauseKind.SUBJECT_IS:
        return triple.subject == clause.entity
    if kind is ClauseKind.OBJECT_IS:
        return triple.object == clause.entity
    if kind is ClauseKind.EITHER_END_IS:
        return triple.subject == clause.entity or triple.object == clause.entity
    if kind is ClauseKind.PREDICATE_EXCEPT_SUBJECT:
        return triple.subject != clause.entity
    raise ValueError(f"Unsupported clause kind: {kind!r}")


def matches(task: GuidedTask, triple: Triple) -> bool:
    return any(matches_clause(c, triple) for c in task.clauses)


GUIDED_TASKS: Tuple[GuidedTask, ...] = (
    GuidedTask(
        "Show Alice's coworkers",
        (TaskClause(ClauseKind.EITHER_END_IS, "knows", "Alice"),),
    ),
    GuidedTask(
        "Who has Python skills?",
        (TaskClause(ClauseKind.OBJECT_IS, "hasSkill", "Python"),),
    ),
    GuidedTask(
        "Where does Bob work?",
        (TaskClause(ClauseKind.SUBJECT_IS, "worksAt", "Bob"),),
    ),
    GuidedTask(
        "What skills are in ProjectX?",
        (
            TaskClause(ClauseKind.SUBJECT_IS, "involves", "ProjectX"),
            TaskClause(ClauseKind.PREDICATE_EXCEPT_SUBJECT, "hasSkill", "ProjectX"),
        ),
    ),
)


def get_task(index: Optional[int], catalog: Tuple[GuidedTask, ...] = GUIDED_TASKS) -> Optional[GuidedTask]:
    """Look up a task by selector index; ``None`` means no task (reset)."""
    if index is None:
        return None
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(catalog):
        raise ValueError(f"Unknown guided task index {index!r} (catalog has {len(catalog)} tasks)")
    return catalog[index]


def task_options(catalog: Tuple[GuidedTask, ...] = GUIDED_TASKS) -> List[Dict[str, Any]]:
    return [{"index": i, "label": task.label} for i, task in enumerate(catalog)]


def task_highlight(task: Optional[GuidedTask], triples: Iterable[Triple]) -> HighlightSet:
    """Highlight both endpoints and the edge of every triple matching ``task``."""
    if task is None:
        return HighlightSet.inactive()
    nodes = set()
    edges = set()
    for t in triples:
        if matches(task, t):
            nodes.add(t.subject)
            nodes.add(t.object)
            edges.add((t.subject, t.object, t.predicate))
    return HighlightSet(frozenset(nodes), frozenset(edges), active=True)
