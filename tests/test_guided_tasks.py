import pytest

from kgscope.graph.guided_tasks import (
    GUIDED_TASKS,
    ClauseKind,
    GuidedTask,
    TaskClause,
    get_task,
    matches,
    matches_clause,
    task_highlight,
    task_options,
)
from kgscope.store import Triple


@pytest.mark.parametrize("kind,triple,expected", [
    (ClauseKind.SUBJECT_IS, Triple("Bob", "worksAt", "CompanyY"), True),
    (ClauseKind.SUBJECT_IS, Triple("Alice", "worksAt", "CompanyX"), False),
    (ClauseKind.OBJECT_IS, Triple("Alice", "worksAt", "Bob"), True),
    (ClauseKind.EITHER_END_IS, Triple("Alice", "worksAt", "Bob"), True),
    (ClauseKind.EITHER_END_IS, Triple("Bob", "worksAt", "Alice"), True),
    (ClauseKind.PREDICATE_EXCEPT_SUBJECT, Triple("Alice", "worksAt", "X"), True),
    (ClauseKind.PREDICATE_EXCEPT_SUBJECT, Triple("Bob", "worksAt", "X"), False),
])
def test_clause_kinds(kind, triple, expected):
    clause = TaskClause(kind, "worksAt", "Bob")
    assert matches_clause(clause, triple) is expected


def test_clause_requires_predicate():
    clause = TaskClause(ClauseKind.SUBJECT_IS, "worksAt", "Bob")
    assert not matches_clause(clause, Triple("Bob", "knows", "Alice"))


def test_catalog_against_sample(store):
    expected = {
        0: [("Alice", "knows", "Bob")],
        1: [("Bob", "hasSkill", "Python")],
        2: [("Bob", "worksAt", "CompanyY")],
        3: [
            ("Alice", "hasSkill", "SPARQL"),
            ("Charlie", "hasSkill", "JavaScript"),
            ("Bob", "hasSkill", "Python"),
            ("ProjectX", "involves", "Alice"),
        ],
    }
    for index, rows in expected.items():
        task = GUIDED_TASKS[index]
        assert [tuple(t) for t in store if matches(task, t)] == rows


def test_get_task():
    assert get_task(None) is None
    assert get_task(2).label == "Where does Bob work?"
    with pytest.raises(ValueError):
        get_task(len(GUIDED_TASKS))
    with pytest.raises(ValueError):
        get_task(-1)


def test_task_requires_clauses():
    with pytest.raises(ValueError):
        GuidedTask("empty", ())


def test_task_highlight(store):
    hl = task_highlight(GUIDED_TASKS[2], store)
    assert hl.active
    assert hl.nodes == {"Bob", "CompanyY"}
    assert hl.edges == {("Bob", "CompanyY", "worksAt")}
    assert not task_highlight(None, store).active


def test_task_options_enumerate_catalog():
    options = task_options()
    assert [o["index"] for o in options] == list(range(len(GUIDED_TASKS)))
    assert options[0]["label"] == "Show Alice's coworkers"
