import pytest

from kgscope.schema import (
    ConstraintRule,
    ConstraintTable,
    EntityClass,
    Predicate,
    class_info,
    legend,
    predicate_label,
)


def test_constraint_rule_validation():
    ConstraintRule(0)
    ConstraintRule(1, 1)
    with pytest.raises(ValueError):
        ConstraintRule(-1)
    with pytest.raises(ValueError):
        ConstraintRule(2, 1)
    with pytest.raises(ValueError):
        ConstraintRule(True)


def test_constraint_table_from_dict_keeps_order():
    table = ConstraintTable.from_dict({
        "b": {"min": 0},
        "a": {"min": 1, "max": 2},
    })
    assert list(table) == ["b", "a"]
    assert table.get("b").unbounded
    assert table.to_dict()["a"] == {"min": 1, "max": 2, "description": ""}


def test_constraint_table_from_dict_names_predicate():
    with pytest.raises(ValueError, match="worksAt"):
        ConstraintTable.from_dict({"worksAt": {"min": 3, "max": 1}})


def test_unknown_values_resolve_to_explicit_variants():
    assert Predicate.parse("worksAt") is Predicate.WORKS_AT
    assert Predicate.parse("likes") is Predicate.OTHER
    assert EntityClass.parse("Robot") is EntityClass.UNKNOWN
    assert class_info("Robot") == class_info("Unknown")


def test_predicate_labels():
    assert predicate_label("worksAt") == "Works At"
    assert predicate_label("type") == "Is a"
    assert predicate_label("likes") == "likes"


def test_legend_covers_enumerations():
    data = legend()
    assert set(data["predicates"]) == {p.value for p in Predicate if p is not Predicate.OTHER}
    assert set(data["classes"]) == {c.value for c in EntityClass}
