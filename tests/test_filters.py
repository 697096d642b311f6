import pytest

from kgscope.graph.filters import (
    ALL,
    FilterSelection,
    UnknownClassError,
    apply_filters,
    check_class,
    class_options,
    filter_by_class,
    filter_by_module,
    instance_options,
    module_options,
)
from kgscope.graph.guided_tasks import GUIDED_TASKS


def _rows(triples):
    return [tuple(t) for t in triples]


def test_no_selection_is_identity(store):
    assert apply_filters(store, FilterSelection()) == list(store.triples)


def test_module_matches_predicate_or_endpoint_class(store):
    out = _rows(filter_by_module(store.triples, "Employment", store.class_map))
    assert out == [
        ("Alice", "worksAt", "CompanyX"),
        ("Bob", "worksAt", "CompanyY"),
        ("CompanyX", "type", "Organization"),
        ("CompanyY", "type", "Organization"),
        ("CompanyX", "locatedIn", "CityZ"),
        ("CompanyY", "locatedIn", "CityZ"),
    ]


def test_module_matches_object_class(store):
    out = _rows(filter_by_module(store.triples, "Skills", store.class_map))
    assert ("Alice", "hasSkill", "SPARQL") in out
    assert ("Python", "type", "Skill") in out
    assert ("Alice", "knows", "Bob") not in out


def test_class_filter(store):
    out = filter_by_class(store.triples, "Person", ALL, store.class_map)
    assert len(out) == 11
    assert all(store.class_of(t.subject) == "Person" for t in out)


def test_instance_overrides_class(store):
    out = _rows(filter_by_class(store.triples, "Person", "Bob", store.class_map))
    assert out == [
        ("Bob", "knows", "Charlie"),
        ("Bob", "type", "Person"),
        ("Bob", "worksAt", "CompanyY"),
        ("Bob", "hasSkill", "Python"),
    ]


def test_instance_ignored_without_class(store):
    assert len(filter_by_class(store.triples, ALL, "Bob", store.class_map)) == len(store)


def test_stages_compose_in_order(store):
    selection = FilterSelection(class_name="Person", task=GUIDED_TASKS[1])
    assert _rows(apply_filters(store, selection)) == [("Bob", "hasSkill", "Python")]


def test_empty_result_is_not_an_error(store):
    selection = FilterSelection(module="Projects", class_name="Skill")
    assert apply_filters(store, selection) == []


def test_unknown_module_rejected():
    with pytest.raises(ValueError, match="Unknown domain module"):
        FilterSelection(module="Finance")


def test_option_helpers(store):
    assert module_options()[0] == ALL
    assert class_options(store) == [ALL, "Person", "Organization", "Location", "Skill"]
    assert instance_options(store, ALL) == []
    assert instance_options(store, "Organization") == [ALL, "CompanyX", "CompanyY"]


def test_check_class(store):
    assert check_class(store, ALL) == ALL
    assert check_class(store, "Skill") == "Skill"
    with pytest.raises(UnknownClassError, match="Unknown class 'Dragon'"):
        check_class(store, "Dragon")
    with pytest.raises(ValueError):
        check_class(store, "skill")
