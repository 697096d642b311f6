"""
Filter Pipeline

Composes the independent filter stages into one reduced triple subset:

    module -> class/instance -> guided task

Each stage receives only the output of the previous one. An empty result is a
valid outcome, not an error.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..store import Triple, TripleStore
from .guided_tasks import GuidedTask, matches

logger = logging.getLogger(__name__)

ALL = "All"

# Token sets mix predicate names and class names; both are checked against the same list.
DOMAIN_MODULES: Dict[str, Tuple[str, ...]] = {
    ALL: (),
    "Employment": ("worksAt", "locatedIn", "Organization"),
    "Skills": ("hasSkill", "Skill"),
    "Projects": ("involves", "Project"),
    "Social": ("knows",),
    "Residence": ("livesIn", "Location"),
}


@dataclass(frozen=True)
class FilterSelection:
    """User selections feeding the filter stages."""
    module: str = ALL
    class_name: str = ALL
    instance: str = ALL
    task: Optional[GuidedTask] = None

    def __post_init__(self):
        if self.module not in DOMAIN_MODULES:
            raise ValueError(
                f"Unknown domain module {self.module!r}. Available: {', '.join(DOMAIN_MODULES)}"
            )


def filter_by_module(
    triples: Sequence[Triple],
    module: str,
    class_map: Mapping[str, str],
) -> List[Triple]:
    if module == ALL:
        return list(triples)
    tokens = DOMAIN_MODULES[module]
    return [
        t for t in triples
        if t.predicate in tokens
        or class_map.get(t.object) in tokens
        or class_map.get(t.subject) in tokens
    ]


def filter_by_class(
    triples: Sequence[Triple],
    class_name: str,
    instance: str,
    class_map: Mapping[str, str],
) -> List[Triple]:
    """Keep triples whose subject belongs to ``class_name``.

    A specific ``instance`` replaces the class test with subject equality.
    """
    if class_name == ALL:
        if instance != ALL:
            logger.warning(f"Instance selection {instance!r} ignored without a class selection")
        return list(triples)
    if instance != ALL:
        return [t for t in triples if t.subject == instance]
    return [t for t in triples if class_map.get(t.subject) == class_name]


def filter_by_task(triples: Sequence[Triple], task: Optional[GuidedTask]) -> List[Triple]:
    if task is None:
        return list(triples)
    return [t for t in triples if matches(task, t)]


def apply_filters(store: TripleStore, selection: FilterSelection) -> List[Triple]:
    """Run all filter stages in order over the store.

    Args:
        store: Source triple store (its class map drives class lookups)
        selection: Module, class, instance and guided-task selections

    Returns:
        Filtered triples in store order (possibly empty)
    """
    class_map = store.class_map
    triples = filter_by_module(store.triples, selection.module, class_map)
    after_module = len(triples)
    triples = filter_by_class(triples, selection.class_name, selection.instance, class_map)
    after_class = len(triples)
    triples = filter_by_task(triples, selection.task)
    logger.debug(
        f"Filter stages: store={len(store)} module={after_module} "
        f"class={after_class} task={len(triples)}"
    )
    return triples


class UnknownClassError(ValueError):
    """Raised when a class selection names no class declared in the store."""


def check_class(store: TripleStore, class_name: str) -> str:
    """Return ``class_name`` if it is "All" or a declared class, else raise UnknownClassError."""
    classes = class_options(store)
    if class_name not in classes:
        raise UnknownClassError(f"Unknown class {class_name!r}. Available: {', '.join(classes)}")
    return class_name


def module_options() -> List[str]:
    return list(DOMAIN_MODULES)


def class_options(store: TripleStore) -> List[str]:
    return [ALL, *store.classes()]


def instance_options(store: TripleStore, class_name: str) -> List[str]:
    """Instances selectable once a class is chosen; empty while the class is "All"."""
    if class_name == ALL:
        return []
    return [ALL, *store.instances_of(class_name)]
