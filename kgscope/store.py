"""
Triple Store

Immutable, ordered sequence of (subject, predicate, object) facts plus the
derived subject -> class lookup built from ``type`` triples.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .schema import ConstraintTable, TYPE_PREDICATE, UNKNOWN_CLASS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Triple:
    """A single subject-predicate-object fact."""
    subject: str
    predicate: str
    object: str

    def __post_init__(self):
        """Validate triple data."""
        for name in ("subject", "predicate", "object"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Triple {name} must be a non-empty string, got {value!r}")

    def __iter__(self) -> Iterator[str]:
        return iter((self.subject, self.predicate, self.object))

    @property
    def is_type(self) -> bool:
        return self.predicate == TYPE_PREDICATE

    def to_list(self) -> List[str]:
        return [self.subject, self.predicate, self.object]


TripleLike = Union[Triple, Sequence[str]]


def build_class_map(triples: Iterable[Triple]) -> Dict[str, str]:
    """Map entity id -> class name from ``type`` triples.

    When an entity has several ``type`` triples, the last one in store order wins.
    """
    class_map: Dict[str, str] = {}
    for t in triples:
        if t.is_type:
            class_map[t.subject] = t.object
    return class_map


class TripleStore:
    """Read-only triple store.

    Keeps insertion order and duplicates. All lookups are derived once at
    construction time since the store never changes afterwards.
    """

    def __init__(self, triples: Iterable[TripleLike] = ()):
        self._triples: Tuple[Triple, ...] = tuple(_coerce(t) for t in triples)
        self._class_map = build_class_map(self._triples)
        self._classes = list(dict.fromkeys(t.object for t in self._triples if t.is_type))
        self._class_names = set(self._classes)

    def __len__(self) -> int:
        return len(self._triples)

    def __iter__(self) -> Iterator[Triple]:
        return iter(self._triples)

    def __getitem__(self, index: int) -> Triple:
        return self._triples[index]

    @property
    def triples(self) -> Tuple[Triple, ...]:
        return self._triples

    @property
    def class_map(self) -> Dict[str, str]:
        return dict(self._class_map)

    def class_of(self, entity: str) -> str:
        """Resolve the class of an entity.

        Falls back to the entity itself when it is a declared class name, and to
        ``"Unknown"`` otherwise.
        """
        cls = self._class_map.get(entity)
        if cls is not None:
            return cls
        if entity in self._class_names:
            return entity
        return UNKNOWN_CLASS

    def classes(self) -> List[str]:
        """Distinct class names (objects of ``type`` triples), first-seen order."""
        return list(self._classes)

    def instances_of(self, class_name: str) -> List[str]:
        """Subjects typed as ``class_name``, in store order."""
        return [t.subject for t in self._triples if t.is_type and t.object == class_name]

    def to_dict(self) -> Dict[str, Any]:
        return {"triples": [t.to_list() for t in self._triples]}

    @classmethod
    def from_tuples(cls, rows: Iterable[Sequence[str]]) -> "TripleStore":
        return cls(rows)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TripleStore":
        rows = data.get("triples")
        if not isinstance(rows, list):
            raise ValueError("Dataset must contain a 'triples' list")
        triples = []
        for idx, row in enumerate(rows):
            try:
                triples.append(_coerce(row))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid triple at index {idx}: {e}") from e
        return cls(triples)


def _coerce(row: TripleLike) -> Triple:
    if isinstance(row, Triple):
        return row
    if isinstance(row, (str, bytes)) or len(row) != 3:
        raise ValueError(f"Expected [subject, predicate, object], got {row!r}")
    s, p, o = row
    return Triple(s, p, o)


def load_dataset_from_json(path: Union[str, Path]) -> Tuple[TripleStore, Optional[ConstraintTable]]:
    """Load a triple store (and optional constraint table) from a JSON file.

    Expected format::

        {
          "triples": [["Alice", "knows", "Bob"], ...],
          "constraints": {"worksAt": {"min": 1, "max": 1, "description": "..."}}
        }

    Args:
        path: Path to the JSON file

    Returns:
        (store, constraints) where constraints is None if the file has none

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or rows are malformed
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Dataset file is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Dataset JSON must be an object")

    store = TripleStore.from_dict(data)
    constraints = None
    if "constraints" in data:
        constraints = ConstraintTable.from_dict(data["constraints"])
    logger.info(f"Loaded dataset {p.name}: {len(store)} triples, {len(store.classes())} classes")
    return store, constraints
