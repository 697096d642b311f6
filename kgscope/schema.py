"""
Declarative schema definitions for kgscope.

Covers the two pieces of static configuration that sit next to the triples:
- Constraint rules (allowed cardinality per predicate)
- Display metadata for predicates and classes (closed enumerations)
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Mapping, Any


UNKNOWN_CLASS = "Unknown"
TYPE_PREDICATE = "type"


@dataclass(frozen=True)
class ConstraintRule:
    """Allowed number of outgoing edges carrying one predicate.

    Attributes:
        min: Minimum required count (>= 0)
        max: Maximum allowed count, ``None`` for unbounded
        description: Human-readable summary shown in edge tooltips
    """
    min: int
    max: Optional[int] = None
    description: str = ""

    def __post_init__(self):
        """Validate bounds."""
        if isinstance(self.min, bool) or not isinstance(self.min, int) or self.min < 0:
            raise ValueError(f"Constraint min must be an integer >= 0, got {self.min!r}")
        if self.max is not None:
            if isinstance(self.max, bool) or not isinstance(self.max, int) or self.max < 0:
                raise ValueError(f"Constraint max must be an integer >= 0 or None, got {self.max!r}")
            if self.min > self.max:
                raise ValueError(f"Constraint min ({self.min}) exceeds max ({self.max})")

    @property
    def unbounded(self) -> bool:
        return self.max is None

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "description": self.description}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConstraintRule":
        return cls(
            min=data.get("min", 0),
            max=data.get("max"),
            description=data.get("description", ""),
        )


class ConstraintTable:
    """Ordered, read-only mapping from predicate name to ConstraintRule."""

    def __init__(self, rules: Optional[Mapping[str, ConstraintRule]] = None):
        self._rules: Dict[str, ConstraintRule] = dict(rules or {})

    def __contains__(self, predicate: object) -> bool:
        return predicate in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, predicate: str) -> Optional[ConstraintRule]:
        return self._rules.get(predicate)

    def items(self) -> List[Tuple[str, ConstraintRule]]:
        return list(self._rules.items())

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {pred: rule.to_dict() for pred, rule in self._rules.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> "ConstraintTable":
        rules = {}
        for pred, raw in data.items():
            try:
                rules[pred] = ConstraintRule.from_dict(raw)
            except ValueError as e:
                raise ValueError(f"Invalid constraint for predicate {pred!r}: {e}") from e
        return cls(rules)


# --- Display metadata ---

@dataclass(frozen=True)
class PredicateInfo:
    """Display metadata for one predicate."""
    label: Optional[str]
    icon: str
    color: Optional[str]
    explanation: str


@dataclass(frozen=True)
class ClassInfo:
    """Display metadata for one entity class."""
    icon: str
    color: str
    explanation: str


class Predicate(Enum):
    """Closed set of predicates the explorer knows how to present."""
    KNOWS = "knows"
    TYPE = "type"
    WORKS_AT = "worksAt"
    LIVES_IN = "livesIn"
    HAS_SKILL = "hasSkill"
    LOCATED_IN = "locatedIn"
    INVOLVES = "involves"
    OTHER = "*"

    @classmethod
    def parse(cls, name: str) -> "Predicate":
        for member in cls:
            if member.value == name and member is not cls.OTHER:
                return member
        return cls.OTHER


class EntityClass(Enum):
    """Closed set of entity classes the explorer knows how to present."""
    PERSON = "Person"
    ORGANIZATION = "Organization"
    LOCATION = "Location"
    SKILL = "Skill"
    PROJECT = "Project"
    UNKNOWN = UNKNOWN_CLASS

    @classmethod
    def parse(cls, name: Optional[str]) -> "EntityClass":
        for member in cls:
            if member.value == name:
                return member
        return cls.UNKNOWN


PREDICATE_INFO: Dict[Predicate, PredicateInfo] = {
    Predicate.KNOWS: PredicateInfo("Knows", "🤝", "#fbc02d", "This person knows the other person."),
    Predicate.TYPE: PredicateInfo("Is a", "", None, "This entity is an instance of the class."),
    Predicate.WORKS_AT: PredicateInfo("Works At", "💼", "#1976d2", "This person is employed at the organization."),
    Predicate.LIVES_IN: PredicateInfo("Lives In", "🏠", "#8d6e63", "This person lives in the location."),
    Predicate.HAS_SKILL: PredicateInfo("Has Skill", "🧠", "#388e3c", "This person possesses this skill."),
    Predicate.LOCATED_IN: PredicateInfo("Located In", "🌍", "#6d4c41", "This organization is located in the location."),
    Predicate.INVOLVES: PredicateInfo("Involves", "📁", "#7b1fa2", "This project involves the person."),
    # Label is the raw predicate name for anything outside the enumeration.
    Predicate.OTHER: PredicateInfo(None, "", None, ""),
}

CLASS_INFO: Dict[EntityClass, ClassInfo] = {
    EntityClass.PERSON: ClassInfo("👤", "#1f77b4", "A Person represents an individual in the organization or network."),
    EntityClass.ORGANIZATION: ClassInfo("🏢", "#ff7f0e", "An Organization is a company or institution where people work."),
    EntityClass.LOCATION: ClassInfo("📍", "#2ca02c", "A Location is a place where entities reside or operate."),
    EntityClass.SKILL: ClassInfo("🛠️", "#d62728", "A Skill is a capability or expertise possessed by a person."),
    EntityClass.PROJECT: ClassInfo("📋", "#8c564b", "A Project is a piece of work that involves people."),
    EntityClass.UNKNOWN: ClassInfo("❓", "#9467bd", "This node's type is not specified."),
}

DEFAULT_EDGE_COLOR = "#aaaaaa"
HIGHLIGHT_EDGE_COLOR = "#ff0000"


def predicate_info(predicate: str) -> PredicateInfo:
    return PREDICATE_INFO[Predicate.parse(predicate)]


def predicate_label(predicate: str) -> str:
    """Display label for a predicate ("worksAt" -> "Works At")."""
    info = predicate_info(predicate)
    return info.label if info.label is not None else predicate


def class_info(class_name: Optional[str]) -> ClassInfo:
    return CLASS_INFO[EntityClass.parse(class_name)]


def legend() -> Dict[str, Any]:
    """Full display legend for the presentation layer."""
    return {
        "predicates": {
            member.value: {
                "label": info.label,
                "icon": info.icon,
                "color": info.color,
                "explanation": info.explanation,
            }
            for member, info in PREDICATE_INFO.items()
            if member is not Predicate.OTHER
        },
        "classes": {
            member.value: {
                "icon": info.icon,
                "color": info.color,
                "explanation": info.explanation,
            }
            for member, info in CLASS_INFO.items()
        },
    }
