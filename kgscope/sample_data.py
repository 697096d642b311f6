"""Built-in sample dataset and constraint table."""

from .schema import ConstraintRule, ConstraintTable
from .store import TripleStore


SAMPLE_TRIPLES = [
    ("Alice", "knows", "Bob"),
    ("Bob", "knows", "Charlie"),
    ("Charlie", "type", "Person"),
    ("Alice", "type", "Person"),
    ("Bob", "type", "Person"),
    ("Alice", "worksAt", "CompanyX"),
    ("Bob", "worksAt", "CompanyY"),
    ("Charlie", "livesIn", "CityZ"),
    ("CompanyX", "type", "Organization"),
    ("CompanyY", "type", "Organization"),
    ("CityZ", "type", "Location"),
    ("Alice", "hasSkill", "SPARQL"),
    ("Charlie", "hasSkill", "JavaScript"),
    ("Bob", "hasSkill", "Python"),
    ("SPARQL", "type", "Skill"),
    ("JavaScript", "type", "Skill"),
    ("Python", "type", "Skill"),
    ("CompanyX", "locatedIn", "CityZ"),
    ("CompanyY", "locatedIn", "CityZ"),
    ("ProjectX", "involves", "Alice"),
]

SAMPLE_CONSTRAINTS = {
    "worksAt": ConstraintRule(1, 1, "Works At (required, one company)"),
    "hasSkill": ConstraintRule(1, None, "Has Skill (at least one)"),
    "knows": ConstraintRule(0, None, "Knows (optional, many)"),
    "livesIn": ConstraintRule(1, 1, "Lives In (required, one location)"),
    "locatedIn": ConstraintRule(1, 1, "Located In (required, one location)"),
    "involves": ConstraintRule(0, None, "Involves (many allowed)"),
}


def sample_store() -> TripleStore:
    return TripleStore.from_tuples(SAMPLE_TRIPLES)


def sample_constraints() -> ConstraintTable:
    return ConstraintTable(SAMPLE_CONSTRAINTS)
