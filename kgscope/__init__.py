"""kgscope - knowledge graph explorer with semantic zoom"""
__version__ = "0.1.0"

# Core data types (lightweight - import directly)
from .schema import (
    ConstraintRule,
    ConstraintTable,
    Predicate,
    EntityClass,
)
from .store import Triple, TripleStore, load_dataset_from_json
from .pipeline import (
    CanvasSize,
    PipelineInput,
    ExplorerSession,
    run_pipeline,
)

__all__ = [
    # Data
    "ConstraintRule",
    "ConstraintTable",
    "Predicate",
    "EntityClass",
    "Triple",
    "TripleStore",
    "load_dataset_from_json",
    # Pipeline
    "CanvasSize",
    "PipelineInput",
    "ExplorerSession",
    "run_pipeline",
    # Lazily loaded
    "create_app",
    "KGScopeServer",
]


def __getattr__(name: str):
    """Lazy loading for the HTTP layer so library use does not import FastAPI."""
    lazy_imports = {
        "create_app": ".api",
        "KGScopeServer": ".api",
    }

    if name in lazy_imports:
        import importlib
        module = importlib.import_module(lazy_imports[name], __name__)
        attr = getattr(module, name)
        globals()[name] = attr
        return attr

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
