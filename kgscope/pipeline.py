"""
Explorer pipeline: explicit input struct -> pure pipeline -> render model.

    filter -> build -> {check constraints, search highlight, task highlight, layout}

``run_pipeline`` is a pure function of its inputs. ``ExplorerSession`` adds the
cooperative host-loop behaviour: every input change starts a fresh simulation
under a new generation token, and ticks for a stale generation are never applied.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from .graph.builders import build_graph, validate_node_limit
from .graph.constraints import check_constraints
from .graph.filters import ALL, FilterSelection, apply_filters
from .graph.guided_tasks import GuidedTask, get_task, task_highlight
from .graph.kg_core import BuiltGraph, HighlightSet, ViolationReport, LEVEL_CLASS, SEMANTIC_LEVELS
from .graph.layout import ForceLayout, ForceParams
from .graph.render_model import RenderModel, assemble
from .graph.search import search_highlight
from .schema import ConstraintTable
from .store import TripleStore

logger = logging.getLogger(__name__)

DEFAULT_NODE_LIMIT = 10
DEFAULT_CANVAS_WIDTH = 1000.0
DEFAULT_CANVAS_HEIGHT = 800.0


@dataclass(frozen=True)
class CanvasSize:
    width: float = DEFAULT_CANVAS_WIDTH
    height: float = DEFAULT_CANVAS_HEIGHT

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class PipelineInput:
    """All user-driven inputs of one pipeline run.

    Attributes:
        module: Domain module name or "All"
        class_name: Selected class or "All"
        instance: Selected instance or "All" (only meaningful with a class)
        query: Free-text search query
        level: Semantic level, 1 (classes) or 2 (entities)
        node_limit: Entity display cap for level 2, a positive integer
        task: Guided task index, None for no task
        include_type_edges: Show ``type`` edges at level 2
    """
    module: str = ALL
    class_name: str = ALL
    instance: str = ALL
    query: str = ""
    level: int = LEVEL_CLASS
    node_limit: int = DEFAULT_NODE_LIMIT
    task: Optional[int] = None
    include_type_edges: bool = False

    def __post_init__(self):
        if self.level not in SEMANTIC_LEVELS:
            raise ValueError(f"Semantic level must be 1 or 2, got {self.level!r}")
        validate_node_limit(self.node_limit)
        get_task(self.task)
        # Module validation lives with the module catalog.
        FilterSelection(module=self.module)

    def selection(self) -> FilterSelection:
        return FilterSelection(
            module=self.module,
            class_name=self.class_name,
            instance=self.instance,
            task=self.guided_task(),
        )

    def guided_task(self) -> Optional[GuidedTask]:
        return get_task(self.task)


@dataclass
class PipelineResult:
    """Intermediate stage outputs, before layout."""
    graph: BuiltGraph
    violations: ViolationReport
    search: HighlightSet
    task: HighlightSet
    task_label: Optional[str] = None


def compute(store: TripleStore, constraints: ConstraintTable, inputs: PipelineInput) -> PipelineResult:
    """Run every stage except layout."""
    selection = inputs.selection()
    triples = apply_filters(store, selection)
    graph = build_graph(
        triples,
        inputs.level,
        inputs.node_limit,
        store.class_map,
        resolve_class=store.class_of,
        include_type_edges=inputs.include_type_edges,
    )
    violations = check_constraints(graph.nodes, graph.edges, constraints)
    search = search_highlight(graph.nodes, graph.edges, inputs.query)
    task = selection.task
    return PipelineResult(
        graph=graph,
        violations=violations,
        search=search,
        task=task_highlight(task, store),
        task_label=task.label if task else None,
    )


def run_pipeline(
    store: TripleStore,
    constraints: ConstraintTable,
    inputs: PipelineInput,
    canvas: Optional[CanvasSize] = None,
    *,
    settle: bool = True,
    params: Optional[ForceParams] = None,
    generation: int = 0,
) -> RenderModel:
    """Run the full pipeline once.

    Args:
        store: Triple store
        constraints: Constraint table
        inputs: User inputs
        canvas: Canvas size (default 1000x800)
        settle: Run the layout to convergence; otherwise return initial positions
        params: Optional force parameter override
        generation: Generation token stamped on the model

    Returns:
        RenderModel
    """
    canvas = canvas or CanvasSize()
    result = compute(store, constraints, inputs)
    sim = ForceLayout(
        result.graph.nodes,
        result.graph.edges,
        canvas.width,
        canvas.height,
        level=inputs.level,
        params=params,
    )
    if settle:
        sim.run()
    return _frame(result, sim, inputs, generation)


def _frame(result: PipelineResult, sim: ForceLayout, inputs: PipelineInput, generation: int) -> RenderModel:
    return assemble(
        result.graph,
        sim.positioned,
        result.violations,
        result.search,
        result.task,
        generation=generation,
        query=inputs.query,
        task_label=result.task_label,
        iteration=sim.iterations,
        settled=sim.converged,
    )


@dataclass
class _Run:
    generation: int
    inputs: PipelineInput
    result: PipelineResult
    simulation: ForceLayout


class ExplorerSession:
    """
    Owns the single in-flight pipeline run for a host redraw loop.

    Only one simulation exists at a time. ``update`` discards the previous run
    (positions included) and starts a new generation; ``step`` for any older
    generation returns None and changes nothing.
    """

    def __init__(
        self,
        store: TripleStore,
        constraints: ConstraintTable,
        canvas: Optional[CanvasSize] = None,
        params: Optional[ForceParams] = None,
    ):
        self.store = store
        self.constraints = constraints
        self.canvas = canvas or CanvasSize()
        self.params = params
        self.generation = 0
        self._run: Optional[_Run] = None

    @property
    def inputs(self) -> Optional[PipelineInput]:
        return self._run.inputs if self._run else None

    def update(self, inputs: PipelineInput) -> RenderModel:
        """Start a new run for ``inputs`` and return its initial frame."""
        self.generation += 1
        result = compute(self.store, self.constraints, inputs)
        sim = ForceLayout(
            result.graph.nodes,
            result.graph.edges,
            self.canvas.width,
            self.canvas.height,
            level=inputs.level,
            params=self.params,
        )
        self._run = _Run(self.generation, inputs, result, sim)
        logger.info(
            f"Generation {self.generation}: level {inputs.level}, "
            f"{len(result.graph.nodes)} nodes, {len(result.graph.edges)} edges"
        )
        return _frame(result, sim, inputs, self.generation)

    def is_current(self, generation: int) -> bool:
        return self._run is not None and generation == self._run.generation

    def step(self, generation: int) -> Optional[RenderModel]:
        """Advance the simulation one tick for ``generation``.

        Returns None if ``generation`` has been superseded, or if there is no run.
        """
        if not self.is_current(generation):
            logger.warning(f"Dropping stale tick for generation {generation} (current {self.generation})")
            return None
        run = self._run
        if not run.simulation.converged:
            run.simulation.tick()
        return _frame(run.result, run.simulation, run.inputs, run.generation)

    def frames(self, generation: Optional[int] = None) -> Iterator[RenderModel]:
        """Yield one frame per tick until settled or superseded."""
        generation = self.generation if generation is None else generation
        while self.is_current(generation) and not self._run.simulation.converged:
            frame = self.step(generation)
            if frame is None:
                return
            yield frame

    def settle(self) -> Optional[RenderModel]:
        """Run the current simulation to convergence and return the final frame."""
        if self._run is None:
            return None
        self._run.simulation.run()
        return _frame(self._run.result, self._run.simulation, self._run.inputs, self._run.generation)
