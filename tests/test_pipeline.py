import pytest

from kgscope.graph.layout import ForceParams
from kgscope.pipeline import CanvasSize, ExplorerSession, PipelineInput, compute, run_pipeline


def test_full_entity_view(store, constraints):
    model = run_pipeline(store, constraints, PipelineInput(level=2))
    assert len(model.nodes) == 10
    assert len(model.edges) == 11
    assert model.settled
    assert model.level == 2
    assert not model.search_active
    assert not any(n.faded for n in model.nodes)


def test_violations_attached_to_nodes(store, constraints):
    model = run_pipeline(store, constraints, PipelineInput(level=2), settle=False)
    assert model.get_node("Alice").violations == [
        'Missing required "Lives In" (0/1)',
        'Missing required "Located In" (0/1)',
    ]
    assert model.violations["Alice"] == model.get_node("Alice").violations


def test_class_view(store, constraints):
    model = run_pipeline(store, constraints, PipelineInput(level=1))
    assert [n.id for n in model.nodes] == ["Person", "Organization", "Location", "Skill"]
    assert all(n.is_aggregate for n in model.nodes)
    assert model.get_node("Person").label == "👤 Person"


def test_search_fades_in_model(store, constraints):
    model = run_pipeline(store, constraints, PipelineInput(level=2, query="ali"), settle=False)
    assert model.search_active
    assert not model.get_node("Alice").faded
    assert model.get_node("Charlie").faded
    faded = {e.key for e in model.edges if e.faded}
    assert ("Bob", "Charlie", "knows") in faded
    assert ("Alice", "Bob", "knows") not in faded


def test_guided_task_highlight(store, constraints):
    model = run_pipeline(store, constraints, PipelineInput(level=2, task=0), settle=False)
    assert model.task_label == "Show Alice's coworkers"
    assert [n.id for n in model.nodes] == ["Alice", "Bob"]
    assert all(n.highlighted for n in model.nodes)
    (edge,) = model.edges
    assert edge.highlighted
    assert edge.color == "#fbc02d"


def test_edge_label_metadata(store, constraints):
    model = run_pipeline(store, constraints, PipelineInput(level=2, module="Employment"), settle=False)
    edge = next(e for e in model.edges if e.predicate == "worksAt")
    assert edge.label == "Works At"
    assert edge.icon == "💼"
    assert edge.anchor is not None


def test_empty_view(store, constraints):
    inputs = PipelineInput(level=2, module="Projects", class_name="Skill")
    model = run_pipeline(store, constraints, inputs)
    assert model.is_empty
    assert model.edges == []
    assert model.stats()["node_count"] == 0


def test_stats(store, constraints):
    stats = run_pipeline(store, constraints, PipelineInput(level=2), settle=False).stats()
    assert stats["node_count"] == 10
    assert stats["classes"]["Person"] == 3
    assert stats["predicates"]["hasSkill"] == 3
    assert stats["faded_nodes"] == 0


def test_compute_skips_layout(store, constraints):
    result = compute(store, constraints, PipelineInput(level=2, node_limit=3))
    assert result.graph.node_ids() == ["Alice", "Bob", "Charlie"]
    assert not result.search.active
    assert not result.task.active


def test_pipeline_is_deterministic(store, constraints):
    inputs = PipelineInput(level=2, query="bob")
    assert run_pipeline(store, constraints, inputs).to_json() == run_pipeline(store, constraints, inputs).to_json()


@pytest.mark.parametrize("kwargs", [
    {"level": 3},
    {"node_limit": 0},
    {"node_limit": True},
    {"task": 99},
    {"module": "Astronomy"},
])
def test_invalid_inputs(kwargs):
    with pytest.raises(ValueError):
        PipelineInput(**kwargs)


def test_invalid_canvas():
    with pytest.raises(ValueError):
        CanvasSize(0, 100)


class TestExplorerSession:
    @pytest.fixture
    def session(self, store, constraints):
        return ExplorerSession(store, constraints, params=ForceParams.for_level(2, max_iterations=20))

    def test_update_returns_initial_frame(self, session):
        frame = session.update(PipelineInput(level=2))
        assert frame.generation == 1
        assert frame.iteration == 0
        assert not frame.settled

    def test_step_advances_current_generation(self, session):
        session.update(PipelineInput(level=2))
        frame = session.step(1)
        assert frame.iteration == 1

    def test_stale_generation_is_dropped(self, session):
        session.update(PipelineInput(level=2))
        session.update(PipelineInput(level=2, query="ali"))
        assert not session.is_current(1)
        assert session.step(1) is None
        assert session.step(2).query == "ali"

    def test_update_restarts_positions(self, session):
        first = session.update(PipelineInput(level=2))
        session.settle()
        again = session.update(PipelineInput(level=2))
        assert [(n.x, n.y) for n in again.nodes] == [(n.x, n.y) for n in first.nodes]

    def test_frames_until_settled(self, session):
        session.update(PipelineInput(level=2))
        frames = list(session.frames())
        assert len(frames) == 20
        assert frames[-1].settled
        assert [f.iteration for f in frames] == list(range(1, 21))

    def test_frames_stop_when_superseded(self, session):
        session.update(PipelineInput(level=2))
        seen = []
        for frame in session.frames(1):
            seen.append(frame)
            if len(seen) == 3:
                session.update(PipelineInput(level=1))
        assert len(seen) == 3

    def test_settle_without_run(self, session):
        assert session.settle() is None
        assert session.step(0) is None
