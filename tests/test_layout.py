import math

import pytest

from kgscope.graph.builders import build_graph
from kgscope.graph.kg_core import GraphEdge, GraphNode
from kgscope.graph.layout import LINK_DISTANCE, ForceLayout, ForceParams, layout


def _coords(positions):
    return [(p.id, p.x, p.y) for p in positions]


@pytest.fixture
def graph(store):
    return build_graph(store.triples, 2, 10, store.class_map)


def test_layout_is_deterministic(graph):
    first = layout(graph.nodes, graph.edges, 1000, 800, level=2)
    second = layout(graph.nodes, graph.edges, 1000, 800, level=2)
    assert _coords(first) == _coords(second)


def test_converges_within_iteration_cap(graph):
    sim = ForceLayout(graph.nodes, graph.edges, 1000, 800, level=2)
    sim.run()
    assert sim.converged
    assert 0 < sim.iterations <= 300


def test_centroid_near_canvas_center(graph):
    positions = layout(graph.nodes, graph.edges, 1000, 800, level=2)
    cx = sum(p.x for p in positions) / len(positions)
    cy = sum(p.y for p in positions) / len(positions)
    assert abs(cx - 500) < 5
    assert abs(cy - 400) < 5


def test_positions_are_finite(graph):
    for p in layout(graph.nodes, graph.edges, 1000, 800, level=2):
        assert math.isfinite(p.x) and math.isfinite(p.y)


def test_single_node_sits_at_center():
    positions = layout([GraphNode("solo")], [], 600, 400, level=2)
    assert positions[0].x == pytest.approx(300)
    assert positions[0].y == pytest.approx(200)


def test_linked_pair_settles_near_link_distance():
    nodes = [GraphNode("a"), GraphNode("b")]
    edges = [GraphEdge("a", "b", "knows")]
    a, b = layout(nodes, edges, 1000, 800, level=2)
    distance = math.hypot(a.x - b.x, a.y - b.y)
    assert 140 < distance < 175


def test_link_distance_by_level():
    assert ForceLayout([], [], 100, 100, level=1).params.link_distance == LINK_DISTANCE[1] == 300
    assert ForceLayout([], [], 100, 100, level=2).params.link_distance == LINK_DISTANCE[2] == 150


def test_empty_graph_is_converged():
    sim = ForceLayout([], [], 1000, 800)
    assert sim.converged
    assert sim.run() == []
    assert sim.iterations == 0


def test_iter_ticks_yields_every_tick(graph):
    sim = ForceLayout(graph.nodes, graph.edges, 1000, 800, params=ForceParams(max_iterations=5))
    frames = list(sim.iter_ticks())
    assert len(frames) == 5
    assert sim.iterations == 5


def test_positions_updated_in_place(graph):
    sim = ForceLayout(graph.nodes, graph.edges, 1000, 800, level=2)
    positions = sim.positioned
    before = positions[0].x
    assert sim.tick() is positions
    assert positions[0].x != before


def test_self_loop_and_dangling_edges_ignored():
    nodes = [GraphNode("a"), GraphNode("b")]
    edges = [GraphEdge("a", "a", "knows"), GraphEdge("a", "ghost", "knows")]
    sim = ForceLayout(nodes, edges, 1000, 800)
    assert len(sim.link_source) == 0
    sim.run()
    assert sim.converged


def test_velocity_tolerance_stops_early(graph):
    params = ForceParams.for_level(2, velocity_tolerance=1.0)
    sim = ForceLayout(graph.nodes, graph.edges, 1000, 800, params=params)
    sim.run()
    assert sim.iterations < 300


@pytest.mark.parametrize("kwargs", [
    {"alpha_min": 0},
    {"link_distance": -1},
    {"max_iterations": 0},
    {"velocity_decay": 1.5},
])
def test_invalid_params(kwargs):
    with pytest.raises(ValueError):
        ForceParams(**kwargs)


def test_invalid_canvas():
    with pytest.raises(ValueError):
        ForceLayout([], [], 0, 800)
