import pytest

from kgscope.graph.builders import build_graph
from kgscope.graph.kg_core import GraphEdge, GraphNode
from kgscope.graph.search import match_nodes, one_hop, search_highlight, to_networkx


@pytest.fixture
def graph(store):
    return build_graph(store.triples, 2, 10, store.class_map)


@pytest.mark.parametrize("query", ["", "   ", "\t"])
def test_blank_query_is_inactive(graph, query):
    hl = search_highlight(graph.nodes, graph.edges, query)
    assert not hl.active
    assert not any(hl.is_faded_node(n.id) for n in graph.nodes)
    assert not any(hl.is_faded_edge(e) for e in graph.edges)


def test_match_expands_one_hop(graph):
    hl = search_highlight(graph.nodes, graph.edges, "Ali")
    assert hl.active
    assert hl.nodes == {"Alice", "Bob", "CompanyX", "SPARQL", "ProjectX"}
    assert hl.edges == {
        ("Alice", "Bob", "knows"),
        ("Alice", "CompanyX", "worksAt"),
        ("Alice", "SPARQL", "hasSkill"),
        ("ProjectX", "Alice", "involves"),
    }


def test_no_second_hop(graph):
    hl = search_highlight(graph.nodes, graph.edges, "alice")
    # Charlie is two hops away, through Bob
    assert hl.is_faded_node("Charlie")
    assert hl.is_faded_edge(GraphEdge("Bob", "Charlie", "knows"))
    assert hl.is_faded_edge(GraphEdge("Bob", "CompanyY", "worksAt"))


def test_case_insensitive(graph):
    a = search_highlight(graph.nodes, graph.edges, "ALICE")
    b = search_highlight(graph.nodes, graph.edges, "alice")
    assert a == b


def test_no_match_fades_everything(graph):
    hl = search_highlight(graph.nodes, graph.edges, "zzz")
    assert hl.active
    assert all(hl.is_faded_node(n.id) for n in graph.nodes)
    assert all(hl.is_faded_edge(e) for e in graph.edges)


def test_isolated_match_keeps_only_itself():
    nodes = [GraphNode("lonely"), GraphNode("other")]
    hl = search_highlight(nodes, [], "lone")
    assert hl.nodes == {"lonely"}
    assert hl.edges == frozenset()


def test_incoming_neighbours_count():
    nodes = [GraphNode("a"), GraphNode("b")]
    edges = [GraphEdge("a", "b", "knows")]
    G = to_networkx(nodes, edges)
    assert one_hop(G, ["b"]) == {"a", "b"}


def test_match_nodes_keeps_node_order(graph):
    assert match_nodes(graph.nodes, "company") == ["CompanyX", "CompanyY"]


def test_parallel_edges_survive_conversion():
    nodes = [GraphNode("a"), GraphNode("b")]
    edges = [GraphEdge("a", "b", "knows"), GraphEdge("a", "b", "worksAt")]
    G = to_networkx(nodes, edges)
    assert G.number_of_edges("a", "b") == 2
