import pytest

from micromacro.errors import (
    DuplicateNameError,
    InvalidWeightError,
    KindMismatchError,
    StructuralError,
    UnknownNodeError,
)
from micromacro.graph.graph_builder import GraphBuilder
from micromacro.graph.graph_query import GraphQueryEngine
from micromacro.graph.graph_schema import MappingEdge, MappingNode, StateEdge, StateNode
from micromacro.graph.graph_store import GraphStore
from micromacro.graph.synchronization import SynchronizationEngine
from micromacro.graph.weighted_graph import WeightedGraph


def _source_names(store: GraphStore) -> list:
    return sorted(n.name for n in store.mapping_nodes() if n.is_source)


def _state_names(store: GraphStore) -> list:
    return sorted(n.name for n in store.state_nodes())


def test_weighted_graph_accessors_and_node_removal():
    graph = WeightedGraph("state")

    a = StateNode.create("A")
    b = StateNode.create("B")
    graph.add_node(a)
    graph.add_node(b)
    graph.add_edge(StateEdge(a.id, b.id, 2.0))

    assert graph.node_count() == 2
    assert graph.get_edge(a.id, b.id).weight == 2.0

    graph.replace_node(a.renamed("A2"))
    assert graph.get_node(a.id).name == "A2"
    assert graph.has_edge(a.id, b.id)

    graph.remove_node(a.id)
    assert graph.edge_count() == 0
    assert [n.id for n in graph.get_nodes()] == [b.id]

    # Removing what is not there is a no-op
    graph.remove_node(a.id)
    graph.remove_edge(a.id, b.id)
    assert graph.node_count() == 1


def test_weighted_graph_edge_overwrite_keeps_one_edge():
    graph = WeightedGraph("state")
    a = StateNode.create("A")
    graph.add_node(a)

    graph.add_edge(StateEdge(a.id, a.id, 1.0))
    graph.add_edge(StateEdge(a.id, a.id, 5.0))

    assert graph.edge_count() == 1
    assert [e.weight for e in graph.get_edges()] == [5.0]
    with pytest.raises(KeyError):
        graph.get_node("missing")


def test_source_nodes_follow_state_nodes_through_mutations(store):
    a = store.add_state_node("A")
    b = store.add_state_node("B", 2.0)
    assert _source_names(store) == _state_names(store) == ["A", "B"]

    store.rename_state_node(a, "Alpha")
    assert _source_names(store) == ["Alpha", "B"]
    assert store.source_for_state(a).name == "Alpha"

    store.remove_state_node(b)
    c = store.add_state_node("C")
    assert _source_names(store) == _state_names(store) == ["Alpha", "C"]
    assert set(store.mirrors().values()) == {a, c}


def test_rename_keeps_source_identity_and_mapping_edges(scenario_a):
    a = scenario_a.find_state_node("A")
    source_id = scenario_a.source_for_state(a.id).id
    edges = sorted((e.source, e.target, e.weight) for e in scenario_a.mapping_edges())
    weights = scenario_a.observed_weights()
    destinations = [(n.id, n.name) for n in scenario_a.destination_nodes()]

    scenario_a.rename_state_node(a.id, "Alpha")

    source = scenario_a.source_for_state(a.id)
    assert (source.id, source.name) == (source_id, "Alpha")
    assert sorted((e.source, e.target, e.weight) for e in scenario_a.mapping_edges()) == edges
    assert [(n.id, n.name) for n in scenario_a.destination_nodes()] == destinations
    assert scenario_a.observed_weights() == pytest.approx(weights)


def test_observed_count_tracks_destination_count(store):
    store.add_state_node("A")
    x = store.add_destination_node("X")
    store.add_destination_node("Y")
    assert len(store.observed_nodes()) == 2

    store.remove_destination_node(x)
    assert len(store.observed_nodes()) == 1
    assert store.observed_node_for(x) is None


def test_zero_weight_removes_edges(scenario_a):
    a = scenario_a.find_state_node("A")
    b = scenario_a.find_state_node("B")
    x = scenario_a.find_destination_node("X")
    source = scenario_a.source_for_state(a.id)

    scenario_a.set_state_edge(a.id, b.id, 0.0)
    scenario_a.set_mapping_edge(source.id, x.id, 0)

    assert all(e.weight > 0.0 for e in scenario_a.state_edges())
    assert all(e.weight > 0.0 for e in scenario_a.mapping_edges())
    assert not any(e.source == a.id and e.target == b.id for e in scenario_a.state_edges())
    assert not any(e.source == source.id for e in scenario_a.mapping_edges())


def test_edge_weight_defaults_and_updates(store):
    a = store.add_state_node("A")
    b = store.add_state_node("B")

    store.set_state_edge(a, b)
    assert store.state_edges()[0].weight == 1.0

    store.set_state_edge(a, b, 3.5)
    assert len(store.state_edges()) == 1
    assert store.state_edges()[0].weight == 3.5


def test_mapping_edges_must_run_source_to_destination(store):
    a = store.add_state_node("A")
    x = store.add_destination_node("X")
    source = store.source_for_state(a)

    with pytest.raises(KindMismatchError):
        store.set_mapping_edge(x, source.id, 1.0)

    with pytest.raises(KindMismatchError):
        store.remove_destination_node(source.id)

    with pytest.raises(UnknownNodeError):
        store.set_mapping_edge(a, x, 1.0)


def test_structural_errors_leave_store_untouched(scenario_a):
    before = scenario_a.export_state()
    versions = (scenario_a.state_version, scenario_a.mapping_version)
    a = scenario_a.find_state_node("A")

    with pytest.raises(DuplicateNameError):
        scenario_a.add_state_node("B")
    with pytest.raises(DuplicateNameError):
        scenario_a.add_destination_node("X")
    with pytest.raises(UnknownNodeError):
        scenario_a.set_state_edge(a.id, "missing", 1.0)
    with pytest.raises(InvalidWeightError):
        scenario_a.set_state_node_weight(a.id, -1.0)
    with pytest.raises(InvalidWeightError):
        scenario_a.set_state_edge(a.id, a.id, float("nan"))
    with pytest.raises(StructuralError):
        scenario_a.rename_state_node(a.id, "   ")

    x = scenario_a.find_destination_node("X")
    a_source = scenario_a.source_for_state(a.id)
    with pytest.raises(KindMismatchError):
        scenario_a.set_mapping_edge(x.id, a_source.id, 1.0)
    with pytest.raises(KindMismatchError):
        scenario_a.remove_mapping_edge(x.id, a_source.id)
    with pytest.raises(KindMismatchError):
        scenario_a.remove_destination_node(a_source.id)
    with pytest.raises(KindMismatchError):
        scenario_a.rename_destination_node(a_source.id, "Z")

    assert scenario_a.export_state() == before
    assert (scenario_a.state_version, scenario_a.mapping_version) == versions


def test_update_state_node_is_all_or_nothing(store):
    a = store.add_state_node("A")
    store.add_state_node("B")

    with pytest.raises(InvalidWeightError):
        store.update_state_node(a, name="Alpha", weight=-2.0)
    with pytest.raises(DuplicateNameError):
        store.update_state_node(a, name="B", weight=3.0)
    assert store.get_state_node(a) == StateNode(id=a, name="A", weight=1.0)

    store.update_state_node(a, name="Alpha", weight=3.0)
    assert store.get_state_node(a).weight == 3.0
    assert store.source_for_state(a).name == "Alpha"


def test_versions_bump_per_graph(store):
    a = store.add_state_node("A")
    assert (store.state_version, store.mapping_version) == (1, 1)

    store.set_state_node_weight(a, 2.0)
    assert (store.state_version, store.mapping_version) == (2, 1)

    store.add_destination_node("X")
    assert (store.state_version, store.mapping_version) == (2, 2)

    # Unchanged name is a no-op
    store.rename_state_node(a, "A")
    assert store.state_version == 2


def test_deleting_state_removes_its_source_and_edges_only(store):
    builder = GraphBuilder(store)
    builder.add_states([("A", 1.0), ("B", 1.0)])
    ids = builder.add_destinations(["X", "Y", "Z"])
    builder.add_mappings(
        [
            ("A", "X", 1.0),
            ("A", "Y", 1.0),
            ("B", "Y", 2.0),
            ("B", "Z", 1.0),
        ]
    )
    a = store.find_state_node("A")
    b_source = store.source_for_state(store.find_state_node("B").id)
    a_source = store.source_for_state(a.id)

    store.remove_state_node(a.id)

    assert [n.id for n in store.mapping_nodes() if n.id == a_source.id] == []
    assert {n.id for n in store.destination_nodes()} == set(ids.values())
    assert sorted((e.source, e.target, e.weight) for e in store.mapping_edges()) == sorted(
        [
            (b_source.id, ids["Y"], 2.0),
            (b_source.id, ids["Z"], 1.0),
        ]
    )


def test_reconcile_repairs_bulk_loaded_mapping():
    state = WeightedGraph("state")
    mapping = WeightedGraph("mapping")
    a = StateNode.create("A")
    b = StateNode.create("B")
    state.add_node(a)
    state.add_node(b)

    stale = MappingNode.source("old name", a.id)
    orphan = MappingNode.source("ghost", "gone")
    x = MappingNode.destination("X")
    for node in (stale, orphan, x):
        mapping.add_node(node)
    mapping.add_edge(MappingEdge(stale.id, x.id, 1.0))
    mapping.add_edge(MappingEdge(orphan.id, x.id, 1.0))

    sync = SynchronizationEngine()
    sync.reconcile(state, mapping)

    assert set(sync.mirrors(mapping).values()) == {a.id, b.id}
    assert sync.source_for(mapping, a.id).id == stale.id
    assert sync.source_for(mapping, a.id).name == "A"
    assert not mapping.has_node(orphan.id)
    assert [(e.source, e.target) for e in mapping.get_edges()] == [(stale.id, x.id)]


def test_builder_rejects_unknown_names(store):
    builder = GraphBuilder(store)
    builder.add_states([("A", 1.0)])

    with pytest.raises(UnknownNodeError):
        builder.add_transitions([("A", "B", 1.0)])
    with pytest.raises(UnknownNodeError):
        builder.add_mappings([("A", "X", 1.0)])


def test_query_issues_on_default_graph(store):
    GraphBuilder(store).seed_default()
    queries = GraphQueryEngine(store)

    assert queries.state_issues() == []

    issues = queries.mapping_issues()
    assert sorted(i.kind for i in issues) == [
        "destination_no_incoming_edges",
        "destination_no_incoming_edges",
        "source_no_outgoing_edges",
        "source_no_outgoing_edges",
        "source_no_outgoing_edges",
    ]
    assert "Destination 'Value 0' has no incoming edges" in [str(i) for i in issues]


def test_query_dangling_state_is_reported(store):
    a = store.add_state_node("A")
    queries = GraphQueryEngine(store)

    kinds = {(i.kind, i.node_id) for i in queries.state_issues()}
    assert kinds == {("no_outgoing_edges", a), ("no_incoming_edges", a)}


def test_connections_and_weight_matrices(scenario_a):
    queries = GraphQueryEngine(scenario_a)
    a = scenario_a.find_state_node("A")

    conn = queries.connections(a.id)
    assert conn.outgoing == [("B", 1.0)]
    assert conn.incoming == [("C", 1.0)]

    state = queries.weight_matrix("state")
    assert list(state.index) == ["A", "B", "C"]
    assert state.loc["A", "B"] == 1.0
    assert state.loc["B", "A"] == 0.0

    mapping = queries.weight_matrix("mapping")
    assert list(mapping.columns) == ["X", "Y"]
    assert mapping.to_numpy().tolist() == [[1.0, 0.0], [1.0, 0.0], [0.0, 1.0]]

    with pytest.raises(UnknownNodeError):
        queries.connections("missing")
