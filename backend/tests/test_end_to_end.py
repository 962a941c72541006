import pytest


def test_full_micromacro_pipeline_end_to_end(client):
    """
    End-to-end test covering:
    - API layer
    - Source synchronization
    - Mapping edits
    - Weight propagation
    - Export / import
    - Computation failure surfaced to the caller
    """

    # ---------------- Map micro-states onto observables ----------------

    mapping = client.get("/mapping/").json()
    sources = {n["name"]: n["id"] for n in mapping["nodes"] if n["kind"] == "source"}
    values = {n["name"]: n["id"] for n in mapping["nodes"] if n["kind"] == "destination"}
    assert set(sources) == {"Node 0", "Node 1", "Node 2"}

    for state, value in [("Node 0", "Value 0"), ("Node 1", "Value 0"), ("Node 2", "Value 1")]:
        response = client.put(
            "/mapping/edges",
            json={"source": sources[state], "target": values[value]},
        )
        assert response.status_code == 200
        assert response.json()["recompute"]["ok"] is True

    # ---------------- Derived weights ----------------

    observed = client.get("/observed/").json()
    weights = {n["name"]: n["weight"] for n in observed["nodes"]}
    assert weights == pytest.approx({"Value 0": 2 / 3, "Value 1": 1 / 3})
    assert observed["edges"] == []
    assert observed["recompute"] == {"ok": True, "error": None}

    stats = client.get("/observed/statistics").json()
    assert stats["equilibrium_from_state"] == pytest.approx({"Value 0": 2 / 3, "Value 1": 1 / 3})

    # ---------------- Export, damage, restore ----------------

    exported = client.get("/project/export").json()

    states = {n["name"]: n["id"] for n in client.get("/state/").json()["nodes"]}
    assert client.delete(f"/state/nodes/{states['Node 2']}").status_code == 200

    weights = {n["name"]: n["weight"] for n in client.get("/observed/").json()["nodes"]}
    assert weights == pytest.approx({"Value 0": 1.0, "Value 1": 0.0})

    response = client.post("/project/import", json=exported)
    assert response.status_code == 200
    assert client.get("/project/export").json() == exported

    weights = {n["name"]: n["weight"] for n in client.get("/observed/").json()["nodes"]}
    assert weights == pytest.approx({"Value 0": 2 / 3, "Value 1": 1 / 3})

    # ---------------- Zero total weight ----------------

    for node_id in states.values():
        response = client.patch(f"/state/nodes/{node_id}", json={"weight": 0.0})
        assert response.status_code == 200

    observed = client.get("/observed/").json()
    assert observed["recompute"]["ok"] is False
    assert "sum to zero" in observed["recompute"]["error"]
    assert all(n["weight"] == 0.0 for n in observed["nodes"])
    assert len(observed["nodes"]) == 2
