from __future__ import annotations

import logging
import math
from typing import Any, Dict, Set, Tuple

import pydantic

from micromacro.errors import ValidationError
from micromacro.graph.graph_schema import (
    MappingEdge,
    MappingNode,
    NodeKind,
    StateEdge,
    StateNode,
)
from micromacro.graph.weighted_graph import WeightedGraph
from micromacro.persistence.records import (
    MappingEdgeRecord,
    MappingNodeRecord,
    ProjectRecord,
    StateEdgeRecord,
    StateNodeRecord,
)

logger = logging.getLogger("micromacro.persistence")


# ---------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------


def export_project(state: WeightedGraph, mapping: WeightedGraph) -> Dict[str, Any]:
    record = ProjectRecord(
        state_nodes=[
            StateNodeRecord(id=n.id, name=n.name, weight=n.weight)
            for n in state.get_nodes()
        ],
        state_edges=[
            StateEdgeRecord(source=e.source, target=e.target, weight=e.weight)
            for e in state.get_edges()
        ],
        mapping_nodes=[
            MappingNodeRecord(id=n.id, name=n.name, kind=n.kind, mirror=n.mirror)
            for n in mapping.get_nodes()
        ],
        mapping_edges=[
            MappingEdgeRecord(source=e.source, target=e.target, weight=e.weight)
            for e in mapping.get_edges()
        ],
    )
    return record.model_dump(mode="json")


# ---------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------


def build_graphs(data: Any) -> Tuple[WeightedGraph, WeightedGraph]:
    """
    Validate ``data`` and build fresh state and mapping graphs from it.

    Nothing outside the returned graphs is touched, so a failure leaves
    the caller's store as it was. Edges with a weight <= 0 are treated as
    absent. Source nodes missing from ``data`` are not created here.
    """
    try:
        record = ProjectRecord.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"malformed project data: {exc}") from exc

    state = _build_state(record)
    mapping = _build_mapping(record, state)
    return state, mapping


def _build_state(record: ProjectRecord) -> WeightedGraph:
    state = WeightedGraph("state")
    names: Set[str] = set()

    for n in record.state_nodes:
        name = n.name.strip()
        if not name:
            raise ValidationError(f"state node {n.id!r} has an empty name")
        if state.has_node(n.id):
            raise ValidationError(f"duplicate state node id {n.id!r}")
        if name in names:
            raise ValidationError(f"duplicate state node name {name!r}")
        if not math.isfinite(n.weight) or n.weight < 0.0:
            raise ValidationError(f"state node {name!r} has invalid weight {n.weight!r}")
        names.add(name)
        state.add_node(StateNode(id=n.id, name=name, weight=n.weight))

    for e in record.state_edges:
        for endpoint in (e.source, e.target):
            if not state.has_node(endpoint):
                raise ValidationError(f"state edge references unknown node {endpoint!r}")
        if state.has_edge(e.source, e.target):
            raise ValidationError(f"duplicate state edge {e.source!r} -> {e.target!r}")
        if not math.isfinite(e.weight):
            raise ValidationError(f"state edge {e.source!r} -> {e.target!r} has invalid weight")
        if e.weight <= 0.0:
            logger.debug("skipping non-positive state edge %s -> %s", e.source, e.target)
            continue
        state.add_edge(StateEdge(e.source, e.target, e.weight))

    return state


def _build_mapping(record: ProjectRecord, state: WeightedGraph) -> WeightedGraph:
    mapping = WeightedGraph("mapping")
    mirrored: Set[str] = set()
    destination_names: Set[str] = set()

    for n in record.mapping_nodes:
        name = n.name.strip()
        if not name:
            raise ValidationError(f"mapping node {n.id!r} has an empty name")
        if mapping.has_node(n.id):
            raise ValidationError(f"duplicate mapping node id {n.id!r}")

        if n.kind is NodeKind.SOURCE:
            if n.mirror is None or not state.has_node(n.mirror):
                raise ValidationError(
                    f"source node {name!r} does not mirror a known state node"
                )
            if n.mirror in mirrored:
                raise ValidationError(f"state node {n.mirror!r} is mirrored twice")
            mirrored.add(n.mirror)
        else:
            if n.mirror is not None:
                raise ValidationError(f"destination node {name!r} cannot mirror a state node")
            if name in destination_names:
                raise ValidationError(f"duplicate destination name {name!r}")
            destination_names.add(name)

        mapping.add_node(MappingNode(id=n.id, name=name, kind=n.kind, mirror=n.mirror))

    for e in record.mapping_edges:
        for endpoint in (e.source, e.target):
            if not mapping.has_node(endpoint):
                raise ValidationError(f"mapping edge references unknown node {endpoint!r}")
        src = mapping.get_node(e.source)
        dst = mapping.get_node(e.target)
        if not (src.is_source and dst.is_destination):
            raise ValidationError(
                f"mapping edge {src.name!r} -> {dst.name!r} must run Source -> Destination"
            )
        if mapping.has_edge(e.source, e.target):
            raise ValidationError(f"duplicate mapping edge {e.source!r} -> {e.target!r}")
        if not math.isfinite(e.weight):
            raise ValidationError(f"mapping edge {e.source!r} -> {e.target!r} has invalid weight")
        if e.weight <= 0.0:
            continue
        mapping.add_edge(MappingEdge(e.source, e.target, e.weight))

    return mapping
