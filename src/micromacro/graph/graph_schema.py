from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
from uuid import uuid4


def new_id() -> str:
    return str(uuid4())


class NodeKind(str, Enum):
    SOURCE = "source"
    DESTINATION = "destination"


# ---------------------------------------------------------------------
# State graph (micro-states)
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class StateNode:
    """
    Micro-state of the dynamical system.

    The weight is an unnormalized prior mass and is never negative.
    """

    id: str
    name: str
    weight: float = 1.0

    @staticmethod
    def create(name: str, weight: float = 1.0) -> "StateNode":
        return StateNode(id=new_id(), name=name, weight=weight)

    def renamed(self, name: str) -> "StateNode":
        return replace(self, name=name)

    def reweighted(self, weight: float) -> "StateNode":
        return replace(self, weight=weight)


@dataclass(frozen=True)
class StateEdge:
    """
    Transition between two micro-states. Stored weights are strictly positive.
    """

    source: str
    target: str
    weight: float


# ---------------------------------------------------------------------
# Mapping graph (bipartite: states -> observable values)
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class MappingNode:
    """
    Node of the bipartite mapping graph.

    Source nodes mirror a state node through ``mirror``;
    Destination nodes represent an observable value and have no mirror.
    """

    id: str
    name: str
    kind: NodeKind
    mirror: Optional[str] = None

    @staticmethod
    def source(name: str, state_id: str) -> "MappingNode":
        return MappingNode(
            id=new_id(),
            name=name,
            kind=NodeKind.SOURCE,
            mirror=state_id,
        )

    @staticmethod
    def destination(name: str) -> "MappingNode":
        return MappingNode(id=new_id(), name=name, kind=NodeKind.DESTINATION)

    @property
    def is_source(self) -> bool:
        return self.kind is NodeKind.SOURCE

    @property
    def is_destination(self) -> bool:
        return self.kind is NodeKind.DESTINATION

    def renamed(self, name: str) -> "MappingNode":
        return replace(self, name=name)


@dataclass(frozen=True)
class MappingEdge:
    source: str
    target: str
    weight: float


# ---------------------------------------------------------------------
# Observed graph (derived, macro-states)
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class ObservedNode:
    """
    Derived macro-state, one per Destination node.

    ``id`` is fresh on every recompute; ``backref`` (the Destination id)
    is the only key that survives a rebuild.
    """

    id: str
    name: str
    backref: str
    weight: float = 0.0

    def with_weight(self, weight: float) -> "ObservedNode":
        return replace(self, weight=weight)
