from typing import List, Optional

from pydantic import BaseModel, Field

from micromacro.graph.graph_schema import NodeKind


class StateNodeRecord(BaseModel):
    id: str
    name: str
    weight: float = 1.0


class StateEdgeRecord(BaseModel):
    source: str
    target: str
    weight: float = 1.0


class MappingNodeRecord(BaseModel):
    id: str
    name: str
    kind: NodeKind
    mirror: Optional[str] = None


class MappingEdgeRecord(BaseModel):
    source: str
    target: str
    weight: float = 1.0


class ProjectRecord(BaseModel):
    """
    Persisted shape of a project: the two editable graphs only.
    """

    state_nodes: List[StateNodeRecord] = Field(default_factory=list)
    state_edges: List[StateEdgeRecord] = Field(default_factory=list)
    mapping_nodes: List[MappingNodeRecord] = Field(default_factory=list)
    mapping_edges: List[MappingEdgeRecord] = Field(default_factory=list)
