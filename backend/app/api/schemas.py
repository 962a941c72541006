from typing import List, Dict, Optional
from pydantic import BaseModel, Field


# ---------------- Requests ----------------


class StateNodeCreate(BaseModel):
    name: str
    weight: Optional[float] = Field(default=None, ge=0.0)


class StateNodeUpdate(BaseModel):
    name: Optional[str] = None
    weight: Optional[float] = Field(default=None, ge=0.0)


class DestinationCreate(BaseModel):
    name: str


class DestinationUpdate(BaseModel):
    name: str


class EdgeRequest(BaseModel):
    source: str
    target: str
    weight: Optional[float] = None


# ---------------- Graph views ----------------


class StateNodeOut(BaseModel):
    id: str
    name: str
    weight: float


class MappingNodeOut(BaseModel):
    id: str
    name: str
    kind: str
    mirror: Optional[str] = None


class ObservedNodeOut(BaseModel):
    id: str
    name: str
    destination_id: str
    weight: float


class EdgeOut(BaseModel):
    source: str
    target: str
    weight: float


class RecomputeStatus(BaseModel):
    ok: bool
    error: Optional[str] = None


class MutationResponse(BaseModel):
    id: Optional[str] = None
    recompute: RecomputeStatus


class StateGraphResponse(BaseModel):
    version: int
    nodes: List[StateNodeOut]
    edges: List[EdgeOut]
    issues: List[str]


class MappingGraphResponse(BaseModel):
    version: int
    nodes: List[MappingNodeOut]
    edges: List[EdgeOut]
    issues: List[str]


class ObservedGraphResponse(BaseModel):
    nodes: List[ObservedNodeOut]
    edges: List[EdgeOut]
    recompute: RecomputeStatus


class MatrixResponse(BaseModel):
    rows: List[str]
    columns: List[str]
    values: List[List[float]]


# ---------------- Statistics (keyed by node name) ----------------


class StateStatisticsResponse(BaseModel):
    weight_distribution: Dict[str, float]
    entropy: Optional[float] = None
    effective_states: Optional[float] = None
    equilibrium: Optional[Dict[str, float]] = None
    converged: bool = False
    entropy_rate: Optional[float] = None
    detailed_balance_deviation: Optional[float] = None
    error: Optional[str] = None


class ObservedStatisticsResponse(BaseModel):
    weight_distribution: Dict[str, float]
    entropy: Optional[float] = None
    equilibrium_from_state: Optional[Dict[str, float]] = None
    error: Optional[str] = None
