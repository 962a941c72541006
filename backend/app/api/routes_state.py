from typing import List

from fastapi import APIRouter, Depends, status

from backend.app.api.schemas import (
    EdgeRequest,
    MatrixResponse,
    MutationResponse,
    StateGraphResponse,
    StateNodeCreate,
    StateNodeUpdate,
    StateStatisticsResponse,
)
from backend.app.dependencies import get_editor_service
from backend.app.services.editor_service import EditorService

router = APIRouter()


@router.get("/", response_model=StateGraphResponse)
def state_graph(service: EditorService = Depends(get_editor_service)):
    return service.state_graph()


@router.post("/nodes", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
def add_state_node(
    request: StateNodeCreate,
    service: EditorService = Depends(get_editor_service),
):
    return service.add_state_node(request.name, request.weight)


@router.patch("/nodes/{node_id}", response_model=MutationResponse)
def update_state_node(
    node_id: str,
    request: StateNodeUpdate,
    service: EditorService = Depends(get_editor_service),
):
    return service.update_state_node(node_id, name=request.name, weight=request.weight)


@router.delete("/nodes/{node_id}", response_model=MutationResponse)
def remove_state_node(
    node_id: str,
    service: EditorService = Depends(get_editor_service),
):
    return service.remove_state_node(node_id)


@router.put("/edges", response_model=MutationResponse)
def set_state_edge(
    request: EdgeRequest,
    service: EditorService = Depends(get_editor_service),
):
    return service.set_state_edge(request.source, request.target, request.weight)


@router.delete("/edges", response_model=MutationResponse)
def remove_state_edge(
    source: str,
    target: str,
    service: EditorService = Depends(get_editor_service),
):
    return service.remove_state_edge(source, target)


@router.get("/statistics", response_model=StateStatisticsResponse)
def state_statistics(service: EditorService = Depends(get_editor_service)):
    return service.state_statistics()


@router.get("/matrix", response_model=MatrixResponse)
def state_matrix(service: EditorService = Depends(get_editor_service)):
    return service.matrix("state")


@router.get("/issues", response_model=List[str])
def state_issues(service: EditorService = Depends(get_editor_service)):
    return service.issues("state")
