from typing import List

from fastapi import APIRouter, Depends, status

from backend.app.api.schemas import (
    DestinationCreate,
    DestinationUpdate,
    EdgeRequest,
    MappingGraphResponse,
    MatrixResponse,
    MutationResponse,
)
from backend.app.dependencies import get_editor_service
from backend.app.services.editor_service import EditorService

router = APIRouter()


@router.get("/", response_model=MappingGraphResponse)
def mapping_graph(service: EditorService = Depends(get_editor_service)):
    return service.mapping_graph()


@router.post(
    "/destinations",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_destination(
    request: DestinationCreate,
    service: EditorService = Depends(get_editor_service),
):
    return service.add_destination(request.name)


@router.patch("/destinations/{node_id}", response_model=MutationResponse)
def rename_destination(
    node_id: str,
    request: DestinationUpdate,
    service: EditorService = Depends(get_editor_service),
):
    return service.rename_destination(node_id, request.name)


@router.delete("/destinations/{node_id}", response_model=MutationResponse)
def remove_destination(
    node_id: str,
    service: EditorService = Depends(get_editor_service),
):
    return service.remove_destination(node_id)


@router.put("/edges", response_model=MutationResponse)
def set_mapping_edge(
    request: EdgeRequest,
    service: EditorService = Depends(get_editor_service),
):
    return service.set_mapping_edge(request.source, request.target, request.weight)


@router.delete("/edges", response_model=MutationResponse)
def remove_mapping_edge(
    source: str,
    target: str,
    service: EditorService = Depends(get_editor_service),
):
    return service.remove_mapping_edge(source, target)


@router.get("/issues", response_model=List[str])
def mapping_issues(service: EditorService = Depends(get_editor_service)):
    return service.issues("mapping")


@router.get("/matrix", response_model=MatrixResponse)
def mapping_matrix(service: EditorService = Depends(get_editor_service)):
    return service.matrix("mapping")
