from fastapi import APIRouter, Depends

from backend.app.api.schemas import ObservedGraphResponse, ObservedStatisticsResponse
from backend.app.dependencies import get_editor_service
from backend.app.services.editor_service import EditorService

router = APIRouter()


@router.get("/", response_model=ObservedGraphResponse)
def observed_graph(service: EditorService = Depends(get_editor_service)):
    return service.observed_graph()


@router.get("/statistics", response_model=ObservedStatisticsResponse)
def observed_statistics(service: EditorService = Depends(get_editor_service)):
    return service.observed_statistics()
