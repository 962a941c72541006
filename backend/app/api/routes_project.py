from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from backend.app.api.schemas import MutationResponse
from backend.app.dependencies import get_editor_service
from backend.app.services.editor_service import EditorService

router = APIRouter()


@router.get("/export")
def export_project(service: EditorService = Depends(get_editor_service)) -> Dict[str, Any]:
    return service.export_project()


@router.post("/import", response_model=MutationResponse)
def import_project(
    data: Dict[str, Any] = Body(...),
    service: EditorService = Depends(get_editor_service),
):
    # Validated by the store so a rejected payload maps to our own 422 body
    return service.import_project(data)
