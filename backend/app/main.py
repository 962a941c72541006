from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from micromacro.errors import StructuralError, UnknownNodeError, ValidationError

from backend.app.config import AppConfig
from backend.app.api.routes_state import router as state_router
from backend.app.api.routes_mapping import router as mapping_router
from backend.app.api.routes_observed import router as observed_router
from backend.app.api.routes_project import router as project_router
from backend.app.dependencies import get_editor_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle hooks.

    Builds (and optionally seeds) the store once at startup so the
    first request does not pay for it.
    """
    get_editor_service()

    yield


def _error_body(exc: Exception) -> dict:
    return {"detail": str(exc), "error": type(exc).__name__}


async def _unknown_node(_: Request, exc: UnknownNodeError) -> JSONResponse:
    return JSONResponse(status_code=404, content=_error_body(exc))


async def _structural(_: Request, exc: StructuralError) -> JSONResponse:
    return JSONResponse(status_code=409, content=_error_body(exc))


async def _invalid(_: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content=_error_body(exc))


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(
        title=config.app_name,
        lifespan=lifespan,
    )

    # Starlette resolves handlers along the MRO, so the more specific
    # UnknownNodeError wins over StructuralError.
    app.add_exception_handler(UnknownNodeError, _unknown_node)
    app.add_exception_handler(StructuralError, _structural)
    app.add_exception_handler(ValidationError, _invalid)

    app.include_router(
        state_router,
        prefix=f"{config.api_prefix}/state",
        tags=["state"],
    )

    app.include_router(
        mapping_router,
        prefix=f"{config.api_prefix}/mapping",
        tags=["mapping"],
    )

    app.include_router(
        observed_router,
        prefix=f"{config.api_prefix}/observed",
        tags=["observed"],
    )

    app.include_router(
        project_router,
        prefix=f"{config.api_prefix}/project",
        tags=["project"],
    )

    return app


config = AppConfig()
app = create_app(config)
