from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from contextlib import asynccontextmanager

from backend.app.main import create_app
from backend.app.config import AppConfig
from backend.app.dependencies import get_editor_service
from backend.app.services.editor_service import EditorService

from micromacro.graph.graph_builder import GraphBuilder
from micromacro.graph.graph_store import GraphStore


@pytest.fixture()
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture()
def scenario_a(store: GraphStore) -> GraphStore:
    """
    Three unit states; A and B map to X, C maps to Y.
    """
    builder = GraphBuilder(store)
    builder.add_states([("A", 1.0), ("B", 1.0), ("C", 1.0)])
    builder.add_transitions([("A", "B", 1.0), ("B", "C", 1.0), ("C", "A", 1.0)])
    builder.add_destinations(["X", "Y"])
    builder.add_mappings([("A", "X", 1.0), ("B", "X", 1.0), ("C", "Y", 1.0)])
    return store


@pytest.fixture()
def service() -> EditorService:
    store = GraphStore()
    GraphBuilder(store).seed_default()
    return EditorService(store=store)


@pytest.fixture()
def client(service: EditorService):
    @asynccontextmanager
    async def _no_lifespan(_: FastAPI):
        yield

    app = create_app(AppConfig())
    app.router.lifespan_context = _no_lifespan

    def _service_override() -> EditorService:
        return service

    app.dependency_overrides[get_editor_service] = _service_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
