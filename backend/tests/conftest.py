"""Shared test fixtures: a fresh SQLite database per test, the app with its lifespan running."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from opportunity_api.core.config import Settings
from opportunity_api.main import create_app
from opportunity_api.services.opportunity_repository import OpportunityRepository


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=sqlite_url(tmp_path / "opportunities.db"),
        DB_CREATE_SCHEMA=True,
        CORS_ORIGIN="*",
    )


@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI]:
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def repo(app: FastAPI) -> OpportunityRepository:
    return OpportunityRepository(app.state.db)


@pytest.fixture
def full_payload() -> dict:
    return {
        "name": "Acme Data Platform",
        "technologyStack": "Python, Postgres",
        "techOwner": "Dana Lee",
        "businessOwner": "Sam Ortiz",
        "firstContactDate": "2024-01-15",
        "stage": "Discovery",
        "status": "Open",
        "priority": 2,
        "tags": "data,platform",
        "nextStepSummary": "Send proposal",
        "nextStepDueDate": "2024-02-01",
    }
