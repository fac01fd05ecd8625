"""Shared pytest fixtures: stores for both backends and an app client."""

import os
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from automation_library.db import Base, create_engine, create_session_maker
from automation_library.main import create_app
from automation_library.schemas import Link, NewAutomationInput
from automation_library.services.database_store import DatabaseAutomationStore
from automation_library.services.memory_store import InMemoryAutomationStore


@asynccontextmanager
async def database_store_for(tmp_path):
    """Fresh schema on TEST_DATABASE_URL, or a throwaway SQLite file."""
    database_url = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'library.db'}"
    engine = create_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield DatabaseAutomationStore(create_session_maker(engine), engine=engine)
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture(params=["memory", "database"])
async def store(request, tmp_path):
    """Empty store; every contract test runs once per backend."""
    if request.param == "memory":
        yield InMemoryAutomationStore(seed=False)
        return
    async with database_store_for(tmp_path) as database_store:
        yield database_store


@pytest_asyncio.fixture()
async def database_store(tmp_path):
    async with database_store_for(tmp_path) as database_store:
        yield database_store


@pytest.fixture()
def new_automation() -> NewAutomationInput:
    return NewAutomationInput(
        title="Lecture Notes Sync",
        description="Copies lecture slides from the course site into a dated folder",
        student_name="Dana Lee",
        tags=["files", "productivity"],
        images=["https://img.example.com/notes-sync.png"],
        links=[
            Link(title="Source", url="https://github.com/example/notes-sync"),
            Link(title="Demo", url="https://example.com/demo"),
        ],
        setup_instructions="## Setup\n\n1. `pip install notes-sync`\n2. Run `notes-sync --init`",
        installation_code="pip install notes-sync",
    )


@pytest.fixture()
def client():
    """Test client over an app with a seeded in-memory store."""
    app = create_app(store=InMemoryAutomationStore(seed=True))
    with TestClient(app) as test_client:
        yield test_client
