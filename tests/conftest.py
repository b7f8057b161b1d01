"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from rolematrix.config import Settings
from rolematrix.core.logging import configure_logging
from rolematrix.core.permissions import (
    HierarchyPath,
    ModuleHierarchy,
    PermissionStore,
    default_hierarchy,
)
from rolematrix.main import create_app
from rolematrix.modules.users.repos import UserRepository


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, environment="testing", log_level="WARNING")


@pytest.fixture(autouse=True)
def _logging(settings: Settings) -> None:
    """Reset structlog so output from one test never leaks into the next."""
    configure_logging(settings)


@pytest.fixture
def hierarchy() -> ModuleHierarchy:
    """The built-in ERP module tree."""
    return default_hierarchy()


@pytest.fixture
def store(hierarchy: ModuleHierarchy) -> PermissionStore:
    """Empty store with the default roles and actions."""
    return PermissionStore(hierarchy)


@pytest.fixture
def hrms_visible(store: PermissionStore) -> PermissionStore:
    """Store where Operator sees HRMS, its Attendance submodule and two popups."""
    store.set_visibility("Operator", HierarchyPath("HRMS"), True)
    store.set_visibility("Operator", HierarchyPath("HRMS", "Attendance"), True)
    store.set_visibility(
        "Operator", HierarchyPath("HRMS", "Attendance", "Attendance Record"), True
    )
    store.set_visibility("Operator", HierarchyPath("HRMS", "Attendance", "Overtime"), True)
    return store


@pytest.fixture
def user_repo() -> UserRepository:
    return UserRepository()


@pytest.fixture
def app(
    settings: Settings, store: PermissionStore, user_repo: UserRepository
) -> FastAPI:
    """Application wired to the test store and repository."""
    return create_app(settings=settings, store=store, user_repo=user_repo)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test operations.

    Yields:
        Path to the temporary directory
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fixtures_path() -> Path:
    """Get the path to the YAML fixtures directory."""
    return Path(__file__).parent / "fixtures"
