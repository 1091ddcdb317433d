"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import sys
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

# Add src directory to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(scope="function")
def test_database(tmp_path: Path) -> str:
    """Return the URL of a fresh SQLite file database for one test."""
    return f"sqlite:///{tmp_path / 'socialgraph_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def reset_shared_db_connections(test_database: str) -> AsyncGenerator[None, None]:
    """Point the shared engine at the test database and create the schema."""
    from socialgraph.database.connection import (
        dispose_database,
        get_async_engine,
        get_async_session,
        init_database,
        reset_database,
    )
    from socialgraph.database.seed_data import ensure_member_types
    from socialgraph.dbmodels import Base

    os.environ["SOCIALGRAPH_DATABASE_URL"] = test_database

    reset_database()
    init_database(test_database, force_reinit=True)

    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with get_async_session() as session:
        await ensure_member_types(session)

    yield

    await dispose_database()


@pytest_asyncio.fixture(scope="function")
async def store(reset_shared_db_connections: None) -> Any:
    """SQLAlchemy data store bound to the test database."""
    _ = reset_shared_db_connections

    from socialgraph.store import SqlAlchemyStore

    return SqlAlchemyStore()


@pytest.fixture(scope="function")
def execute_graphql(store: Any):
    """Execute a GraphQL document against the schema with the test store."""
    from socialgraph.graphql.context import build_context
    from socialgraph.graphql.schema import schema

    async def _execute(query: str, variables: dict[str, Any] | None = None):
        return await schema.execute(
            query,
            variable_values=variables,
            context_value=build_context(store),
        )

    return _execute


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]
