"""Integration test fixtures.

Provides a real PostgreSQL via testcontainers, loaded with the service
schema, and an asyncpg pool connected to it.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import TYPE_CHECKING

import asyncpg
import pytest
from testcontainers.postgres import PostgresContainer


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable, Generator

    from asyncpg import Pool


pytestmark = pytest.mark.integration

SCHEMA = Path(__file__).resolve().parents[2] / "sql" / "create_tables.sql"


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session."""
    container = PostgresContainer("postgres:16-alpine")
    try:
        container.start()
    except Exception as e:  # noqa: BLE001
        pytest.skip(f"Docker is not available: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
async def pool(postgres_container: PostgresContainer) -> AsyncGenerator[Pool]:
    """Connection pool on a database with the schema applied."""
    db_pool = await asyncpg.create_pool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        user=postgres_container.username,
        password=postgres_container.password,
        database=postgres_container.dbname,
        min_size=1,
        max_size=5,
    )
    assert db_pool is not None
    async with db_pool.acquire() as conn:
        await conn.execute(SCHEMA.read_text(encoding="utf-8"))

    try:
        yield db_pool
    finally:
        await db_pool.close()


@pytest.fixture
def make_user(pool: Pool) -> Callable[[], Awaitable[int]]:
    """Create users with unique names so tests never share rows."""

    async def _create() -> int:
        async with pool.acquire() as conn:
            return await conn.fetchval(
                "INSERT INTO users (username) VALUES ($1) RETURNING user_id",
                f"user-{uuid.uuid4().hex[:12]}",
            )

    return _create
