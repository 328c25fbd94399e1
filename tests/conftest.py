"""Pytest configuration and shared fixtures for neograph_manager tests."""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from neo4j import Record
from neo4j.exceptions import ResultNotSingleError

from neograph_manager.config.settings import Settings
from neograph_manager.graph.neo4j_client import Neo4jClient


def make_rows(count: int) -> List[Dict[str, Any]]:
    """Rows shaped like `RETURN id(n) AS id, n.message AS msg`."""
    return [{"id": i, "msg": f"test node {i}"} for i in range(count)]


async def arecords(rows: List[Dict[str, Any]]):
    """Async iterable of records, like a driver result cursor."""
    for row in rows:
        yield Record(row)


class FakeResult:
    """Stand-in for neo4j.AsyncResult over fixed rows."""

    def __init__(
        self,
        rows: List[Dict[str, Any]],
        fail_at: Optional[int] = None,
        error: Optional[Exception] = None,
    ):
        self._records = [Record(row) for row in rows]
        self._fail_at = fail_at
        self._error = error
        self.advanced = 0

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for index, record in enumerate(self._records):
            if self._fail_at is not None and index == self._fail_at:
                raise self._error
            self.advanced += 1
            yield record

    async def consume(self):
        return SimpleNamespace(counters={"nodes_created": len(self._records)})

    async def single(self, strict: bool = False):
        if not strict and len(self._records) <= 1:
            return self._records[0] if self._records else None
        if len(self._records) != 1:
            raise ResultNotSingleError(
                self,
                f"Expected a result with a single record, "
                f"but found {len(self._records)} records.",
            )
        return self._records[0]


class FakeSession:
    """Stand-in for neo4j.AsyncSession that counts closes."""

    def __init__(self, result: FakeResult, run_error: Optional[Exception] = None):
        self.result = result
        self.run_error = run_error
        self.queries: List[tuple] = []
        self.close_count = 0

    async def run(self, query: str, parameters: Optional[Dict[str, Any]] = None):
        self.queries.append((query, parameters))
        if self.run_error is not None:
            raise self.run_error
        return self.result

    async def close(self) -> None:
        self.close_count += 1


class FakeDriver:
    """Stand-in for neo4j.AsyncDriver handing out one FakeSession per call."""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.fail_at: Optional[int] = None
        self.error: Optional[Exception] = None
        self.run_error: Optional[Exception] = None
        self.sessions: List[FakeSession] = []
        self.session_kwargs: List[Dict[str, Any]] = []
        self.closed = False

    def session(self, **kwargs) -> FakeSession:
        result = FakeResult(self.rows, self.fail_at, self.error)
        session = FakeSession(result, self.run_error)
        self.sessions.append(session)
        self.session_kwargs.append(kwargs)
        return session

    async def close(self) -> None:
        self.closed = True

    @property
    def last_session(self) -> FakeSession:
        return self.sessions[-1]


# Pytest configuration
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires Neo4j)"
    )


@pytest.fixture
def settings():
    """Provide settings independent of the environment."""
    return Settings(
        neo4j_server="db.example.com",
        neo4j_port=7687,
        neo4j_db_user="tester",
        neo4j_db_pwd="secret",
        neo4j_database="testdb",
        stream_buffer_size=100,
    )


@pytest.fixture
def fake_driver():
    """Provide a fake async driver."""
    return FakeDriver()


@pytest.fixture
def client(settings, fake_driver):
    """Provide a Neo4jClient wired to the fake driver."""
    neo_client = Neo4jClient(settings=settings)
    neo_client._driver = fake_driver
    return neo_client
