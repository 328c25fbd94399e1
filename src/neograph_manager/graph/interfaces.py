"""Structural interface for graph query executors."""

from typing import Any, AsyncIterator, Callable, List, Mapping, Optional, Protocol, Union

from neo4j import Record

from neograph_manager.models.query import Query


class GraphQueryExecutor(Protocol):
    """Query execution surface shared by Neo4jClient and test doubles."""

    async def execute_non_query(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Run a statement and discard its result."""
        ...

    async def execute_scalar(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
        as_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """Run a statement expected to return exactly one record."""
        ...

    async def fetch_records(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
        transform: Callable[[Record], Any] = dict,
    ) -> List[Any]:
        """Run a statement and return every transformed record."""
        ...

    def fetch_records_as_stream(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
        transform: Callable[[Record], Any] = dict,
        buffer_size: Optional[int] = None,
    ) -> AsyncIterator[List[Any]]:
        """Run a statement and yield its transformed records in batches."""
        ...
