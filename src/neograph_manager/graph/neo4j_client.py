"""Neo4j database client with connection pooling and query execution."""

from contextlib import aclosing, asynccontextmanager
from typing import (
    Any,
    AsyncGenerator,
    AsyncIterator,
    Callable,
    List,
    Mapping,
    Optional,
    Union,
)

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession

from neograph_manager.config.settings import Settings, get_settings
from neograph_manager.graph.streaming import RecordTransform, batch_records
from neograph_manager.models.query import Query
from neograph_manager.utils.logger import get_logger

logger = get_logger(__name__)


class Neo4jClient:
    """Async Neo4j client that opens one pooled session per call."""

    def __init__(
        self,
        uri: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        database: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize Neo4j client.

        Connection pool parameters come from settings; the connection
        target and credentials may be overridden per client.

        Args:
            uri: Neo4j connection URI, e.g. bolt://localhost:7687
            user: Neo4j username
            password: Neo4j password
            database: Neo4j database name
            settings: Settings to use instead of the global instance
        """
        self.settings = settings or get_settings()

        self.uri = uri or self.settings.neo4j_uri
        self.user = user or self.settings.neo4j_db_user
        self.password = password or self.settings.neo4j_db_pwd
        self.database = database or self.settings.neo4j_database

        self._driver: Optional[AsyncDriver] = None

        logger.info(f"Neo4j client initialized for {self.uri}")

    @property
    def driver(self) -> AsyncDriver:
        """Get or create the Neo4j driver. Creation does not connect."""
        if self._driver is None:
            config = self.settings.get_neo4j_config(uri=self.uri)
            config["auth"] = (self.user, self.password)
            self._driver = AsyncGraphDatabase.driver(self.uri, **config)
            logger.info("Neo4j driver created")
        return self._driver

    async def close(self) -> None:
        """Close the Neo4j driver and release resources."""
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.info("Neo4j driver closed")

    async def __aenter__(self) -> "Neo4jClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def verify_connectivity(self) -> bool:
        """
        Verify connectivity to Neo4j database.

        Returns:
            True if connection is successful, False otherwise
        """
        try:
            async with self.session() as session:
                result = await session.run("RETURN 1 AS test")
                record = await result.single()
                if record and record["test"] == 1:
                    logger.info("Neo4j connectivity verified")
                    return True
                return False
        except Exception as e:
            logger.error(f"Neo4j connectivity verification failed: {e}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a Neo4j session scoped to the ``async with`` block.

        Yields:
            Neo4j async session
        """
        session = self.driver.session(database=self.database)
        try:
            yield session
        finally:
            await session.close()

    async def execute_non_query(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Execute a Cypher statement and discard its records.

        Args:
            query: Cypher statement or Query
            parameters: Query parameters
        """
        q = Query.of(query, parameters)
        logger.debug(f"Executing query: {q.preview()}")

        try:
            async with self.session() as session:
                result = await session.run(q.text, q.parameters)
                summary = await result.consume()
                logger.debug(f"Query executed successfully: {summary.counters}")
        except Exception as e:
            logger.error(f"Query execution failed: {e}")
            raise

    async def execute_scalar(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
        as_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """
        Execute a query that returns exactly one record and get its first value.

        Args:
            query: Cypher statement or Query
            parameters: Query parameters
            as_type: Optional conversion applied to the value, e.g. int

        Returns:
            First column of the single record

        Raises:
            ResultNotSingleError: If the query returns zero or several records
        """
        q = Query.of(query, parameters)
        logger.debug(f"Executing query: {q.preview()}")

        try:
            async with self.session() as session:
                result = await session.run(q.text, q.parameters)
                record = await result.single(strict=True)
                value = record[0]
                logger.debug("Query executed successfully")
        except Exception as e:
            logger.error(f"Query execution failed: {e}")
            raise

        return as_type(value) if as_type is not None else value

    async def fetch_records(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
        transform: RecordTransform = dict,
    ) -> List[Any]:
        """
        Execute a query and return all transformed records.

        Args:
            query: Cypher statement or Query
            parameters: Query parameters
            transform: Function applied to every record

        Returns:
            Transformed records in result order
        """
        q = Query.of(query, parameters)
        logger.debug(f"Executing query: {q.preview()}")

        try:
            async with self.session() as session:
                result = await session.run(q.text, q.parameters)
                records = [transform(record) async for record in result]
                logger.debug(f"Query returned {len(records)} records")
                return records
        except Exception as e:
            logger.error(f"Query execution failed: {e}")
            raise

    async def fetch_records_as_stream(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
        transform: RecordTransform = dict,
        buffer_size: Optional[int] = None,
    ) -> AsyncIterator[List[Any]]:
        """
        Execute a query and yield transformed records in batches.

        The session stays open while the generator is suspended. Consumers
        that may stop early should iterate inside ``contextlib.aclosing``
        (or use ``stream_records``) so the session is closed at once
        rather than when the generator is garbage collected.

        Args:
            query: Cypher statement or Query
            parameters: Query parameters
            transform: Function applied to every record
            buffer_size: Records per batch (defaults to settings)

        Yields:
            Batches of at most ``buffer_size`` items; the last one may be
            shorter or empty
        """
        size = buffer_size if buffer_size is not None else self.settings.stream_buffer_size
        if size < 1:
            raise ValueError(f"buffer_size must be a positive integer, got {size}")

        q = Query.of(query, parameters)
        logger.debug(f"Executing query: {q.preview()}")

        try:
            async with self.session() as session:
                result = await session.run(q.text, q.parameters)
                logger.debug("Reading cursor")
                async with aclosing(batch_records(result, transform, size)) as batches:
                    async for batch in batches:
                        yield batch
        except Exception as e:
            logger.error(f"Streaming query failed: {e}")
            raise

    @asynccontextmanager
    async def stream_records(
        self,
        query: Union[str, Query],
        parameters: Optional[Mapping[str, Any]] = None,
        transform: RecordTransform = dict,
        buffer_size: Optional[int] = None,
    ) -> AsyncGenerator[AsyncIterator[List[Any]], None]:
        """
        Open a batch stream that is closed when the block exits.

        Example:
            >>> async with client.stream_records("MATCH (n) RETURN n") as batches:
            ...     async for batch in batches:
            ...         if done(batch):
            ...             break
        """
        batches = self.fetch_records_as_stream(query, parameters, transform, buffer_size)
        async with aclosing(batches):
            yield batches


# Global client instance
_client: Optional[Neo4jClient] = None


def get_neo4j_client() -> Neo4jClient:
    """Get the global Neo4j client instance."""
    global _client
    if _client is None:
        _client = Neo4jClient()
    return _client


async def close_neo4j_client() -> None:
    """Close the global Neo4j client instance."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
