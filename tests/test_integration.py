"""
Integration tests against a live Neo4j server.

Skipped unless NEO4J_SERVER is set; connection details come from the
usual settings sources (environment, .env, appsettings.json).
"""

import os
import uuid

import pytest
from neo4j.exceptions import ResultNotSingleError

from neograph_manager.config.settings import Settings
from neograph_manager.graph.neo4j_client import Neo4jClient
from neograph_manager.graph.schema import create_index, drop_index

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.environ.get("NEO4J_SERVER"),
        reason="Integration tests require NEO4J_SERVER",
    ),
]


@pytest.fixture
def label():
    return f"NeoGraphManager_{uuid.uuid4().hex}"


async def create_nodes(client, label, count):
    query = (
        f"CREATE (a:{label} {{message: $message, createdBy: $user, "
        "createdOn: timestamp(), recordid: $recordid})"
    )
    for i in range(count):
        await client.execute_non_query(
            query, {"message": f"test node {i}", "user": "bbc", "recordid": i}
        )


@pytest.mark.asyncio
async def test_simple_node_workflow(label):
    count_query = f"MATCH (n:{label}) RETURN count(n)"

    async with Neo4jClient(settings=Settings()) as client:
        try:
            assert await client.execute_scalar(count_query, as_type=int) == 0

            await client.execute_non_query(
                f"CREATE (a:{label} {{message: $message, createdBy: $user}})",
                {"message": "hello, world", "user": "bbc"},
            )
            greeting = await client.execute_scalar(
                f"MATCH (a:{label}) SET a.updatedBy = $user RETURN a.message + ', from node'",
                {"user": "bbc"},
            )
            assert greeting.startswith("hello, world")

            await create_nodes(client, label, 21)
            assert await client.execute_scalar(count_query, as_type=int) == 22

            with pytest.raises(ResultNotSingleError):
                await client.execute_scalar(f"MATCH (n:{label}) RETURN n.message")

            messages = await client.fetch_records(
                f"MATCH (n:{label}) RETURN elementId(n) AS id, n.message AS msg",
                transform=lambda r: (r["id"], r["msg"]),
            )
            assert len(messages) == 22

            sizes = []
            async for batch in client.fetch_records_as_stream(
                f"MATCH (n:{label}) RETURN elementId(n) AS id, n.message AS msg",
                transform=lambda r: (r["id"], r["msg"]),
                buffer_size=10,
            ):
                assert 0 <= len(batch) <= 10
                sizes.append(len(batch))
            assert sizes == [10, 10, 2]
        finally:
            await client.execute_non_query(f"MATCH (n:{label}) DELETE n")


@pytest.mark.asyncio
async def test_manage_index(label):
    async with Neo4jClient(settings=Settings()) as client:
        try:
            await create_nodes(client, label, 5)
            await create_index(client, label, "message")
            assert await client.execute_scalar(
                f"MATCH (n:{label}) RETURN count(n)", as_type=int
            ) == 5
            await drop_index(client, label, "message")
        finally:
            await client.execute_non_query(f"MATCH (n:{label}) DELETE n")
