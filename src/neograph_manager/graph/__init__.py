"""Graph database operations and Neo4j integration."""

from neograph_manager.graph.interfaces import GraphQueryExecutor
from neograph_manager.graph.neo4j_client import Neo4jClient
from neograph_manager.graph.schema import (
    create_index,
    create_unique_constraint,
    drop_index,
    drop_unique_constraint,
)
from neograph_manager.graph.streaming import batch_records

__all__ = [
    "GraphQueryExecutor",
    "Neo4jClient",
    "batch_records",
    "create_index",
    "create_unique_constraint",
    "drop_index",
    "drop_unique_constraint",
]
