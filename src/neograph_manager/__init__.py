"""
Neo4j Graph Manager

Async query-execution and schema-management helpers over the official
Neo4j driver, including buffered streaming of large result sets.
"""

__version__ = "0.1.0"

from neograph_manager.config.settings import Settings
from neograph_manager.graph.neo4j_client import Neo4jClient
from neograph_manager.models.query import Query

__all__ = ["Neo4jClient", "Query", "Settings", "__version__"]
