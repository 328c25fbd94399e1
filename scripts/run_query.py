#!/usr/bin/env python3
"""
Run a Cypher query and print its results in batches.

Examples:
    python scripts/run_query.py "MATCH (n:Person) RETURN n.name AS name" --buffer-size 50
    python scripts/run_query.py "MATCH (n) RETURN count(n)" --scalar
    python scripts/run_query.py "MATCH (n {id: \\$id}) RETURN n" --param id=42
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from neograph_manager.graph.neo4j_client import Neo4jClient
from neograph_manager.models.query import Query
from neograph_manager.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_params(pairs: List[str]) -> Dict[str, Any]:
    """Parse key=value pairs; values are JSON when they parse as JSON."""
    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid parameter {pair!r}, expected key=value")
        try:
            params[key] = json.loads(raw)
        except json.JSONDecodeError:
            params[key] = raw
    return params


def render_batch(batch: List[Dict[str, Any]], title: str) -> Table:
    """Render one batch of rows as a table."""
    table = Table(title=title, show_lines=False)
    columns = list(batch[0].keys()) if batch else []
    for column in columns:
        table.add_column(column)
    for row in batch:
        table.add_row(*(str(row.get(column)) for column in columns))
    return table


async def run(
    client: Neo4jClient,
    query: Query,
    console: Console,
    buffer_size: Optional[int] = None,
    scalar: bool = False,
) -> int:
    """Execute the query and print results; returns the number of rows printed."""
    if scalar:
        console.print(await client.execute_scalar(query))
        return 1

    total = 0
    async with client.stream_records(query, buffer_size=buffer_size) as batches:
        batch_number = 0
        async for batch in batches:
            batch_number += 1
            total += len(batch)
            if batch:
                console.print(render_batch(batch, f"Batch {batch_number}"))

    console.print(f"Total rows: {total}")
    return total


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for running a query."""
    parser = argparse.ArgumentParser(description="Run a Cypher query against Neo4j")
    parser.add_argument("query", help="Cypher statement")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable)",
    )
    parser.add_argument("--buffer-size", type=int, default=None, help="Rows per batch")
    parser.add_argument("--scalar", action="store_true", help="Print a single value")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level)

    try:
        query = Query(text=args.query, parameters=parse_params(args.param))
    except ValueError as e:
        logger.error(f"Invalid query: {e}")
        return 2

    async def _main() -> None:
        async with Neo4jClient() as client:
            await run(client, query, Console(), args.buffer_size, args.scalar)

    try:
        asyncio.run(_main())
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Query failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
