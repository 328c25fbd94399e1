#!/usr/bin/env python3
"""
Manage Neo4j indexes and unique constraints.

Examples:
    python scripts/manage_schema.py create-index Person name
    python scripts/manage_schema.py create-constraint Person email
    python scripts/manage_schema.py show
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from neograph_manager.config.settings import get_settings
from neograph_manager.graph.neo4j_client import Neo4jClient
from neograph_manager.graph.schema import (
    create_index,
    create_unique_constraint,
    drop_index,
    drop_unique_constraint,
    get_schema_info,
    wait_for_indexes,
)
from neograph_manager.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

LABEL_FIELD_COMMANDS = {
    "create-index": create_index,
    "drop-index": drop_index,
    "create-constraint": create_unique_constraint,
    "drop-constraint": drop_unique_constraint,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Manage Neo4j indexes and unique constraints"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--syntax",
        choices=["modern", "legacy"],
        default=None,
        help="DDL dialect (default: SCHEMA_SYNTAX setting)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for command in LABEL_FIELD_COMMANDS:
        sub = subparsers.add_parser(command, help=f"{command.replace('-', ' ')} on label.field")
        sub.add_argument("label", help="Node label")
        sub.add_argument("field", help="Property name")

    subparsers.add_parser("show", help="Show current indexes and constraints")

    wait = subparsers.add_parser("wait", help="Wait for all indexes to come online")
    wait.add_argument("--timeout", type=float, default=300, help="Seconds to wait")

    return parser


async def run(args: argparse.Namespace, client: Neo4jClient) -> int:
    """Execute the parsed command against the client."""
    if not await client.verify_connectivity():
        logger.error("Failed to connect to Neo4j database")
        logger.error("Please check your connection settings and ensure Neo4j is running")
        return 1

    if args.command in LABEL_FIELD_COMMANDS:
        await LABEL_FIELD_COMMANDS[args.command](
            client, args.label, args.field, syntax=args.syntax
        )
        return 0

    if args.command == "wait":
        return 0 if await wait_for_indexes(client, timeout=args.timeout, syntax=args.syntax) else 1

    schema_info = await get_schema_info(client, syntax=args.syntax)

    logger.info(f"Constraints ({len(schema_info['constraints'])}):")
    for constraint in schema_info["constraints"]:
        logger.info(f"  - {constraint.get('name')} ({constraint.get('type', 'UNKNOWN')})")

    logger.info(f"Indexes ({len(schema_info['indexes'])}):")
    for index in schema_info["indexes"]:
        state = index.get("state", "UNKNOWN")
        logger.info(f"  - {index.get('name')} ({index.get('type', 'UNKNOWN')}) - {state}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for schema management."""
    args = build_parser().parse_args(argv)

    setup_logging(log_level=args.log_level)

    settings = get_settings()
    logger.info(f"Neo4j URI: {settings.neo4j_uri}")
    logger.info(f"Neo4j Database: {settings.neo4j_database}")

    async def _main() -> int:
        async with Neo4jClient() as client:
            return await run(args, client)

    try:
        return asyncio.run(_main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Error during schema management: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
