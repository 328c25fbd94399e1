"""Neo4j index and constraint management."""

import hashlib
import re
from typing import Any, Dict, List, Optional

from tenacity import retry, retry_if_result, stop_after_delay, wait_fixed

from neograph_manager.config.settings import get_settings
from neograph_manager.graph.interfaces import GraphQueryExecutor
from neograph_manager.utils.logger import get_logger

logger = get_logger(__name__)

# DDL per dialect. Neo4j 4.4 deprecated the legacy forms and 5.0 removed them.
SCHEMA_TEMPLATES: Dict[str, Dict[str, str]] = {
    "modern": {
        "create_index": "CREATE INDEX {name} IF NOT EXISTS FOR (n:{label}) ON (n.{field})",
        "drop_index": "DROP INDEX {name} IF EXISTS",
        "create_unique_constraint": (
            "CREATE CONSTRAINT {name} IF NOT EXISTS "
            "FOR (n:{label}) REQUIRE n.{field} IS UNIQUE"
        ),
        "drop_unique_constraint": "DROP CONSTRAINT {name} IF EXISTS",
        "show_indexes": (
            "SHOW INDEXES YIELD name, type, labelsOrTypes, properties, state "
            "RETURN name, type, labelsOrTypes, properties, state"
        ),
        "show_constraints": (
            "SHOW CONSTRAINTS YIELD name, type, labelsOrTypes, properties "
            "RETURN name, type, labelsOrTypes, properties"
        ),
        "pending_indexes": (
            "SHOW INDEXES YIELD state WHERE state <> 'ONLINE' "
            "RETURN count(*) AS pending"
        ),
    },
    "legacy": {
        "create_index": "CREATE INDEX ON :{label}({field})",
        "drop_index": "DROP INDEX ON :{label}({field})",
        "create_unique_constraint": "CREATE CONSTRAINT ON (n:{label}) ASSERT n.{field} IS UNIQUE",
        "drop_unique_constraint": "DROP CONSTRAINT ON (n:{label}) ASSERT n.{field} IS UNIQUE",
        "show_indexes": "CALL db.indexes()",
        "show_constraints": "CALL db.constraints()",
        "pending_indexes": (
            "CALL db.indexes() YIELD state WHERE state <> 'ONLINE' "
            "RETURN count(*) AS pending"
        ),
    },
}


def quote_identifier(name: str) -> str:
    """
    Quote a label or property name for interpolation into Cypher.

    Args:
        name: Raw identifier

    Returns:
        Backtick-quoted identifier with embedded backticks doubled

    Raises:
        ValueError: If the name is empty
    """
    if not name or not name.strip():
        raise ValueError("Identifier must be a non-empty string")
    return "`" + name.replace("`", "``") + "`"


def schema_object_name(prefix: str, label: str, field: str) -> str:
    """
    Derive a stable index/constraint name from its label and field.

    Format: <prefix>_<folded label_field>_<digest of the exact pair>.
    The folded part alone is ambiguous (Person/person, A_b.c vs A.b_c);
    the digest keeps one name per (label, field).
    """
    slug = re.sub(r"[^a-z0-9_]", "_", f"{label}_{field}".lower())
    digest = hashlib.sha1(f"{label}\x00{field}".encode("utf-8")).hexdigest()[:10]
    return f"{prefix}_{slug}_{digest}"


def render_statement(
    kind: str,
    label: Optional[str] = None,
    field: Optional[str] = None,
    syntax: Optional[str] = None,
) -> str:
    """
    Build a schema statement for the configured dialect.

    Args:
        kind: Template key, e.g. "create_index"
        label: Node label
        field: Property name
        syntax: "modern" or "legacy" (defaults to settings)

    Returns:
        Cypher statement

    Raises:
        ValueError: If the dialect or template is unknown
    """
    syntax = syntax or get_settings().schema_syntax
    if syntax not in SCHEMA_TEMPLATES:
        raise ValueError(
            f"Unknown schema syntax {syntax!r}, expected one of {sorted(SCHEMA_TEMPLATES)}"
        )
    templates = SCHEMA_TEMPLATES[syntax]
    if kind not in templates:
        raise ValueError(f"Unknown schema statement {kind!r}")

    values: Dict[str, str] = {}
    if label is not None and field is not None:
        prefix = "unique" if "constraint" in kind else "index"
        values = {
            "label": quote_identifier(label),
            "field": quote_identifier(field),
            "name": quote_identifier(schema_object_name(prefix, label, field)),
        }
    return templates[kind].format(**values)


async def create_index(
    executor: GraphQueryExecutor,
    label: str,
    field: str,
    syntax: Optional[str] = None,
) -> None:
    """
    Create an index on a node property.

    Args:
        executor: Neo4j client or compatible executor
        label: Node label
        field: Property name
        syntax: DDL dialect (defaults to settings)
    """
    logger.debug(f"Creating index on {label}:{field}")
    query = render_statement("create_index", label, field, syntax)
    await executor.execute_non_query(query)
    logger.info(f"Created index on {label}:{field}")


async def drop_index(
    executor: GraphQueryExecutor,
    label: str,
    field: str,
    syntax: Optional[str] = None,
) -> None:
    """
    Drop the index on a node property.

    Args:
        executor: Neo4j client or compatible executor
        label: Node label
        field: Property name
        syntax: DDL dialect (defaults to settings)
    """
    logger.debug(f"Dropping index on {label}:{field}")
    query = render_statement("drop_index", label, field, syntax)
    await executor.execute_non_query(query)
    logger.info(f"Dropped index on {label}:{field}")


async def create_unique_constraint(
    executor: GraphQueryExecutor,
    label: str,
    field: str,
    syntax: Optional[str] = None,
) -> None:
    """
    Create a uniqueness constraint on a node property.

    Args:
        executor: Neo4j client or compatible executor
        label: Node label
        field: Property name
        syntax: DDL dialect (defaults to settings)
    """
    logger.debug(f"Creating unique constraint on {label}:{field}")
    query = render_statement("create_unique_constraint", label, field, syntax)
    await executor.execute_non_query(query)
    logger.info(f"Created unique constraint on {label}:{field}")


async def drop_unique_constraint(
    executor: GraphQueryExecutor,
    label: str,
    field: str,
    syntax: Optional[str] = None,
) -> None:
    """
    Drop the uniqueness constraint on a node property.

    Args:
        executor: Neo4j client or compatible executor
        label: Node label
        field: Property name
        syntax: DDL dialect (defaults to settings)
    """
    logger.debug(f"Dropping unique constraint on {label}:{field}")
    query = render_statement("drop_unique_constraint", label, field, syntax)
    await executor.execute_non_query(query)
    logger.info(f"Dropped unique constraint on {label}:{field}")


async def get_schema_info(
    executor: GraphQueryExecutor,
    syntax: Optional[str] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Get information about current schema.

    Args:
        executor: Neo4j client or compatible executor
        syntax: DDL dialect (defaults to settings)

    Returns:
        Dictionary with constraints and indexes information
    """
    constraints = await executor.fetch_records(
        render_statement("show_constraints", syntax=syntax)
    )
    indexes = await executor.fetch_records(render_statement("show_indexes", syntax=syntax))

    return {
        "constraints": constraints,
        "indexes": indexes,
    }


async def wait_for_indexes(
    executor: GraphQueryExecutor,
    timeout: float = 300,
    poll_interval: float = 5,
    syntax: Optional[str] = None,
) -> bool:
    """
    Wait for indexes to come online.

    Args:
        executor: Neo4j client or compatible executor
        timeout: Maximum time to wait in seconds
        poll_interval: Seconds between checks
        syntax: DDL dialect (defaults to settings)

    Returns:
        True once every index is online, False on timeout
    """
    query = render_statement("pending_indexes", syntax=syntax)

    @retry(
        stop=stop_after_delay(timeout),
        wait=wait_fixed(poll_interval),
        retry=retry_if_result(lambda pending: pending > 0),
        retry_error_callback=lambda retry_state: retry_state.outcome.result(),
    )
    async def _count_pending() -> int:
        pending = await executor.execute_scalar(query, as_type=int)
        if pending:
            logger.info(f"Waiting for {pending} indexes to come online...")
        return pending

    pending = await _count_pending()
    if pending == 0:
        logger.info("All indexes are online")
        return True

    logger.warning(f"Timeout waiting for indexes (waited {timeout}s, {pending} pending)")
    return False
