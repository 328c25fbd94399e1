"""Buffered streaming over a query result cursor."""

from typing import AsyncIterable, AsyncIterator, Callable, List, TypeVar

from neo4j import Record

from neograph_manager.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

RecordTransform = Callable[[Record], T]


async def batch_records(
    records: AsyncIterable[Record],
    transform: RecordTransform,
    buffer_size: int,
) -> AsyncIterator[List[T]]:
    """
    Group transformed records into batches of ``buffer_size``.

    A batch is yielded as soon as it fills. Once the cursor is exhausted
    the remainder is yielded as a final batch, even when it is empty, so a
    consumer always sees at least one batch and the last batch marks the
    end of the result.

    Args:
        records: Result cursor (any async iterable of records)
        transform: Function applied to each record, in cursor order
        buffer_size: Maximum number of items per batch

    Yields:
        Lists of transformed records

    Raises:
        ValueError: If buffer_size is less than 1
    """
    if buffer_size < 1:
        raise ValueError(f"buffer_size must be a positive integer, got {buffer_size}")

    buffer: List[T] = []
    records_processed = 0
    batches_emitted = 0

    async for record in records:
        records_processed += 1
        buffer.append(transform(record))

        if len(buffer) >= buffer_size:
            batches_emitted += 1
            logger.debug(
                f"Records processed: {records_processed} (batch {batches_emitted})"
            )
            yield buffer
            buffer = []

    batches_emitted += 1
    logger.debug(
        f"Total records processed: {records_processed} in {batches_emitted} batches"
    )
    yield buffer
