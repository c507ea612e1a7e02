"""
Shared helpers for the store's bulk statements.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

# asyncpg refuses statements with more than 2**15 - 1 arguments, below
# PostgreSQL's own 2**16 - 1 wire limit
MAX_BIND_PARAMS = 32767


def dialect_insert(session: AsyncSession, model):
    """
    INSERT construct for the session's dialect.

    Both dialects expose the same on_conflict_do_update / on_conflict_do_nothing
    API, so upsert code is written once.
    """
    bind = session.bind
    if bind is not None and bind.dialect.name == "sqlite":
        return sqlite.insert(model)
    return postgresql.insert(model)


def get_chunks(num_items: int, column_count: int) -> list[tuple[int, int]]:
    """
    Split num_items rows into [start, end) slices whose bind parameters
    (rows * columns) stay under MAX_BIND_PARAMS.
    """
    if num_items <= 0:
        return []
    max_rows = max(MAX_BIND_PARAMS // column_count, 1)
    return [
        (start, min(start + max_rows, num_items))
        for start in range(0, num_items, max_rows)
    ]


def clean_data_for_db(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Strip NUL characters, which PostgreSQL rejects in text columns."""
    return [
        {
            key: value.replace("\x00", "") if isinstance(value, str) else value
            for key, value in row.items()
        }
        for row in rows
    ]
