"""Schema management - per-kind table layout and idempotent table creation."""

import logging
from dataclasses import dataclass

import aiosqlite
from pydantic import BaseModel

from baby_tracker.models import (
    FeedingFields,
    FeedingRecord,
    GrowthFields,
    GrowthRecord,
    RecordKind,
    SleepFields,
    SleepRecord,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS feeding_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    datetime TEXT NOT NULL,
    amount TEXT,
    notes TEXT
);
CREATE TABLE IF NOT EXISTS sleep_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    start TEXT NOT NULL,
    "end" TEXT
);
CREATE TABLE IF NOT EXISTS growth_records (
    id TEXT PRIMARY KEY,
    height REAL NOT NULL,
    weight REAL NOT NULL,
    date TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS schema_meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_feeding_datetime ON feeding_records(datetime);
CREATE INDEX IF NOT EXISTS idx_sleep_start ON sleep_records(start);
CREATE INDEX IF NOT EXISTS idx_growth_date ON growth_records(date);
"""


@dataclass(frozen=True)
class KindSchema:
    """Table layout and validation models for one record kind."""

    kind: RecordKind
    table: str
    time_column: str
    columns: tuple[str, ...]
    fields_model: type[BaseModel]
    record_model: type[BaseModel]
    text_id: bool = False

    def quoted(self, column: str) -> str:
        return f'"{column}"'


KIND_SCHEMAS: dict[RecordKind, KindSchema] = {
    RecordKind.FEEDING: KindSchema(
        kind=RecordKind.FEEDING,
        table="feeding_records",
        time_column="datetime",
        columns=("datetime", "amount", "notes"),
        fields_model=FeedingFields,
        record_model=FeedingRecord,
    ),
    RecordKind.SLEEP: KindSchema(
        kind=RecordKind.SLEEP,
        table="sleep_records",
        time_column="start",
        columns=("start", "end"),
        fields_model=SleepFields,
        record_model=SleepRecord,
    ),
    RecordKind.GROWTH: KindSchema(
        kind=RecordKind.GROWTH,
        table="growth_records",
        time_column="date",
        columns=("height", "weight", "date"),
        fields_model=GrowthFields,
        record_model=GrowthRecord,
        text_id=True,
    ),
}


def schema_for(kind: "RecordKind | str") -> KindSchema:
    """Single dispatch point from a record type name to its table."""
    return KIND_SCHEMAS[RecordKind.parse(kind)]


async def ensure_schema(conn: aiosqlite.Connection) -> None:
    """Create all tables and indexes if absent. Safe to run on every start."""
    await conn.executescript(SCHEMA_SQL)
    await conn.execute(
        "INSERT OR IGNORE INTO schema_meta (key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    await conn.commit()
    logger.debug("Schema ensured (version %s)", SCHEMA_VERSION)


async def get_schema_version(conn: aiosqlite.Connection) -> int | None:
    """Schema version recorded by ensure_schema, None if no version row exists."""
    async with conn.execute(
        "SELECT value FROM schema_meta WHERE key = 'schema_version'"
    ) as cursor:
        row = await cursor.fetchone()
    return int(row[0]) if row else None
