import sqlite3

import aiosqlite
import pytest

from baby_tracker.errors import StorageUnavailable
from baby_tracker.persistence import RecordStore, ensure_schema
from baby_tracker.persistence.schema import SCHEMA_VERSION, get_schema_version


def _tables(path):
    with sqlite3.connect(path) as conn:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {r[0] for r in rows}


async def test_open_creates_tables(store, db_path):
    assert {"feeding_records", "sleep_records", "growth_records"} <= _tables(db_path)


async def test_ensure_schema_is_idempotent(tmp_path):
    async with aiosqlite.connect(tmp_path / "a.db") as conn:
        await ensure_schema(conn)
        await conn.execute(
            "INSERT INTO feeding_records (datetime, amount, notes) VALUES ('2024-01-01T08:00:00.000', 'normal', '')"
        )
        await conn.commit()
        await ensure_schema(conn)
        async with conn.execute("SELECT COUNT(*) FROM feeding_records") as cursor:
            (count,) = await cursor.fetchone()
        assert count == 1
        assert await get_schema_version(conn) == SCHEMA_VERSION


async def test_reopen_keeps_data(db_path, clock):
    async with RecordStore(db_path, clock=clock) as first:
        record_id = await first.insert("sleep", {"start": "2024-03-09T21:00:00"})
    async with RecordStore(db_path, clock=clock) as second:
        record = await second.get("sleep", record_id)
    assert record.end is None


async def test_open_fails_when_path_is_directory(tmp_path):
    with pytest.raises(StorageUnavailable):
        await RecordStore(tmp_path).open()


async def test_operations_require_open_store(db_path):
    store = RecordStore(db_path)
    with pytest.raises(StorageUnavailable):
        await store.list_since("feeding", None)
