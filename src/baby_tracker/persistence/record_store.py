"""Record store - async CRUD and range queries over feeding, sleep and growth records."""

import logging
import sqlite3
from collections.abc import Callable, Mapping
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from baby_tracker.errors import DataAnomaly, NotFound, StorageUnavailable, ValidationError
from baby_tracker.models import Record, RecordKind
from baby_tracker.models.records import to_local_naive
from baby_tracker.persistence.schema import KindSchema, ensure_schema, schema_for

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


def format_timestamp(value: datetime) -> str:
    """Storage form: local time, microsecond precision. Text order equals time order."""
    return to_local_naive(value).isoformat(timespec="microseconds")


def _validation_error(exc: PydanticValidationError) -> ValidationError:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "record"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return ValidationError("; ".join(messages), messages)


def validate_fields(model: type[BaseModel], data: Mapping[str, Any]) -> BaseModel:
    """Validate writable fields, raising the store's ValidationError."""
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as e:
        raise _validation_error(e) from e


class RecordStore:
    """SQLite-backed store for all record kinds. One instance per device database."""

    def __init__(
        self,
        db_path: Path | str,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._db_path = str(db_path)
        self._clock = clock
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self) -> "RecordStore":
        """Open the database and ensure the schema. Raises StorageUnavailable."""
        if self.is_open:
            return self
        conn = None
        try:
            if self._db_path != MEMORY_DB:
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(self._db_path)
            conn.row_factory = aiosqlite.Row
            await ensure_schema(conn)
        except (sqlite3.Error, OSError) as e:
            logger.error("Could not open record store %s: %s", self._db_path, e)
            if conn is not None:
                await conn.close()
            raise StorageUnavailable(f"Cannot open database {self._db_path}: {e}") from e
        self._conn = conn
        logger.info("Record store opened: %s", self._db_path)
        return self

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None
        logger.info("Record store closed: %s", self._db_path)

    async def __aenter__(self) -> "RecordStore":
        return await self.open()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageUnavailable("Record store is not open")
        return self._conn

    async def _write(self, sql: str, params: tuple[Any, ...]) -> aiosqlite.Cursor:
        """Run one statement as its own transaction."""
        conn = self._connection()
        try:
            cursor = await conn.execute(sql, params)
            await conn.commit()
            return cursor
        except sqlite3.Error as e:
            await conn.rollback()
            logger.exception("Write failed: %s", e)
            raise StorageUnavailable(f"Write failed: {e}") from e

    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[aiosqlite.Row]:
        conn = self._connection()
        try:
            async with conn.execute(sql, params) as cursor:
                return list(await cursor.fetchall())
        except sqlite3.Error as e:
            logger.exception("Query failed: %s", e)
            raise StorageUnavailable(f"Query failed: {e}") from e

    def _to_row(self, schema: KindSchema, fields: BaseModel) -> tuple[Any, ...]:
        values = []
        for column in schema.columns:
            value = getattr(fields, column)
            if isinstance(value, datetime):
                value = format_timestamp(value)
            elif isinstance(value, Enum):
                value = value.value
            values.append(value)
        return tuple(values)

    def _from_row(self, schema: KindSchema, row: aiosqlite.Row) -> Record:
        data = dict(row)
        try:
            return schema.record_model.model_validate(data)
        except PydanticValidationError as e:
            raise DataAnomaly(
                f"Unreadable {schema.kind.value} record {data.get('id')!r}: {e.error_count()} invalid field(s)"
            ) from e

    def _coerce_id(self, schema: KindSchema, record_id: Any) -> int | str:
        if schema.text_id:
            return str(record_id)
        try:
            return int(record_id)
        except (TypeError, ValueError):
            raise NotFound(schema.kind.value, record_id) from None

    async def _next_text_id(self, schema: KindSchema) -> str:
        """Time-based id in epoch milliseconds, bumped past collisions."""
        candidate = int(self._clock().timestamp() * 1000)
        while await self._fetch(
            f"SELECT 1 FROM {schema.table} WHERE id = ?", (str(candidate),)
        ):
            candidate += 1
        return str(candidate)

    async def insert(self, kind: RecordKind | str, fields: Mapping[str, Any]) -> int | str:
        """Validate and persist a new record. Returns the new id."""
        schema = schema_for(kind)
        data = dict(fields)
        if schema.kind is RecordKind.GROWTH and data.get("date") is None:
            data["date"] = self._clock()
        validated = validate_fields(schema.fields_model, data)
        values = self._to_row(schema, validated)
        columns = ", ".join(schema.quoted(c) for c in schema.columns)
        placeholders = ", ".join("?" for _ in schema.columns)

        if schema.text_id:
            record_id: int | str = await self._next_text_id(schema)
            await self._write(
                f"INSERT INTO {schema.table} (id, {columns}) VALUES (?, {placeholders})",
                (record_id, *values),
            )
        else:
            cursor = await self._write(
                f"INSERT INTO {schema.table} ({columns}) VALUES ({placeholders})",
                values,
            )
            record_id = int(cursor.lastrowid)
        logger.info("Inserted %s record %s", schema.kind.value, record_id)
        return record_id

    async def get(self, kind: RecordKind | str, record_id: Any) -> Record:
        """Fetch one record. Raises NotFound."""
        schema = schema_for(kind)
        rid = self._coerce_id(schema, record_id)
        rows = await self._fetch(f"SELECT * FROM {schema.table} WHERE id = ?", (rid,))
        if not rows:
            raise NotFound(schema.kind.value, record_id)
        return self._from_row(schema, rows[0])

    async def update(self, kind: RecordKind | str, record_id: Any, fields: Mapping[str, Any]) -> None:
        """Partial update. Unspecified fields keep their stored value."""
        schema = schema_for(kind)
        unknown = sorted(set(fields) - set(schema.columns))
        if unknown:
            raise ValidationError(f"Unknown {schema.kind.value} field(s): {', '.join(unknown)}")
        current = await self.get(schema.kind, record_id)
        merged = {column: getattr(current, column) for column in schema.columns}
        merged.update(fields)
        validated = validate_fields(schema.fields_model, merged)

        assignments = ", ".join(f"{schema.quoted(c)} = ?" for c in schema.columns)
        cursor = await self._write(
            f"UPDATE {schema.table} SET {assignments} WHERE id = ?",
            (*self._to_row(schema, validated), current.id),
        )
        if cursor.rowcount == 0:
            raise NotFound(schema.kind.value, record_id)
        logger.info("Updated %s record %s (%s)", schema.kind.value, current.id, ", ".join(sorted(fields)))

    async def delete(self, kind: RecordKind | str, record_id: Any) -> None:
        """Delete by id. Deleting a missing or already deleted id raises NotFound."""
        schema = schema_for(kind)
        rid = self._coerce_id(schema, record_id)
        cursor = await self._write(f"DELETE FROM {schema.table} WHERE id = ?", (rid,))
        if cursor.rowcount == 0:
            raise NotFound(schema.kind.value, record_id)
        logger.info("Deleted %s record %s", schema.kind.value, rid)

    async def list_since(
        self,
        kind: RecordKind | str,
        since: datetime | None,
        until: datetime | None = None,
    ) -> list[Record]:
        """
        Records with timestamp >= since (and <= until when given), newest first.
        since=None lists from the beginning. Unreadable rows are logged and skipped.
        """
        schema = schema_for(kind)
        time_col = schema.quoted(schema.time_column)
        clauses: list[str] = []
        params: list[str] = []
        if since is not None:
            clauses.append(f"{time_col} >= ?")
            params.append(format_timestamp(since))
        if until is not None:
            clauses.append(f"{time_col} <= ?")
            params.append(format_timestamp(until))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = await self._fetch(
            f"SELECT * FROM {schema.table} {where} ORDER BY {time_col} DESC, id DESC",
            tuple(params),
        )
        records: list[Record] = []
        for row in rows:
            try:
                records.append(self._from_row(schema, row))
            except DataAnomaly as e:
                logger.warning("Skipping record: %s", e)
        return records
