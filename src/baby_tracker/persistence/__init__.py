"""Persistence layer."""

from baby_tracker.persistence.factory import create_stores
from baby_tracker.persistence.legacy import import_legacy_growth
from baby_tracker.persistence.record_store import RecordStore
from baby_tracker.persistence.redis_store import RedisSettingsStore
from baby_tracker.persistence.schema import KIND_SCHEMAS, ensure_schema, schema_for
from baby_tracker.persistence.settings_store import BaseSettingsStore, SettingsStore

__all__ = [
    "KIND_SCHEMAS",
    "BaseSettingsStore",
    "RecordStore",
    "RedisSettingsStore",
    "SettingsStore",
    "create_stores",
    "ensure_schema",
    "import_legacy_growth",
    "schema_for",
]
