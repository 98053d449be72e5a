"""Store factory - creates the record store and a file or Redis settings store."""

from baby_tracker.config import Settings, get_display_config, get_settings
from baby_tracker.persistence.record_store import RecordStore
from baby_tracker.persistence.redis_store import RedisSettingsStore
from baby_tracker.persistence.settings_store import BaseSettingsStore, SettingsStore


def create_stores(settings: Settings | None = None) -> tuple[RecordStore, BaseSettingsStore]:
    """
    Create record and settings stores from config.
    Returns (record_store, settings_store). The record store still needs open().
    Settings use Redis when REDIS_URL is set; otherwise a JSON file in data_dir.
    """
    settings = settings or get_settings()
    display = get_display_config(str(settings.config_dir or ""))
    default_name = display["profile"]["default_name"]

    record_store = RecordStore(settings.db_path)
    if settings.redis_url:
        return record_store, RedisSettingsStore(settings.redis_url, default_name=default_name)
    return record_store, SettingsStore(settings.data_dir, default_name=default_name)
