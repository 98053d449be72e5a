"""One-time import of growth records kept in the settings store by the mobile app."""

import logging

from baby_tracker.errors import ValidationError
from baby_tracker.models import RecordKind
from baby_tracker.persistence.record_store import RecordStore
from baby_tracker.persistence.settings_store import BaseSettingsStore

logger = logging.getLogger(__name__)

LEGACY_GROWTH_KEY = "records"


async def import_legacy_growth(
    record_store: RecordStore,
    settings_store: BaseSettingsStore,
) -> int:
    """
    Move growth entries stored as a JSON list under "records" into growth_records.
    Malformed entries are logged and dropped. Returns the number imported.
    """
    entries = await settings_store.get(LEGACY_GROWTH_KEY)
    if entries is None:
        return 0
    if not isinstance(entries, list):
        logger.warning("Legacy growth value is not a list, leaving it untouched")
        return 0

    imported = 0
    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("Skipping legacy growth entry: %r", entry)
            continue
        fields = {k: entry.get(k) for k in ("height", "weight", "date")}
        try:
            await record_store.insert(RecordKind.GROWTH, fields)
        except ValidationError as e:
            logger.warning("Skipping legacy growth entry %s: %s", entry.get("id"), e)
            continue
        imported += 1

    await settings_store.delete(LEGACY_GROWTH_KEY)
    logger.info("Imported %d legacy growth record(s)", imported)
    return imported
