"""Live sleep tracking - Idle -> Tracking -> Idle."""

import logging
import weakref
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from baby_tracker.errors import TrackingStateError, ValidationError
from baby_tracker.models import RecordKind, SleepRecord
from baby_tracker.persistence import RecordStore

logger = logging.getLogger(__name__)


class TrackerState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"


class SleepTracker:
    """
    One running session per store, shared by every tracker built on that store.
    Nothing is written until stop_tracking(), which persists a completed SleepRecord.
    """

    _sessions: "weakref.WeakKeyDictionary[RecordStore, SleepTracker]" = weakref.WeakKeyDictionary()

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._clock = clock
        self._started_at: datetime | None = None

    @property
    def state(self) -> TrackerState:
        return TrackerState.IDLE if self._started_at is None else TrackerState.TRACKING

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    def start_tracking(self) -> datetime:
        """Idle -> Tracking. Returns the captured start time."""
        if self._started_at is not None:
            raise TrackingStateError("Sleep tracking already in progress")
        active = self._sessions.get(self._store)
        if active is not None and active is not self:
            raise TrackingStateError("Another sleep session is running on this store")
        self._started_at = self._clock()
        self._sessions[self._store] = self
        logger.info("Sleep tracking started at %s", self._started_at.isoformat())
        return self._started_at

    def elapsed_seconds(self) -> int:
        """Seconds since start. 0 while idle."""
        if self._started_at is None:
            return 0
        return max(0, int((self._clock() - self._started_at).total_seconds()))

    async def stop_tracking(self) -> SleepRecord:
        """
        Tracking -> Idle. Requires now > start; otherwise the session keeps running
        and ValidationError is raised.
        """
        start = self._started_at
        if start is None:
            raise TrackingStateError("Sleep tracking is not running")
        end = self._clock()
        if end <= start:
            raise ValidationError("End time must be after start time")
        # Leave Tracking before the await; a concurrent stop sees Idle.
        self._started_at = None
        try:
            record_id = await self._store.insert(RecordKind.SLEEP, {"start": start, "end": end})
        except Exception:
            self._started_at = start
            raise
        self._release()
        logger.info("Sleep tracking stopped, saved record %s", record_id)
        return await self._store.get(RecordKind.SLEEP, record_id)

    def cancel_tracking(self) -> None:
        """Discard the running session without saving."""
        if self._started_at is None:
            raise TrackingStateError("Sleep tracking is not running")
        self._started_at = None
        self._release()
        logger.info("Sleep tracking cancelled")

    def _release(self) -> None:
        if self._sessions.get(self._store) is self:
            del self._sessions[self._store]
