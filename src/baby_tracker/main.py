"""FastAPI application - the record store surface used by the app screens."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from baby_tracker import __version__
from baby_tracker.config import get_settings
from baby_tracker.errors import (
    DataAnomaly,
    NotFound,
    StorageUnavailable,
    TrackerError,
    TrackingStateError,
    ValidationError,
)
from baby_tracker.metrics import (
    AnomalyLog,
    ChartSeries,
    feeding_chart,
    format_elapsed,
    format_sleep_duration,
    growth_chart,
    sleep_chart,
)
from baby_tracker.models import Profile, RecordKind
from baby_tracker.persistence import BaseSettingsStore, RecordStore, create_stores, import_legacy_growth
from baby_tracker.services import RecordQueryService, SleepTracker, ViewType

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open stores and build services. StorageUnavailable aborts startup."""
    record_store, settings_store = create_stores()
    try:
        await record_store.open()
        await import_legacy_growth(record_store, settings_store)
        app.state.record_store = record_store
        app.state.settings_store = settings_store
        app.state.query_service = RecordQueryService(record_store)
        app.state.sleep_tracker = SleepTracker(record_store)
        yield
    finally:
        await settings_store.close()
        await record_store.close()


app = FastAPI(
    title="Baby Tracker",
    description="Local record store for feeding, sleep and growth logs",
    version=__version__,
    lifespan=lifespan,
)


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_settings_store(request: Request) -> BaseSettingsStore:
    return request.app.state.settings_store


def get_query_service(request: Request) -> RecordQueryService:
    return request.app.state.query_service


def get_sleep_tracker(request: Request) -> SleepTracker:
    return request.app.state.sleep_tracker


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})


@app.exception_handler(TrackingStateError)
async def tracking_state_handler(request: Request, exc: TrackingStateError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(DataAnomaly)
async def anomaly_handler(request: Request, exc: DataAnomaly) -> JSONResponse:
    logger.warning("Data anomaly: %s", exc)
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StorageUnavailable)
async def storage_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    logger.error("Storage unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})


@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    logger.error("Unhandled tracker error: %s", exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def _dump(record: Any) -> dict[str, Any]:
    return record.model_dump(mode="json")


def _tracking_status(tracker: SleepTracker) -> dict[str, Any]:
    started = tracker.started_at
    return {
        "state": tracker.state.value,
        "started_at": started.isoformat() if started else None,
        "elapsed": format_elapsed(tracker.elapsed_seconds()),
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check."""
    return {"status": "ok"}


@app.post("/records/{kind}", status_code=201)
async def create_record(
    kind: str,
    fields: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_record_store),
) -> dict[str, Any]:
    record_id = await store.insert(kind, fields)
    return _dump(await store.get(kind, record_id))


@app.get("/records/{kind}")
async def list_records(
    kind: str,
    since: datetime | None = Query(default=None),
    until: datetime | None = Query(default=None),
    store: RecordStore = Depends(get_record_store),
) -> list[dict[str, Any]]:
    """Newest first. Without since, lists every record of the kind."""
    return [_dump(r) for r in await store.list_since(kind, since, until=until)]


@app.get("/records/{kind}/{record_id}")
async def read_record(
    kind: str,
    record_id: str,
    store: RecordStore = Depends(get_record_store),
) -> dict[str, Any]:
    return _dump(await store.get(kind, record_id))


@app.patch("/records/{kind}/{record_id}")
async def edit_record(
    kind: str,
    record_id: str,
    fields: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_record_store),
) -> dict[str, Any]:
    await store.update(kind, record_id, fields)
    return _dump(await store.get(kind, record_id))


@app.delete("/records/{kind}/{record_id}", status_code=204)
async def remove_record(
    kind: str,
    record_id: str,
    store: RecordStore = Depends(get_record_store),
) -> None:
    await store.delete(kind, record_id)


@app.get("/views/{view}/{kind}")
async def view_records(
    view: str,
    kind: str,
    query: RecordQueryService = Depends(get_query_service),
) -> dict[str, Any]:
    """Records for a named range. Sleep records carry a display duration."""
    date_range, records = await query.records_for_view(kind, view)
    anomalies = AnomalyLog()
    items = []
    for record in records:
        item = _dump(record)
        if RecordKind.parse(kind) is RecordKind.SLEEP:
            item["duration"] = format_sleep_duration(record.start, record.end, anomalies)
        items.append(item)
    return {
        "view": ViewType.parse(view).value,
        "start": date_range.start.isoformat(),
        "end": date_range.end.isoformat(),
        "records": items,
        "anomalies": [str(a) for a in anomalies],
    }


@app.get("/charts/{kind}")
async def chart(
    kind: str,
    view: str = Query(default=ViewType.PAST_7_DAYS.value),
    metric: str = Query(default="weight"),
    query: RecordQueryService = Depends(get_query_service),
    store: RecordStore = Depends(get_record_store),
) -> ChartSeries:
    """Chart series in chronological order. Growth charts cover all measurements."""
    record_kind = RecordKind.parse(kind)
    if record_kind is RecordKind.GROWTH:
        records = await store.list_since(record_kind, None)
        return growth_chart(list(reversed(records)), metric=metric)
    _, records = await query.records_for_view(record_kind, view)
    records = list(reversed(records))
    if record_kind is RecordKind.FEEDING:
        return feeding_chart(records)
    return sleep_chart(records)


@app.get("/profile")
async def read_profile(settings_store: BaseSettingsStore = Depends(get_settings_store)) -> Profile:
    return await settings_store.get_profile()


@app.put("/profile")
async def write_profile(
    profile: Profile,
    settings_store: BaseSettingsStore = Depends(get_settings_store),
) -> Profile:
    await settings_store.save_profile(profile)
    return profile


@app.get("/sleep/tracking")
async def tracking_status(tracker: SleepTracker = Depends(get_sleep_tracker)) -> dict[str, Any]:
    return _tracking_status(tracker)


@app.post("/sleep/tracking/start")
async def tracking_start(tracker: SleepTracker = Depends(get_sleep_tracker)) -> dict[str, Any]:
    tracker.start_tracking()
    return _tracking_status(tracker)


@app.post("/sleep/tracking/stop")
async def tracking_stop(tracker: SleepTracker = Depends(get_sleep_tracker)) -> dict[str, Any]:
    record = await tracker.stop_tracking()
    return {
        **_dump(record),
        "duration": format_sleep_duration(record.start, record.end),
    }


@app.post("/sleep/tracking/cancel")
async def tracking_cancel(tracker: SleepTracker = Depends(get_sleep_tracker)) -> dict[str, Any]:
    tracker.cancel_tracking()
    return _tracking_status(tracker)
