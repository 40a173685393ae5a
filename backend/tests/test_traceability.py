from datetime import date

import pytest
from sqlalchemy import update

from farmdesk.db.models import ActivityLog, Plot
from farmdesk.services.traceability import (
    TraceabilityError,
    TraceFailure,
    build_trace_code,
    lookup,
    parse_trace_code,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("SF-GAP-5-2-9", 5),
        ("  SF-GAP-12-3-4  ", 12),
        ("SF-GAP-5-2-9-extra", 5),
        ("SF-GAP-7x-1-1", 7),
        ("SF-GAP-5-2", None),
        ("XX-GAP-5-2-9", None),
        ("SF-GMP-5-2-9", None),
        ("SF-GAP-abc-2-9", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_trace_code(code, expected):
    assert parse_trace_code(code) == expected


def test_build_trace_code():
    assert build_trace_code(5, 2, 9) == "SF-GAP-5-2-9"


@pytest.mark.anyio
async def test_lookup_resolves_full_chain(session_factory, harvest_chain):
    async with session_factory() as db:
        result = await lookup(db, "SF-GAP-5-2-9")

    assert result.activity_log.id == 5
    assert result.plot.id == 2
    assert result.crop.id == 9
    assert result.crop.name == "Cherry Tomato"


@pytest.mark.anyio
async def test_only_log_segment_is_trusted(session_factory, harvest_chain):
    async with session_factory() as db:
        result = await lookup(db, "SF-GAP-5-99-99")
    assert (result.plot.id, result.crop.id) == (2, 9)


async def _reason(session_factory, code):
    async with session_factory() as db:
        with pytest.raises(TraceabilityError) as exc_info:
            await lookup(db, code)
    return exc_info.value.reason


@pytest.mark.anyio
async def test_invalid_code(session_factory, harvest_chain):
    assert await _reason(session_factory, "SF-5-2-9") == TraceFailure.INVALID_CODE


@pytest.mark.anyio
async def test_log_not_found(session_factory, harvest_chain):
    assert await _reason(session_factory, "SF-GAP-6-2-9") == TraceFailure.LOG_NOT_FOUND


@pytest.mark.anyio
async def test_log_is_not_a_harvest(session_factory, harvest_chain):
    async with session_factory() as db:
        db.add(ActivityLog(id=6, plot_id=2, activity_type="ให้ปุ๋ย", date=date(2024, 3, 1),
                           description="Fertilizer"))
        await db.commit()
    assert await _reason(session_factory, "SF-GAP-6-2-9") == TraceFailure.NOT_HARVEST


@pytest.mark.anyio
async def test_plot_not_found(session_factory, harvest_chain):
    async with session_factory() as db:
        await db.execute(update(ActivityLog).where(ActivityLog.id == 5).values(plot_id=404))
        await db.commit()
    assert await _reason(session_factory, "SF-GAP-5-2-9") == TraceFailure.PLOT_NOT_FOUND


@pytest.mark.anyio
async def test_plot_has_no_crop(session_factory, harvest_chain):
    async with session_factory() as db:
        await db.execute(update(Plot).where(Plot.id == 2).values(current_crop_id=None))
        await db.commit()
    assert await _reason(session_factory, "SF-GAP-5-2-9") == TraceFailure.PLOT_HAS_NO_CROP


@pytest.mark.anyio
async def test_crop_not_found(session_factory, harvest_chain):
    async with session_factory() as db:
        await db.execute(update(Plot).where(Plot.id == 2).values(current_crop_id=404))
        await db.commit()
    assert await _reason(session_factory, "SF-GAP-5-2-9") == TraceFailure.CROP_NOT_FOUND


@pytest.mark.anyio
async def test_trace_endpoint_is_public(client, harvest_chain):
    response = await client.get("/api/trace/SF-GAP-5-2-9")
    assert response.status_code == 200
    body = response.json()
    assert body["activityLog"]["activityType"] == "เก็บเกี่ยว"
    assert body["plot"]["currentCropId"] == 9
    assert body["crop"]["plantingDate"] == "2024-01-10"


@pytest.mark.anyio
async def test_trace_endpoint_reports_reason(client, harvest_chain):
    response = await client.get("/api/trace/SF-GAP-77-2-9")
    assert response.status_code == 404
    assert response.json()["detail"]["reason"] == "log_not_found"

    response = await client.get("/api/trace/hello")
    assert response.status_code == 404
    assert response.json()["detail"]["reason"] == "invalid_code"
