"""
Public product traceability.

A label carries ``SF-GAP-<activityLogId>-<plotId>-<cropId>``. Only the log id
is trusted: the plot and crop are re-resolved from the harvest log so a
stale label can never mix records.
"""
import re
from enum import Enum
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.core.exceptions import RecordNotFound
from farmdesk.core.logging import trace_logger
from farmdesk.db.enums import ActivityType
from farmdesk.db.models import ActivityLog, Crop, Plot
from farmdesk.sync.mappers import to_view
from farmdesk.sync.views import ActivityLogView, CropView, PlotView, TraceabilityResult

CODE_PREFIX = "SF"
CODE_SUBPREFIX = "GAP"
_LEADING_DIGITS = re.compile(r"^\d+")


class TraceFailure(str, Enum):
    INVALID_CODE = "invalid_code"
    LOG_NOT_FOUND = "log_not_found"
    NOT_HARVEST = "not_harvest"
    PLOT_NOT_FOUND = "plot_not_found"
    PLOT_HAS_NO_CROP = "plot_has_no_crop"
    CROP_NOT_FOUND = "crop_not_found"


FAILURE_MESSAGES = {
    TraceFailure.INVALID_CODE: "รหัสอ้างอิงไม่ถูกต้อง โปรดตรวจสอบรูปแบบ (เช่น SF-GAP-6-3-2)",
    TraceFailure.LOG_NOT_FOUND: "Could not find a harvest log with that ID.",
    TraceFailure.NOT_HARVEST: "Could not find a harvest log with that ID.",
    TraceFailure.PLOT_NOT_FOUND: "Could not find the plot associated with this log.",
    TraceFailure.PLOT_HAS_NO_CROP: "The plot is not currently associated with a crop.",
    TraceFailure.CROP_NOT_FOUND: "Could not find the crop data for this plot.",
}


class TraceabilityError(RecordNotFound):
    def __init__(self, reason: TraceFailure):
        super().__init__(FAILURE_MESSAGES[reason])
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {"reason": self.reason.value, "message": self.message}


def build_trace_code(log_id: int, plot_id: int, crop_id: int) -> str:
    return f"{CODE_PREFIX}-{CODE_SUBPREFIX}-{log_id}-{plot_id}-{crop_id}"


def parse_trace_code(code: Optional[str]) -> Optional[int]:
    """Activity log id from a trace code, or None when the code is malformed."""
    if not code:
        return None
    parts = code.strip().split("-")
    if len(parts) < 5 or parts[0] != CODE_PREFIX or parts[1] != CODE_SUBPREFIX:
        return None
    match = _LEADING_DIGITS.match(parts[2])
    if match is None:
        return None
    return int(match.group())


async def lookup(db: AsyncSession, code: str) -> TraceabilityResult:
    log_id = parse_trace_code(code)
    if log_id is None:
        raise TraceabilityError(TraceFailure.INVALID_CODE)

    log = await db.get(ActivityLog, log_id)
    if log is None:
        raise TraceabilityError(TraceFailure.LOG_NOT_FOUND)
    if log.activity_type != ActivityType.harvest.value:
        raise TraceabilityError(TraceFailure.NOT_HARVEST)

    plot = await db.get(Plot, log.plot_id)
    if plot is None:
        raise TraceabilityError(TraceFailure.PLOT_NOT_FOUND)
    if plot.current_crop_id is None:
        raise TraceabilityError(TraceFailure.PLOT_HAS_NO_CROP)

    crop = await db.get(Crop, plot.current_crop_id)
    if crop is None:
        raise TraceabilityError(TraceFailure.CROP_NOT_FOUND)

    trace_logger.info(f"Traced {code.strip()}", log_id=log.id, plot_id=plot.id, crop_id=crop.id)
    return TraceabilityResult(
        activity_log=to_view(ActivityLogView, log),
        plot=to_view(PlotView, plot),
        crop=to_view(CropView, crop),
    )
