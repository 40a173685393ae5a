from fastapi import APIRouter, Depends, Query

from farmdesk.api.deps import ensure_permission, get_snapshot
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.services.reports import ReportBundle, ReportRange, build_reports
from farmdesk.sync.views import FarmSnapshot

router = APIRouter()


@router.get("", response_model=ReportBundle)
async def get_reports(
    report_range: ReportRange = Query(ReportRange.ALL, alias="range"),
    snapshot: FarmSnapshot = Depends(get_snapshot),
):
    ensure_permission(snapshot.current_user, AppModule.REPORTS, Action.VIEW)
    return build_reports(
        report_range,
        crops=snapshot.crops,
        ledger_entries=snapshot.ledger_entries,
        sales_orders=snapshot.sales_orders,
        customers=snapshot.customers,
    )
