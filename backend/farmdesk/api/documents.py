from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.db.database import get_db
from farmdesk.permissions.constants import Action, AppModule
from farmdesk.permissions.dependencies import require_module_permission
from farmdesk.services import documents

router = APIRouter()


@router.get(
    "/invoice/{order_id}",
    response_class=HTMLResponse,
    dependencies=[Depends(require_module_permission(AppModule.SALES, Action.VIEW))],
)
async def invoice(order_id: int, db: AsyncSession = Depends(get_db)):
    return HTMLResponse(await documents.render_invoice(db, order_id))


@router.get(
    "/payslip/{payroll_id}",
    response_class=HTMLResponse,
    dependencies=[Depends(require_module_permission(AppModule.HR, Action.VIEW))],
)
async def payslip(payroll_id: int, db: AsyncSession = Depends(get_db)):
    return HTMLResponse(await documents.render_payslip(db, payroll_id))


@router.get(
    "/label/{log_id}",
    response_class=HTMLResponse,
    dependencies=[Depends(require_module_permission(AppModule.GAP, Action.VIEW))],
)
async def label(log_id: int, db: AsyncSession = Depends(get_db)):
    return HTMLResponse(await documents.render_label(db, log_id))
