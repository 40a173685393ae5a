"""
Printable documents: invoices, payslips and product labels.

Rendered server-side from Jinja2 templates in farmdesk/templates. Label QR
codes are generated with ``qrcode`` and inlined as PNG data URIs.
"""
import base64
from io import BytesIO
from pathlib import Path
from typing import Optional

import qrcode
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.core.exceptions import RecordNotFound
from farmdesk.db.models import ActivityLog, Crop, Customer, Employee, FarmSetting, Payroll, Plot, SalesOrder
from farmdesk.services.traceability import build_trace_code
from farmdesk.sync.mappers import map_farm_info, to_view
from farmdesk.sync.views import (
    ActivityLogView, CropView, CustomerView, EmployeeView, FarmInfo, PayrollView, PlotView, SalesOrderView,
)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

NO_CROP_FOR_LABEL = "ไม่พบข้อมูลพืชผลสำหรับแปลงนี้ ไม่สามารถสร้างฉลากได้"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)
_env.filters["baht"] = lambda value: f"{value:,.2f}"


def render(template_name: str, **context) -> str:
    return _env.get_template(template_name).render(**context)


def label_qr_payload(crop: CropView, plot: PlotView, log: ActivityLogView) -> str:
    return (
        "Smile Farm Traceability\n"
        f"Product: {crop.name}\n"
        f"Plot: {plot.name}\n"
        f"Harvest Date: {log.date.isoformat()}\n"
        f"Operator: {log.personnel or ''}\n"
        f"Log ID: {log.id}"
    )


def qr_data_uri(payload: str) -> str:
    img = qrcode.make(payload)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


async def _farm_info(db: AsyncSession) -> FarmInfo:
    row = await db.get(FarmSetting, 1)
    return map_farm_info(row.info if row is not None else None)


async def render_invoice(db: AsyncSession, order_id: int) -> str:
    order_row = await db.get(SalesOrder, order_id)
    if order_row is None:
        raise RecordNotFound(f"Sales order #{order_id} not found.")
    order = to_view(SalesOrderView, order_row)

    customer_row = await db.get(Customer, order.customer_id)
    customer: Optional[CustomerView] = to_view(CustomerView, customer_row) if customer_row else None

    crop_ids = {item.crop_id for item in order.items}
    crop_names: dict[int, str] = {}
    if crop_ids:
        result = await db.execute(select(Crop.id, Crop.name).where(Crop.id.in_(crop_ids)))
        crop_names = {crop_id: name for crop_id, name in result.all()}

    lines = [
        {
            "name": crop_names.get(item.crop_id, "N/A"),
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total": item.quantity * item.unit_price,
        }
        for item in order.items
    ]

    return render(
        "invoice.html",
        farm=await _farm_info(db),
        order=order,
        customer=customer,
        lines=lines,
    )


async def render_payslip(db: AsyncSession, payroll_id: int) -> str:
    payroll_row = await db.get(Payroll, payroll_id)
    if payroll_row is None:
        raise RecordNotFound(f"Payroll entry #{payroll_id} not found.")
    payroll = to_view(PayrollView, payroll_row)

    employee_row = await db.get(Employee, payroll.employee_id)
    if employee_row is None:
        raise RecordNotFound(f"Employee #{payroll.employee_id} not found.")

    return render(
        "payslip.html",
        farm=await _farm_info(db),
        payroll=payroll,
        employee=to_view(EmployeeView, employee_row),
    )


async def render_label(db: AsyncSession, log_id: int) -> str:
    log_row = await db.get(ActivityLog, log_id)
    if log_row is None:
        raise RecordNotFound(f"Activity log #{log_id} not found.")
    log = to_view(ActivityLogView, log_row)

    plot_row = await db.get(Plot, log.plot_id)
    if plot_row is None or plot_row.current_crop_id is None:
        raise RecordNotFound(NO_CROP_FOR_LABEL)
    crop_row = await db.get(Crop, plot_row.current_crop_id)
    if crop_row is None:
        raise RecordNotFound(NO_CROP_FOR_LABEL)

    plot = to_view(PlotView, plot_row)
    crop = to_view(CropView, crop_row)

    return render(
        "label.html",
        farm=await _farm_info(db),
        log=log,
        plot=plot,
        crop=crop,
        qr_src=qr_data_uri(label_qr_payload(crop, plot, log)),
        trace_code=build_trace_code(log.id, plot.id, crop.id),
    )
