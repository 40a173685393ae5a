from datetime import date

import pytest

from farmdesk.core.config import settings
from farmdesk.db.models import ActivityLog, Crop, Customer, Payroll, Plot, SalesOrder, User
from farmdesk.services.documents import NO_CROP_FOR_LABEL, label_qr_payload, qr_data_uri
from farmdesk.sync.views import ActivityLogView, CropView, PlotView


@pytest.fixture
async def order(session_factory):
    async with session_factory() as db:
        db.add(Crop(id=1, name="Butterhead Lettuce", status="Growing", planting_date=date(2024, 2, 1)))
        db.add(Customer(id=3, name="Green Market Co.", contact_person="Nok", phone="081-000-0000"))
        await db.flush()
        db.add(SalesOrder(
            id=7,
            customer_id=3,
            order_date=date(2024, 5, 20),
            status="Confirmed",
            items=[{"itemId": "a1", "cropId": 1, "quantity": 12, "unitPrice": 1250.5}],
            total_amount=15006.0,
        ))
        await db.commit()
    return 7


@pytest.fixture
async def payroll(session_factory, admin_user):
    async with session_factory() as db:
        user = await db.get(User, admin_user.id)
        db.add(Payroll(
            id=4,
            employee_id=user.employee_id,
            period="May 2024",
            pay_date=date(2024, 5, 31),
            gross_pay=18000,
            deductions=750,
            net_pay=17250,
        ))
        await db.commit()
    return 4


def test_qr_payload_lists_harvest_details():
    crop = CropView(id=9, name="Cherry Tomato", status="Harvest Ready", planting_date=date(2024, 1, 10))
    plot = PlotView(id=2, name="Greenhouse B", current_crop_id=9)
    log = ActivityLogView(
        id=5, plot_id=2, activity_type="เก็บเกี่ยว", date=date(2024, 4, 2),
        description="First harvest", personnel="Somchai",
    )

    payload = label_qr_payload(crop, plot, log)

    assert payload.splitlines() == [
        "Smile Farm Traceability",
        "Product: Cherry Tomato",
        "Plot: Greenhouse B",
        "Harvest Date: 2024-04-02",
        "Operator: Somchai",
        "Log ID: 5",
    ]


def test_qr_data_uri_is_png():
    uri = qr_data_uri("SF-GAP-5-2-9")
    assert uri.startswith("data:image/png;base64,iVBORw0KGgo")


@pytest.mark.anyio
async def test_invoice(client, admin_headers, order):
    response = await client.get(f"/api/documents/invoice/{order}", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text
    assert "Green Market Co." in html
    assert "Butterhead Lettuce" in html
    assert "15,006.00" in html
    assert settings.FARM_NAME in html


@pytest.mark.anyio
async def test_invoice_unknown_order(client, admin_headers):
    response = await client.get("/api/documents/invoice/404", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.anyio
async def test_payslip(client, admin_headers, payroll):
    response = await client.get(f"/api/documents/payslip/{payroll}", headers=admin_headers)

    assert response.status_code == 200
    html = response.text
    assert "May 2024" in html
    assert "17,250.00" in html
    assert "-750.00" in html


@pytest.mark.anyio
async def test_label(client, admin_headers, harvest_chain):
    response = await client.get(f"/api/documents/label/{harvest_chain['log_id']}", headers=admin_headers)

    assert response.status_code == 200
    html = response.text
    assert "Cherry Tomato" in html
    assert "Greenhouse B" in html
    assert "SF-GAP-5-2-9" in html
    assert 'src="data:image/png;base64,' in html


@pytest.mark.anyio
async def test_label_without_crop(client, admin_headers, session_factory):
    async with session_factory() as db:
        db.add(Plot(id=1, name="Bare Plot"))
        await db.flush()
        db.add(ActivityLog(id=1, plot_id=1, activity_type="เก็บเกี่ยว", date=date(2024, 4, 2), description="x"))
        await db.commit()

    response = await client.get("/api/documents/label/1", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"]["message"] == NO_CROP_FOR_LABEL


@pytest.mark.anyio
async def test_worker_cannot_print_invoices_or_payslips(client, worker_headers, order, payroll):
    invoice = await client.get(f"/api/documents/invoice/{order}", headers=worker_headers)
    payslip = await client.get(f"/api/documents/payslip/{payroll}", headers=worker_headers)

    assert invoice.status_code == 403
    assert payslip.status_code == 403


@pytest.mark.anyio
async def test_worker_can_print_labels(client, worker_headers, harvest_chain):
    response = await client.get(f"/api/documents/label/{harvest_chain['log_id']}", headers=worker_headers)
    assert response.status_code == 200
