from datetime import date

import pytest

from farmdesk.services.reports import (
    ReportRange,
    build_reports,
    crop_profitability,
    monthly_sales,
    range_start,
    top_customers,
)
from farmdesk.sync.views import CropView, CustomerView, LedgerEntryView, OrderItem, SalesOrderView

TODAY = date(2024, 6, 15)


def order(id, customer_id, order_date, total):
    return SalesOrderView(
        id=id,
        customer_id=customer_id,
        order_date=order_date,
        items=[OrderItem(item_id="x", crop_id=1, quantity=1, unit_price=total)],
        total_amount=total,
    )


def entry(id, crop_id, type, amount):
    return LedgerEntryView(id=id, date=date(2024, 1, 1), description="-", type=type, amount=amount, crop_id=crop_id)


CROPS = [
    CropView(id=1, name="Kale", planting_date=date(2024, 1, 1)),
    CropView(id=2, name="Basil", planting_date=date(2024, 1, 1)),
]


@pytest.mark.parametrize(
    "report_range, expected",
    [
        (ReportRange.ALL, None),
        (ReportRange.LAST_30_DAYS, date(2024, 5, 16)),
        (ReportRange.LAST_90_DAYS, date(2024, 3, 17)),
        (ReportRange.YEAR, date(2024, 1, 1)),
    ],
)
def test_range_start(report_range, expected):
    assert range_start(report_range, TODAY) == expected


def test_profitability_sorted_by_net_profit():
    rows = crop_profitability(CROPS, [
        entry(1, 1, "income", 1000),
        entry(2, 1, "expense", 900),
        entry(3, 2, "income", 500),
        entry(4, None, "income", 10000),
    ])

    assert [r.product_name for r in rows] == ["Basil", "Kale"]
    assert rows[1].total_income == 1000
    assert rows[1].total_expenses == 900
    assert rows[1].net_profit == 100


def test_monthly_sales_grouped_and_sorted():
    months = monthly_sales([
        order(1, 1, date(2024, 3, 5), 100),
        order(2, 1, date(2024, 1, 9), 50),
        order(3, 2, date(2024, 3, 20), 25),
    ])
    assert [(m.month, m.total) for m in months] == [("2024-01", 50), ("2024-03", 125)]


def test_top_customers_limited_and_named():
    customers = [CustomerView(id=i, name=f"Customer {i}") for i in range(1, 12)]
    orders = [order(i, i, date(2024, 2, 1), i * 10) for i in range(1, 13)]

    top = top_customers(orders, customers)

    assert len(top) == 10
    assert top[0].customer_id == 12
    assert top[0].name == "Unknown Customer"
    assert top[1].name == "Customer 11"
    assert top[0].count == 1


def test_range_filters_sales_but_not_profitability():
    bundle = build_reports(
        ReportRange.LAST_30_DAYS,
        crops=CROPS,
        ledger_entries=[entry(1, 1, "income", 300)],
        sales_orders=[order(1, 1, date(2024, 6, 1), 80), order(2, 1, date(2023, 12, 1), 999)],
        customers=[CustomerView(id=1, name="Green Market")],
        today=TODAY,
    )

    assert [m.month for m in bundle.monthly_sales] == ["2024-06"]
    assert bundle.top_customers[0].total == 80
    assert bundle.profitability[0].net_profit == 300


@pytest.mark.anyio
async def test_reports_endpoint_requires_reports_view(client, admin_headers, worker_headers):
    denied = await client.get("/api/reports", headers=worker_headers)
    assert denied.status_code == 403

    response = await client.get("/api/reports", params={"range": "90d"}, headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["range"] == "90d"
    assert body["monthlySales"] == []
    assert body["topCustomers"] == []
