from datetime import date

import pytest
from sqlalchemy import select

from farmdesk.db.models import Crop, LedgerEntry, Role


@pytest.mark.anyio
async def test_admin_loads_snapshot(client, admin_headers):
    response = await client.get("/api/data", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["currentUser"]["roleName"] == "Admin"
    assert body["farmInfo"]["name"] == "Smile farm"
    assert body["crops"] == []


@pytest.mark.anyio
async def test_save_returns_reloaded_snapshot(client, admin_headers):
    response = await client.post(
        "/api/data/devices", json={"name": "Soil sensor", "type": "Sensor"}, headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    devices = response.json()["devices"]
    assert len(devices) == 1
    assert devices[0]["status"] == "Inactive"


@pytest.mark.anyio
async def test_worker_cannot_create_crops(client, worker_headers):
    response = await client.post(
        "/api/data/crops",
        json={"name": "Kale", "plantingDate": "2024-01-01"},
        headers=worker_headers,
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Missing permission: crops.create"


@pytest.mark.anyio
async def test_worker_can_log_gap_activity_but_not_edit(client, session_factory, worker_headers):
    async with session_factory() as db:
        db.add(Crop(id=1, name="Kale", status="Growing", planting_date=date(2024, 1, 1)))
        await db.commit()

    plot = await client.post("/api/data/plots", json={"name": "Plot A"}, headers=worker_headers)
    assert plot.status_code == 200

    plot_id = plot.json()["plots"][0]["id"]
    log = {"plotId": plot_id, "activityType": "รดน้ำ", "date": "2024-02-01",
           "description": "Morning watering", "personnel": "Nok"}
    created = await client.post("/api/data/activity_logs", json=log, headers=worker_headers)
    assert created.status_code == 200

    log_id = created.json()["activityLogs"][0]["id"]
    edited = await client.post(
        "/api/data/activity_logs", json=dict(log, id=log_id, description="Evening"), headers=worker_headers,
    )
    assert edited.status_code == 403
    assert edited.json()["detail"] == "Missing permission: gap.edit"


@pytest.mark.anyio
async def test_worker_cannot_delete(client, worker_headers):
    response = await client.delete("/api/data/inventory_items/1", headers=worker_headers)
    assert response.status_code == 403


@pytest.mark.anyio
async def test_blocked_delete_returns_422_and_keeps_row(client, session_factory, admin_headers):
    async with session_factory() as db:
        db.add(Crop(id=4, name="Okra", status="Planted", planting_date=date(2024, 1, 1)))
        await db.flush()
        db.add(LedgerEntry(date=date(2024, 1, 5), description="Seeds", type="expense", amount=120, crop_id=4))
        await db.commit()

    response = await client.delete("/api/data/crops/4", headers=admin_headers)

    assert response.status_code == 422
    snapshot = await client.get("/api/data", headers=admin_headers)
    assert [c["id"] for c in snapshot.json()["crops"]] == [4]


@pytest.mark.anyio
async def test_mutation_error_returns_400(client, admin_headers):
    response = await client.post(
        "/api/data/roles", json={"name": "Worker", "permissions": {}}, headers=admin_headers,
    )
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["message"].startswith("Error saving data:")
    assert detail["table"] == "roles"


@pytest.mark.anyio
async def test_unknown_table_rejected(client, admin_headers):
    response = await client.post("/api/data/harvests", json={}, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.anyio
async def test_farm_settings_endpoint(client, admin_headers, worker_headers):
    info = {"name": "Smile Farm 2", "logoUrl": "", "address": "", "phone": "", "email": "", "taxId": ""}

    denied = await client.put("/api/settings/farm", json=info, headers=worker_headers)
    assert denied.status_code == 403

    response = await client.put("/api/settings/farm", json=info, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Smile Farm 2"


@pytest.mark.anyio
async def test_role_editor_applies_view_implication(client, session_factory, admin_headers):
    async with session_factory() as db:
        worker = (await db.execute(Role.__table__.select().where(Role.name == "Worker"))).first()

    response = await client.post(
        f"/api/admin/roles/{worker.id}/permissions",
        json={"module": "ledger", "action": "create", "value": True},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    assert response.json()["permissions"]["ledger"] == {
        "view": True, "create": True, "edit": False, "delete": False,
    }

    response = await client.post(
        f"/api/admin/roles/{worker.id}/permissions",
        json={"module": "ledger", "action": "view", "value": False},
        headers=admin_headers,
    )
    assert response.json()["permissions"]["ledger"] == {
        "view": False, "create": False, "edit": False, "delete": False,
    }


@pytest.mark.anyio
async def test_role_editor_requires_admin(client, worker_headers):
    response = await client.post(
        "/api/admin/roles/1/permissions",
        json={"module": "ledger", "action": "view", "value": True},
        headers=worker_headers,
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Missing permission: admin.edit"


async def set_worker_permissions(session_factory, permissions):
    async with session_factory() as db:
        role = (await db.execute(select(Role).where(Role.name == "Worker"))).scalar_one()
        role.permissions = permissions
        await db.commit()
        return role.id


EDIT_ONLY = {"view": True, "create": False, "edit": True, "delete": False}


@pytest.mark.anyio
async def test_edit_only_role_cannot_insert_with_unused_id(client, session_factory, worker_headers):
    await set_worker_permissions(session_factory, {"crops": EDIT_ONLY})

    response = await client.post(
        "/api/data/crops",
        json={"id": 777, "name": "Kale", "plantingDate": "2024-01-01"},
        headers=worker_headers,
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Missing permission: crops.create"
    async with session_factory() as db:
        assert await db.get(Crop, 777) is None


@pytest.mark.anyio
async def test_edit_only_role_updates_existing_row(client, session_factory, worker_headers):
    async with session_factory() as db:
        db.add(Crop(id=3, name="Kale", status="Planted", planting_date=date(2024, 1, 1)))
        await db.commit()
    await set_worker_permissions(session_factory, {"crops": EDIT_ONLY})

    response = await client.post(
        "/api/data/crops",
        json={"id": 3, "name": "Kale", "status": "Growing", "plantingDate": "2024-01-01"},
        headers=worker_headers,
    )

    assert response.status_code == 200, response.text
    assert response.json()["crops"][0]["status"] == "Growing"


@pytest.mark.anyio
async def test_generic_farm_settings_save_is_an_edit(client, session_factory, worker_headers):
    await set_worker_permissions(session_factory, {"settings": EDIT_ONLY})
    info = {"name": "Smile Farm North", "logoUrl": "", "address": "", "phone": "", "email": "", "taxId": ""}

    response = await client.post("/api/data/farm_settings", json={"info": info}, headers=worker_headers)

    assert response.status_code == 200, response.text
    assert response.json()["farmInfo"]["name"] == "Smile Farm North"


@pytest.mark.anyio
async def test_role_editor_without_admin_view(client, session_factory, worker_headers):
    role_id = await set_worker_permissions(
        session_factory, {"admin": {"view": False, "create": False, "edit": True, "delete": False}},
    )

    response = await client.post(
        f"/api/admin/roles/{role_id}/permissions",
        json={"module": "crops", "action": "view", "value": True},
        headers=worker_headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["id"] == role_id
    assert body["permissions"]["crops"]["view"] is True
