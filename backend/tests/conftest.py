from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from farmdesk.db.database import Base, get_db, get_session_factory
from farmdesk.db.models import ActivityLog, Crop, Plot
from farmdesk.main import app
from farmdesk.services.seed import seed_defaults
from support import ADMIN_EMAIL, WORKER_EMAIL, bearer, make_user


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def test_engine(tmp_path):
    # One on-disk database per test; the loader needs several connections at once
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'farmdesk.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def seeded(session_factory):
    async with session_factory() as db:
        return await seed_defaults(db)


@pytest.fixture
async def admin_user(session_factory, seeded):
    return await make_user(session_factory, ADMIN_EMAIL)


@pytest.fixture
async def worker_user(session_factory, admin_user):
    return await make_user(session_factory, WORKER_EMAIL)


@pytest.fixture
def admin_headers(admin_user):
    return bearer(ADMIN_EMAIL)


@pytest.fixture
def worker_headers(worker_user):
    return bearer(WORKER_EMAIL)


@pytest.fixture
async def client(session_factory, seeded):
    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def harvest_chain(session_factory):
    """Crop 9 planted on plot 2, harvested under activity log 5."""
    async with session_factory() as db:
        db.add(Crop(id=9, name="Cherry Tomato", status="Harvest Ready", planting_date=date(2024, 1, 10)))
        await db.flush()
        db.add(Plot(id=2, name="Greenhouse B", current_crop_id=9))
        await db.flush()
        db.add(ActivityLog(
            id=5,
            plot_id=2,
            activity_type="เก็บเกี่ยว",
            date=date(2024, 4, 2),
            description="First harvest",
            personnel="Somchai",
        ))
        await db.commit()
    return {"log_id": 5, "plot_id": 2, "crop_id": 9}
