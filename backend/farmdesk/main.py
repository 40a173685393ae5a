from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farmdesk import __version__
from farmdesk.api import (
    admin, alerts, assistant, auth, data, documents, health, navigation, reports, trace,
)
from farmdesk.api import settings as farm_settings
from farmdesk.core.config import logger, settings
from farmdesk.core.exceptions import FarmDeskError
from farmdesk.core.middleware import RequestContextMiddleware, farmdesk_error_handler
from farmdesk.db.database import async_session, create_tables
from farmdesk.services.seed import seed_defaults


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await create_tables()
    async with async_session() as db:
        stats = await seed_defaults(db)
    logger.info(f"[Startup] {settings.APP_NAME} ready ({settings.APP_ENV}), seeded {stats}")
    yield


app = FastAPI(
    title="farmdesk API",
    description="Backend API for the farmdesk farm management dashboard",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(FarmDeskError, farmdesk_error_handler)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(navigation.router, prefix="/api/navigation", tags=["Navigation"])
app.include_router(data.router, prefix="/api/data", tags=["Data"])
app.include_router(farm_settings.router, prefix="/api/settings", tags=["Settings"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(alerts.router, prefix="/api/alerts", tags=["Alerts"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])
app.include_router(trace.router, prefix="/api/trace", tags=["Traceability"])
app.include_router(documents.router, prefix="/api/documents", tags=["Documents"])
app.include_router(assistant.router, prefix="/api/assistant", tags=["Assistant"])
app.include_router(health.router, prefix="", tags=["Health"])
