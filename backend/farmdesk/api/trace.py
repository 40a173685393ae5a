from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.db.database import get_db
from farmdesk.services import traceability
from farmdesk.sync.views import TraceabilityResult

router = APIRouter()


@router.get("/{code}", response_model=TraceabilityResult)
async def trace(code: str, db: AsyncSession = Depends(get_db)):
    """Public lookup behind the landing page's trace form and label QR codes."""
    return await traceability.lookup(db, code)
