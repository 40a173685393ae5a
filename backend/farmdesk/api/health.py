from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.core.logging import db_logger
from farmdesk.db.database import get_db

router = APIRouter()


@router.get('/healthz')
def healthz():
    return {"status": "ok"}


@router.get('/readyz')
async def readyz(db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(text('SELECT 1'))
    except Exception:
        db_logger.exception("Readiness DB check failed")
        raise HTTPException(status_code=503, detail='Not ready')
    return {"status": "ready"}
