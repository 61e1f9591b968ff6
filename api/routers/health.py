# File: api/routers/health.py
from fastapi import APIRouter, HTTPException
from sqlalchemy import text
import logging

from database.db import engine


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/health/storage")
def storage_check():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.error("Storage health check failed", exc_info=True)
        raise HTTPException(status_code=503, detail="Storage unavailable")
    return {"status": "ok", "backend": engine.dialect.name}
