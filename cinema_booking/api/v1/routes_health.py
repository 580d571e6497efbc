import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import text

from cinema_booking.db.session import getDB_session


router = APIRouter()

@router.get("/health", summary="Health check endpoint", description="Checks that the booking store answers queries.")
async def health_check(db: AsyncSession = Depends(getDB_session)):
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logging.error(f"health check failed: {e}", exc_info=True)
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ok"}
