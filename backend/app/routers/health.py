import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint that verifies database connectivity.

    Note: This is a sync function because we use synchronous SQLAlchemy.
    FastAPI will run it in a threadpool automatically.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        db_status = "unhealthy"

    return {
        "error": None,
        "flash": None,
        "status": "ok" if db_status == "healthy" else "degraded",
        "database": db_status,
    }
