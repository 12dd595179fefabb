import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from pizzeria.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check database ping failed: {e}")
        db_status = "failed"

    return {
        "status": "ok",
        "database": db_status,
        "timestamp": datetime.utcnow().isoformat()
    }
