# storefront/api/routers/health.py
import redis
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.api.deps import get_lock_service
from storefront.data.database import get_db
from storefront.services.lock_service import LockService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db), locks: LockService = Depends(get_lock_service)):
    status = {"database": "up", "redis": "up"}

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check: database down: {e}")
        status["database"] = "down"

    try:
        locks.ping()
    except redis.RedisError as e:
        logger.error(f"Health check: redis down: {e}")
        status["redis"] = "down"

    ok = all(v == "up" for v in status.values())
    return {"status": "ok" if ok else "degraded", **status}
