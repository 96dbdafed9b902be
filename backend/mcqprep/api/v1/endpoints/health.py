import logging
import time
from typing import Dict, Any

import psutil
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ....core.cache import cache
from ....core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Database, cache and host resource status"""
    health_status: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": time.time(),
        "services": {},
    }

    try:
        start_time = time.time()
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = {
            "status": "healthy",
            "response_time": round((time.time() - start_time) * 1000, 2),
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["services"]["database"] = {"status": "unhealthy"}
        health_status["status"] = "unhealthy"

    if cache.enabled:
        health_status["services"]["cache"] = {"status": "healthy" if cache.health_check() else "unhealthy"}
    else:
        health_status["services"]["cache"] = {"status": "disabled"}

    health_status["system"] = {
        "cpu_percent": psutil.cpu_percent(),
        "memory_percent": psutil.virtual_memory().percent,
        "disk_percent": psutil.disk_usage("/").percent,
    }
    return health_status
