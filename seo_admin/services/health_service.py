# seo_admin/services/health_service.py
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import asyncio
import psutil
import platform
from seo_admin.database import Database
import logging

logger = logging.getLogger(__name__)


async def get_detailed_health(database: Optional[Database]) -> Dict[str, Any]:
    """Get detailed health status of the database and the host"""
    health_status = {
        "services": {},
        "system": {},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    # DB
    if database is None:
        health_status["services"]["database"] = {"healthy": False, "error": "not initialized"}
    else:
        db_healthy = await database.check_connection()
        health_status["services"]["database"] = {
            "healthy": db_healthy,
            "dialect": database.engine.dialect.name,
            "status": "connected" if db_healthy else "disconnected",
        }

    # System
    try:
        health_status["system"] = {
            "cpu_percent": await asyncio.to_thread(psutil.cpu_percent, interval=0.1),
            "memory_percent": psutil.virtual_memory().percent,
            "disk_percent": psutil.disk_usage("/").percent,
            "python_version": platform.python_version(),
            "platform": platform.platform(),
            "uptime_seconds": datetime.now(timezone.utc).timestamp() - psutil.boot_time(),
        }
    except Exception as e:
        logger.error(f"Failed to get system metrics: {e}")

    # Overall
    all_services_healthy = all(s.get("healthy", False) for s in health_status["services"].values())
    health_status["overall_health"] = "healthy" if all_services_healthy else "degraded"

    return health_status
