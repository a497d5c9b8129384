"""Health check and monitoring endpoints"""

from fastapi import APIRouter, Depends
from studybot.api.deps import get_timer_manager
from studybot.db.session import get_pool_stats
from studybot.services.timer import TimerManager

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/pool")
async def get_pool_health():
    """
    Get connection pool health statistics.

    Returns pool utilization, connection counts, and health status.
    """
    stats = get_pool_stats()
    in_use = stats["checked_out"]
    total_capacity = stats["size"] + stats["max_overflow"]
    utilization = (in_use / total_capacity * 100) if total_capacity > 0 else 0

    if utilization >= 90:
        status = "critical"
    elif utilization >= 80:
        status = "warning"
    else:
        status = "healthy"

    return {
        "status": status,
        "pool_size": stats["size"],
        "max_overflow": stats["max_overflow"],
        "available": stats["checked_in"],
        "in_use": in_use,
        "overflow": stats["overflow"],
        "utilization_percent": round(utilization, 2),
        "total_capacity": total_capacity,
    }


@router.get("/")
async def health_check(timer_manager: TimerManager = Depends(get_timer_manager)):
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "studybot",
        "active_timers": timer_manager.registry.active_count(),
    }
