# app/api/endpoints/metrics.py

import time

import psutil
import redis.asyncio as redis
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from loguru import logger

# Config & Deps
from app.core.config import settings
from app.core.database import test_connection
from app.api.deps import get_db_session
from app.core.identity import Principal
from app.core.rbac import require_admin

# Models
from app.models.announcement import Announcement
from app.models.assignment import Assignment, Submission
from app.models.course import Course
from app.models.placement import Placement
from app.models.user import User

router = APIRouter(prefix="/api/metrics", tags=["System & Metrics"])

# Track when the module is loaded for uptime calculation
START_TIME = time.time()


# ===================================================================
# 1. GENERAL SYSTEM HEALTH (Public)
# ===================================================================
@router.get("")
async def system_health():
    uptime_seconds = int(time.time() - START_TIME)

    try:
        disk_usage = psutil.disk_usage("/").percent
    except OSError:
        disk_usage = 0

    db_start = time.time()
    db_latency = 0
    try:
        await test_connection()
        db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception:
        logger.exception("Health check: database unreachable")
        db_status = "Error"

    return {
        "status": "Online",
        "cpu": psutil.cpu_percent(interval=None),
        "ram": psutil.virtual_memory().percent,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": db_status,
        "db_latency": db_latency,
        "environment": settings.ENV,
    }


# ===================================================================
# 2. ADMIN DASHBOARD STATS (Admin Only)
# ===================================================================
@router.get("/dashboard-stats")
async def get_dashboard_stats(
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(require_admin),
):
    role_res = await session.execute(select(User.role, func.count(User.id)).group_by(User.role))
    users_by_role = {role.value: count for role, count in role_res.all()}

    async def count(model) -> int:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()

    return {
        "users": users_by_role,
        "courses": await count(Course),
        "assignments": await count(Assignment),
        "submissions": await count(Submission),
        "announcements": await count(Announcement),
        "placements": await count(Placement),
    }


# ===================================================================
# 3. REDIS STATS (Admin Only)
# ===================================================================
@router.get("/redis-stats")
async def get_redis_statistics(
    _: Principal = Depends(require_admin),
):
    if not settings.REDIS_URL:
        return {"status": "Disabled", "message": "Redis is not configured."}

    client = None
    try:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=2,
        )

        info = await client.info()
        active_limits = []
        async for key in client.scan_iter(match="LIMITER/*", count=100):
            active_limits.append(key)
            if len(active_limits) >= 20:
                break

        return {
            "status": "Online",
            "metrics": {
                "redis_version": info.get("redis_version"),
                "connected_clients": info.get("connected_clients"),
                "used_memory": info.get("used_memory_human"),
                "total_keys": await client.dbsize(),
                "active_rate_limit_windows": len(active_limits),
            },
        }

    except redis.ConnectionError:
        return {"status": "Offline", "detail": "Redis server unreachable."}
    finally:
        if client:
            await client.aclose()
