import asyncio

from fastapi import APIRouter

from app.core.cache import cache
from app.core.config import settings
from app.core.database import check_database_connection
from app.schemas.common import HealthCheckResponse

router = APIRouter(tags=["Health"])


async def check_db(timeout: float = 1.0) -> bool:
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(check_database_connection), timeout
        )
    except Exception:
        return False


async def check_redis(timeout: float = 1.0) -> str:
    """Estado del cache: ok, error o disabled si no hay REDIS_URL"""
    if not settings.REDIS_URL:
        return "disabled"
    try:
        ok = await asyncio.wait_for(cache.ping(), timeout)
    except asyncio.TimeoutError:
        ok = False
    return "ok" if ok else "error"


@router.get("/health", response_model=HealthCheckResponse)
async def health() -> dict:
    db_ok, redis_state = await asyncio.gather(check_db(), check_redis())
    status = "ok" if db_ok and redis_state != "error" else "degraded"
    return {
        "status": status,
        "database": "ok" if db_ok else "error",
        "redis": redis_state,
    }
