# app/core/rate_limiter.py

from typing import Optional

from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings


def client_ip(request) -> str:
    """Rate-limit key: first X-Forwarded-For hop, then X-Real-IP, then the peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or get_remote_address(request)


def limiter_storage(redis_url: Optional[str], env: str) -> Optional[str]:
    if not redis_url:
        return None
    # prod Redis is reached over TLS
    if env == "prod" and redis_url.startswith("redis://"):
        return "rediss://" + redis_url[len("redis://"):]
    return redis_url


def build_limiter() -> Limiter:
    storage_uri = limiter_storage(settings.REDIS_URL, settings.ENV)
    if not storage_uri:
        logger.warning("REDIS_URL not set, login attempts are counted in memory")
        return Limiter(key_func=client_ip, enabled=settings.RATE_LIMIT_ENABLED)

    logger.info("Login rate limiting backed by Redis")
    return Limiter(
        key_func=client_ip,
        storage_uri=storage_uri,
        strategy="fixed-window",
        storage_options={"socket_connect_timeout": 5, "retry_on_timeout": True},
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = build_limiter()
