"""Redis client used by the redis result backend."""
import logging
from typing import Optional
from redis import Redis
from redis.exceptions import RedisError
from welltrack.config import get_settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Return the process-wide Redis client, connecting lazily.

    Responses are decoded to ``str`` because stored results are JSON text.
    """
    global _client
    if _client is None:
        settings = get_settings()
        _client = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        logger.info("Redis client created for result history")
    return _client


def redis_status(client: Optional[Redis]) -> str:
    """
    Describe Redis reachability for the health check.

    Returns:
        str: ``not_configured``, ``connected`` or ``disconnected``
    """
    if client is None:
        return "not_configured"
    try:
        client.ping()
    except (RedisError, ConnectionError, OSError) as e:
        logger.warning(f"Redis ping failed: {e}")
        return "disconnected"
    return "connected"


def close_redis() -> None:
    """Close the process-wide client on shutdown."""
    global _client
    if _client is not None:
        _client.close()
        _client = None
