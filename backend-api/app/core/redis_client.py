import redis.asyncio as redis
from app.core.config import settings

redis_client = None


async def get_redis_client() -> redis.Redis:
    """
    Provide a Redis client dependency.

    하나의 커넥션 풀을 모든 요청이 공유한다. 소켓 타임아웃을 두어
    캐시 장애가 요청을 붙잡지 않도록 한다.
    """
    global redis_client
    if redis_client is None:
        redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )
    return redis_client


async def close_redis_client() -> None:
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None
