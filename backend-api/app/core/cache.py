"""
Redis 캐시 저장소

모든 연산은 베스트 에포트: Redis 장애(타임아웃, 연결 끊김)는 경고 로그만 남기고
호출자에게 전파하지 않는다. 조회 실패는 캐시 미스로 취급되어 DB로 폴백한다.
"""

import asyncio
import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Redis 장애로 간주하는 예외
CACHE_ERRORS = (RedisError, OSError, asyncio.TimeoutError)

SCAN_BATCH_SIZE = 100


class CacheStore:
    """JSON 직렬화 + TTL 기반의 얇은 Redis 래퍼"""

    def __init__(self, redis: Redis, default_ttl: int = 600):
        self.redis = redis
        self.default_ttl = default_ttl

    async def get_model(self, key: str, model: Type[ModelT]) -> Optional[ModelT]:
        """캐시된 JSON을 pydantic 모델로 복원. 없거나 깨졌으면 None"""
        try:
            raw = await self.redis.get(key)
        except CACHE_ERRORS as e:
            logger.warning(f"캐시 조회 실패 key={key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError:
            # 스키마가 바뀐 옛 캐시는 버리고 미스로 처리
            logger.warning(f"캐시 역직렬화 실패 key={key}, 삭제합니다")
            await self.delete(key)
            return None

    async def set_model(self, key: str, value: BaseModel, ttl: Optional[int] = None) -> bool:
        try:
            await self.redis.setex(key, ttl or self.default_ttl, value.model_dump_json())
            return True
        except CACHE_ERRORS as e:
            logger.warning(f"캐시 저장 실패 key={key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.redis.exists(key))
        except CACHE_ERRORS as e:
            logger.warning(f"캐시 확인 실패 key={key}: {e}")
            return False

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self.redis.delete(*keys))
        except CACHE_ERRORS as e:
            logger.warning(f"캐시 삭제 실패 keys={keys}: {e}")
            return 0

    async def delete_prefix(self, prefix: str) -> int:
        """prefix로 시작하는 모든 키 삭제 (SCAN 기반, KEYS 사용 안 함)"""
        deleted = 0
        batch: list[str] = []
        try:
            async for key in self.redis.scan_iter(match=f"{prefix}*", count=SCAN_BATCH_SIZE):
                batch.append(key)
                if len(batch) >= SCAN_BATCH_SIZE:
                    deleted += await self.redis.delete(*batch)
                    batch = []
            if batch:
                deleted += await self.redis.delete(*batch)
        except CACHE_ERRORS as e:
            logger.warning(f"캐시 prefix 삭제 실패 prefix={prefix}: {e}")
        return deleted

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except CACHE_ERRORS as e:
            logger.error(f"Redis 연결 실패: {e}")
            return False
