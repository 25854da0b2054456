"""
쓰기 이후 캐시 무효화 정책

엔티티별로 어떤 정확 키와 prefix 를 지워야 하는지 계산한다.
삭제의 경우 연관 대상(회차, 연결된 책 등)은 행이 사라지기 전에 계산해야 한다.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheStore

logger = logging.getLogger(__name__)


class WriteEvent(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class InvalidationPlan:
    """지울 정확 키와 prefix 목록 (중복 없이 순서 유지)"""
    keys: List[str] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)

    def add_keys(self, *keys: str) -> "InvalidationPlan":
        for key in keys:
            if key not in self.keys:
                self.keys.append(key)
        return self

    def add_prefixes(self, *prefixes: str) -> "InvalidationPlan":
        for prefix in prefixes:
            if prefix not in self.prefixes:
                self.prefixes.append(prefix)
        return self

    def merge(self, other: "InvalidationPlan") -> "InvalidationPlan":
        self.add_keys(*other.keys)
        self.add_prefixes(*other.prefixes)
        return self

    @property
    def empty(self) -> bool:
        return not self.keys and not self.prefixes

    async def execute(self, cache: CacheStore) -> None:
        """캐시 장애는 CacheStore 에서 경고로 처리되므로 여기서는 전파되지 않는다"""
        if self.keys:
            await cache.delete(*self.keys)
        for prefix in self.prefixes:
            await cache.delete_prefix(prefix)


# (db, event, entity) -> 추가로 지울 대상
DependentsHook = Callable[[AsyncSession, WriteEvent, Any], Awaitable[InvalidationPlan]]
ScopedPrefixes = Callable[[Any], Iterable[str]]


class InvalidationPolicy:
    """
    엔티티 하나의 무효화 규칙

    - update/delete: 포인트 키 `<entity>:<id>`
    - 모든 쓰기: 목록 prefix, 관계 범위 목록 prefix (예: `chapters:book:<book_id>:`)
    - dependents: 연관 엔티티 키 등 추가 대상 (삭제 전 계산)
    """

    def __init__(
        self,
        entity: str,
        list_prefix: Optional[str] = None,
        scoped_prefixes: Optional[ScopedPrefixes] = None,
        dependents: Optional[DependentsHook] = None,
    ):
        self.entity = entity
        self.list_prefix = list_prefix
        self.scoped_prefixes = scoped_prefixes
        self.dependents = dependents

    def entity_key(self, entity_id: str) -> str:
        return f"{self.entity}:{entity_id}"

    async def plan(self, db: AsyncSession, event: WriteEvent, entity: Any) -> InvalidationPlan:
        plan = InvalidationPlan()
        if event != WriteEvent.CREATE:
            plan.add_keys(self.entity_key(entity.id))
        if self.list_prefix:
            plan.add_prefixes(self.list_prefix)
        if self.scoped_prefixes is not None:
            plan.add_prefixes(*self.scoped_prefixes(entity))
        if self.dependents is not None:
            plan.merge(await self.dependents(db, event, entity))
        return plan

    async def apply(self, cache: CacheStore, plan: InvalidationPlan) -> None:
        if plan.empty:
            return
        logger.debug(f"{self.entity} 캐시 무효화 keys={plan.keys} prefixes={plan.prefixes}")
        await plan.execute(cache)
