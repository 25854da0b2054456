"""
공통 엔티티 저장소

엔티티별 차이(모델, 응답 스키마, 캐시 네임스페이스, 검색 컬럼, 추가 필터, 정렬,
즉시 로딩 옵션, 무효화 정책)는 EntitySpec 데이터로만 표현한다.

읽기: 캐시 → 미스면 DB → 캐시 채움 (TTL)
쓰기: DB 반영 → 무효화 정책에 따라 포인트 키/목록 prefix 삭제
"""

import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel
from sqlalchemy import ColumnElement, and_, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheStore
from app.core.config import settings
from app.core.exceptions import ConflictError, InternalServerError, NotFoundError
from app.repositories.invalidation import InvalidationPolicy, WriteEvent
from app.schemas.common import Page, PaginationParams, compute_total_pages

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# 64비트 부호 있는 정수 최댓값 (SQLite INTEGER / PostgreSQL BIGINT)
MAX_SQL_OFFSET = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """쓰기 시점에 발급하는 전역 고유 ID"""
    return str(uuid.uuid4())


def escape_like(term: str) -> str:
    """LIKE 와일드카드를 일반 문자로 취급"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class ListFilter:
    """
    목록 조회용 추가 필터

    normalize: 원본 쿼리 문자열 → 정규화 값 (None 이면 필터 미적용)
    build: 정규화 값 → WHERE 조건
    key: 정규화 값 → 캐시 키 조각
    """
    name: str
    normalize: Callable[[str], Any]
    build: Callable[[Any], ColumnElement]
    key: Callable[[Any], str] = str


@dataclass(frozen=True)
class ListScope:
    """관계 범위 목록 (예: 특정 책의 회차). 캐시 키도 별도 prefix 를 쓴다."""
    condition: ColumnElement
    key_prefix: str


@dataclass
class EntitySpec:
    name: str
    model: Type[Any]
    schema: Type[BaseModel]
    list_prefix: str
    invalidation: InvalidationPolicy
    search_column: Optional[Any] = None
    filters: Sequence[ListFilter] = ()
    order_by: Sequence[Any] = ()
    load_options: Sequence[Any] = ()
    # 삭제 시 ORM cascade 를 위해 함께 로딩할 관계
    delete_options: Sequence[Any] = ()
    not_found_message: Optional[str] = None


@asynccontextmanager
async def storage_errors(db: AsyncSession, action: str):
    """DB 예외를 애플리케이션 예외로 변환 (내부 원인은 로그에만)"""
    try:
        yield
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"{action} 제약조건 위반: {e.orig}")
        raise ConflictError()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"{action} 실패: {e}")
        raise InternalServerError()


class EntityRepository(Generic[SchemaT]):
    """캐시 일관성을 지키는 엔티티 저장소"""

    def __init__(self, db: AsyncSession, cache: CacheStore, spec: EntitySpec, ttl: Optional[int] = None):
        self.db = db
        self.cache = cache
        self.spec = spec
        self.ttl = ttl

    # ---- 내부 헬퍼 ----
    def _key(self, entity_id: str) -> str:
        return self.spec.invalidation.entity_key(entity_id)

    def _not_found(self) -> NotFoundError:
        return NotFoundError(self.spec.not_found_message)

    def _to_schema(self, row: Any) -> SchemaT:
        return self.spec.schema.model_validate(row)

    async def _load(self, entity_id: str, options: Sequence[Any] = ()) -> Optional[Any]:
        # 세션에 남아 있는 객체도 DB 상태로 덮어쓴다
        stmt = (
            select(self.spec.model)
            .where(self.spec.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        opts = list(self.spec.load_options) + list(options)
        if opts:
            stmt = stmt.options(*opts)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    # ---- 조회 ----
    async def find(self, entity_id: str) -> Optional[Any]:
        """ORM 객체 직접 조회 (캐시 미사용)"""
        async with storage_errors(self.db, f"{self.spec.name} 조회"):
            return await self._load(entity_id)

    async def get(self, entity_id: str) -> SchemaT:
        key = self._key(entity_id)
        cached = await self.cache.get_model(key, self.spec.schema)
        if cached is not None:
            return cached

        async with storage_errors(self.db, f"{self.spec.name} 조회"):
            row = await self._load(entity_id)
        if row is None:
            raise self._not_found()

        item = self._to_schema(row)
        await self.cache.set_model(key, item, self.ttl)
        return item

    def list_cache_key(self, params: PaginationParams, page_size: int, scope: Optional[ListScope] = None) -> str:
        # 사용자 입력 조각은 인코딩해서 구분자(:)와 섞이지 않게 한다
        prefix = scope.key_prefix if scope is not None else self.spec.list_prefix
        search = quote((params.search or "").lower(), safe="")
        key = f"{prefix}page:{params.page}:size:{page_size}:search:{search}"
        for flt in self.spec.filters:
            raw = getattr(params, flt.name, None)
            normalized = flt.normalize(raw) if raw else None
            part = quote(flt.key(normalized), safe="") if normalized else ""
            key += f":{flt.name}:{part}"
        return key

    def _conditions(self, params: PaginationParams, scope: Optional[ListScope]) -> List[ColumnElement]:
        conditions: List[ColumnElement] = []
        if scope is not None:
            conditions.append(scope.condition)
        if params.search and self.spec.search_column is not None:
            pattern = f"%{escape_like(params.search)}%"
            conditions.append(self.spec.search_column.ilike(pattern, escape="\\"))
        for flt in self.spec.filters:
            raw = getattr(params, flt.name, None)
            normalized = flt.normalize(raw) if raw else None
            if normalized:
                conditions.append(flt.build(normalized))
        return conditions

    async def list(self, params: PaginationParams, scope: Optional[ListScope] = None) -> Page[SchemaT]:
        page_size = min(params.page_size, settings.MAX_PAGE_SIZE)
        page_model = Page[self.spec.schema]
        cache_key = self.list_cache_key(params, page_size, scope)

        cached = await self.cache.get_model(cache_key, page_model)
        if cached is not None:
            return cached

        conditions = self._conditions(params, scope)
        where = and_(*conditions) if conditions else None

        count_stmt = select(func.count()).select_from(self.spec.model)
        stmt = select(self.spec.model).execution_options(populate_existing=True)
        if where is not None:
            count_stmt = count_stmt.where(where)
            stmt = stmt.where(where)
        if self.spec.order_by:
            stmt = stmt.order_by(*self.spec.order_by)
        if self.spec.load_options:
            stmt = stmt.options(*self.spec.load_options)
        offset = (params.page - 1) * page_size
        stmt = stmt.limit(page_size).offset(offset)

        async with storage_errors(self.db, f"{self.spec.name} 목록 조회"):
            total_items = (await self.db.execute(count_stmt)).scalar_one()
            # DB 정수 범위를 넘는 오프셋은 어차피 빈 페이지
            rows = [] if offset > MAX_SQL_OFFSET else (await self.db.execute(stmt)).scalars().all()

        page = page_model(
            data=[self._to_schema(row) for row in rows],
            page=params.page,
            page_size=page_size,
            total_items=total_items,
            total_pages=compute_total_pages(total_items, page_size),
        )
        await self.cache.set_model(cache_key, page, self.ttl)
        return page

    # ---- 쓰기 ----
    async def create(self, values: Dict[str, Any]) -> SchemaT:
        now = utcnow()
        row = self.spec.model(id=new_id(), created_at=now, updated_at=now, **values)

        async with storage_errors(self.db, f"{self.spec.name} 생성"):
            self.db.add(row)
            await self.db.commit()
            row = await self._load(row.id)
            plan = await self.spec.invalidation.plan(self.db, WriteEvent.CREATE, row)

        item = self._to_schema(row)
        await self.spec.invalidation.apply(self.cache, plan)
        logger.info(f"{self.spec.name} 생성: {item.id}")
        return item

    async def update(self, entity_id: str, values: Dict[str, Any]) -> SchemaT:
        # 변경할 필드가 없으면 쓰기/무효화 없이 현재 상태 반환
        if not values:
            return await self.get(entity_id)

        async with storage_errors(self.db, f"{self.spec.name} 수정"):
            row = await self._load(entity_id)
            if row is None:
                raise self._not_found()
            for name, value in values.items():
                setattr(row, name, value)
            row.updated_at = utcnow()
            await self.db.commit()
            row = await self._load(entity_id)
            plan = await self.spec.invalidation.plan(self.db, WriteEvent.UPDATE, row)

        item = self._to_schema(row)
        await self.spec.invalidation.apply(self.cache, plan)
        logger.info(f"{self.spec.name} 수정: {entity_id}")
        return item

    async def delete(self, entity_id: str) -> SchemaT:
        async with storage_errors(self.db, f"{self.spec.name} 삭제"):
            row = await self._load(entity_id, options=self.spec.delete_options)
            if row is None:
                raise self._not_found()
            item = self._to_schema(row)
            # 행이 사라지기 전에 연관 대상을 계산
            plan = await self.spec.invalidation.plan(self.db, WriteEvent.DELETE, row)
            await self.db.delete(row)
            await self.db.commit()

        await self.spec.invalidation.apply(self.cache, plan)
        logger.info(f"{self.spec.name} 삭제: {entity_id}")
        return item
