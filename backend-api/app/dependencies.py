"""
공통 의존성: DB 세션, 캐시, 페이지네이션, 요청 단위 서비스 생성
"""

from typing import Optional

from fastapi import Depends, Query
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheStore
from app.core.config import settings
from app.core.database import get_db
from app.core.redis_client import get_redis_client
from app.core.security import TokenService, get_token_service
from app.schemas.common import PaginationParams
from app.services.auth_service import AuthService
from app.services.book_service import BookService
from app.services.bookmark_service import BookmarkService
from app.services.chapter_service import ChapterService
from app.services.genre_service import GenreService
from app.services.user_service import UserService


async def get_cache(redis: Redis = Depends(get_redis_client)) -> CacheStore:
    return CacheStore(redis, default_ttl=settings.CACHE_TTL_SECONDS)


def get_pagination(
    page: int = Query(1, ge=1, description="페이지 번호 (1부터)"),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, max_length=200),
    genres: Optional[str] = Query(None, max_length=500, description="쉼표로 구분한 장르 제목"),
) -> PaginationParams:
    return PaginationParams(page=page, page_size=page_size, search=search, genres=genres)


def get_book_service(db: AsyncSession = Depends(get_db), cache: CacheStore = Depends(get_cache)) -> BookService:
    return BookService(db, cache)


def get_chapter_service(db: AsyncSession = Depends(get_db), cache: CacheStore = Depends(get_cache)) -> ChapterService:
    return ChapterService(db, cache)


def get_genre_service(db: AsyncSession = Depends(get_db), cache: CacheStore = Depends(get_cache)) -> GenreService:
    return GenreService(db, cache)


def get_user_service(db: AsyncSession = Depends(get_db), cache: CacheStore = Depends(get_cache)) -> UserService:
    return UserService(db, cache)


def get_bookmark_service(db: AsyncSession = Depends(get_db), cache: CacheStore = Depends(get_cache)) -> BookmarkService:
    return BookmarkService(db, cache)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    cache: CacheStore = Depends(get_cache),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, cache, tokens)


__all__ = [
    "get_db",
    "get_redis_client",
    "get_cache",
    "get_pagination",
    "get_book_service",
    "get_chapter_service",
    "get_genre_service",
    "get_user_service",
    "get_bookmark_service",
    "get_auth_service",
]
