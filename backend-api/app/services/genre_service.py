"""
장르 관련 서비스
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.cache import CacheStore
from app.core.exceptions import ConflictError
from app.models.genre import BookGenre, Genre
from app.repositories.base import EntityRepository, EntitySpec, storage_errors
from app.repositories.invalidation import InvalidationPlan, InvalidationPolicy, WriteEvent
from app.schemas.common import Page, PaginationParams
from app.schemas.genre import GenreCreate, GenreResponse, GenreUpdate

GENRE_LIST_PREFIX = "genres:list:"


async def _genre_dependents(db: AsyncSession, event: WriteEvent, genre: Genre) -> InvalidationPlan:
    """장르 제목이 책 응답에 포함되므로 연결된 책 캐시도 지운다"""
    plan = InvalidationPlan()
    if event == WriteEvent.CREATE:
        return plan
    result = await db.execute(select(BookGenre.book_id).where(BookGenre.genre_id == genre.id))
    plan.add_keys(*[f"book:{book_id}" for book_id in result.scalars().all()])
    plan.add_prefixes("books:list:")
    return plan


GENRE_SPEC = EntitySpec(
    name="genre",
    model=Genre,
    schema=GenreResponse,
    list_prefix=GENRE_LIST_PREFIX,
    invalidation=InvalidationPolicy("genre", GENRE_LIST_PREFIX, dependents=_genre_dependents),
    search_column=Genre.title,
    order_by=(Genre.created_at.desc(),),
    delete_options=(selectinload(Genre.books),),
    not_found_message="장르를 찾을 수 없습니다.",
)


class GenreService:
    def __init__(self, db: AsyncSession, cache: CacheStore):
        self.db = db
        self.repo: EntityRepository[GenreResponse] = EntityRepository(db, cache, GENRE_SPEC)

    async def _ensure_title_available(self, title: str, exclude_id: str = None) -> None:
        stmt = select(Genre.id).where(func.lower(Genre.title) == title.strip().lower())
        if exclude_id:
            stmt = stmt.where(Genre.id != exclude_id)
        async with storage_errors(self.db, "장르 중복 확인"):
            taken = (await self.db.execute(stmt)).first() is not None
        if taken:
            raise ConflictError("이미 존재하는 장르입니다.")

    async def list_genres(self, params: PaginationParams) -> Page[GenreResponse]:
        return await self.repo.list(params)

    async def get_genre(self, genre_id: str) -> GenreResponse:
        return await self.repo.get(genre_id)

    async def create_genre(self, data: GenreCreate) -> GenreResponse:
        await self._ensure_title_available(data.title)
        return await self.repo.create(data.model_dump(mode="json"))

    async def update_genre(self, genre_id: str, data: GenreUpdate) -> GenreResponse:
        values = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if "title" in values:
            await self._ensure_title_available(values["title"], exclude_id=genre_id)
        return await self.repo.update(genre_id, values)

    async def delete_genre(self, genre_id: str) -> GenreResponse:
        return await self.repo.delete(genre_id)
