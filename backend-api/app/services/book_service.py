"""
책 관련 서비스
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.cache import CacheStore
from app.core.exceptions import BadRequestError
from app.models.book import Book
from app.models.chapter import Chapter
from app.models.genre import BookGenre, Genre
from app.repositories.base import EntityRepository, EntitySpec, ListFilter, storage_errors
from app.repositories.invalidation import InvalidationPlan, InvalidationPolicy, WriteEvent
from app.schemas.book import BookCreate, BookResponse, BookUpdate
from app.schemas.common import Page, PaginationParams

logger = logging.getLogger(__name__)

BOOK_LIST_PREFIX = "books:list:"


def normalize_genre_titles(raw: Optional[str]) -> Tuple[str, ...]:
    """'Fantasy, romance ,fantasy' -> ('fantasy', 'romance')"""
    if not raw:
        return ()
    names = {part.strip().lower() for part in raw.split(",")}
    names.discard("")
    return tuple(sorted(names))


def _any_genre_condition(names: Tuple[str, ...]):
    # 하나라도 일치하는 장르가 있으면 포함
    return exists().where(
        BookGenre.book_id == Book.id,
        BookGenre.genre_id == Genre.id,
        func.lower(Genre.title).in_(names),
    )


async def _book_dependents(db: AsyncSession, event: WriteEvent, book: Book) -> InvalidationPlan:
    plan = InvalidationPlan()
    if event != WriteEvent.DELETE:
        return plan
    result = await db.execute(select(Chapter.id).where(Chapter.book_id == book.id))
    plan.add_keys(*[f"chapter:{chapter_id}" for chapter_id in result.scalars().all()])
    plan.add_prefixes("chapters:list:", f"chapters:book:{book.id}:", "bookmarks:user:")
    return plan


BOOK_SPEC = EntitySpec(
    name="book",
    model=Book,
    schema=BookResponse,
    list_prefix=BOOK_LIST_PREFIX,
    invalidation=InvalidationPolicy("book", BOOK_LIST_PREFIX, dependents=_book_dependents),
    search_column=Book.title,
    filters=(
        ListFilter(
            name="genres",
            normalize=normalize_genre_titles,
            build=_any_genre_condition,
            key=",".join,
        ),
    ),
    order_by=(Book.created_at.desc(),),
    load_options=(selectinload(Book.genres),),
    delete_options=(selectinload(Book.chapters), selectinload(Book.bookmarks)),
    not_found_message="책을 찾을 수 없습니다.",
)


class BookService:
    def __init__(self, db: AsyncSession, cache: CacheStore):
        self.db = db
        self.repo: EntityRepository[BookResponse] = EntityRepository(db, cache, BOOK_SPEC)

    async def _resolve_genres(self, titles: List[str]) -> List[Genre]:
        """장르 제목(대소문자 무시) → Genre 목록. 없는 장르가 있으면 400"""
        wanted = {t.strip().lower(): t.strip() for t in titles if t and t.strip()}
        if not wanted:
            return []
        async with storage_errors(self.db, "장르 조회"):
            result = await self.db.execute(
                select(Genre).where(func.lower(Genre.title).in_(list(wanted)))
            )
            genres = list(result.scalars().all())
        found = {g.title.lower() for g in genres}
        missing = [title for key, title in wanted.items() if key not in found]
        if missing:
            raise BadRequestError("존재하지 않는 장르입니다.", details={"genres": missing})
        return genres

    async def list_books(self, params: PaginationParams) -> Page[BookResponse]:
        return await self.repo.list(params)

    async def get_book(self, book_id: str) -> BookResponse:
        return await self.repo.get(book_id)

    async def book_exists(self, book_id: str) -> bool:
        return await self.repo.find(book_id) is not None

    async def create_book(self, data: BookCreate) -> BookResponse:
        values = data.model_dump(mode="json", exclude={"genres"})
        values["genres"] = await self._resolve_genres(data.genres)
        return await self.repo.create(values)

    async def update_book(self, book_id: str, data: BookUpdate) -> BookResponse:
        values = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if "genres" in values:
            values["genres"] = await self._resolve_genres(values["genres"])
        return await self.repo.update(book_id, values)

    async def delete_book(self, book_id: str) -> BookResponse:
        return await self.repo.delete(book_id)
