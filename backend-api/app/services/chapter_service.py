"""
회차 관련 서비스
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheStore
from app.core.exceptions import NotFoundError
from app.models.chapter import Chapter
from app.repositories.base import EntityRepository, EntitySpec, ListScope
from app.repositories.invalidation import InvalidationPolicy
from app.schemas.chapter import ChapterCreate, ChapterResponse, ChapterUpdate
from app.schemas.common import Page, PaginationParams
from app.services.book_service import BookService

CHAPTER_LIST_PREFIX = "chapters:list:"


def book_chapters_prefix(book_id: str) -> str:
    return f"chapters:book:{book_id}:"


CHAPTER_SPEC = EntitySpec(
    name="chapter",
    model=Chapter,
    schema=ChapterResponse,
    list_prefix=CHAPTER_LIST_PREFIX,
    invalidation=InvalidationPolicy(
        "chapter",
        CHAPTER_LIST_PREFIX,
        scoped_prefixes=lambda chapter: [book_chapters_prefix(chapter.book_id)],
    ),
    search_column=Chapter.title,
    order_by=(Chapter.chapter_num.asc(), Chapter.created_at.desc()),
    not_found_message="회차를 찾을 수 없습니다.",
)


class ChapterService:
    def __init__(self, db: AsyncSession, cache: CacheStore):
        self.repo: EntityRepository[ChapterResponse] = EntityRepository(db, cache, CHAPTER_SPEC)
        self.books = BookService(db, cache)

    async def list_chapters(self, params: PaginationParams) -> Page[ChapterResponse]:
        return await self.repo.list(params)

    async def list_book_chapters(self, book_id: str, params: PaginationParams) -> Page[ChapterResponse]:
        scope = ListScope(condition=Chapter.book_id == book_id, key_prefix=book_chapters_prefix(book_id))
        return await self.repo.list(params, scope=scope)

    async def get_chapter(self, chapter_id: str) -> ChapterResponse:
        return await self.repo.get(chapter_id)

    async def create_chapter(self, data: ChapterCreate) -> ChapterResponse:
        if not await self.books.book_exists(data.book_id):
            raise NotFoundError("책을 찾을 수 없습니다.")
        return await self.repo.create(data.model_dump(mode="json"))

    async def update_chapter(self, chapter_id: str, data: ChapterUpdate) -> ChapterResponse:
        values = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        return await self.repo.update(chapter_id, values)

    async def delete_chapter(self, chapter_id: str) -> ChapterResponse:
        return await self.repo.delete(chapter_id)
