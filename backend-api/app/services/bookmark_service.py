"""
북마크 서비스
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheStore
from app.core.exceptions import ConflictError, NotFoundError
from app.models.bookmark import Bookmark
from app.repositories.base import EntityRepository, EntitySpec, ListScope, storage_errors
from app.repositories.invalidation import InvalidationPolicy
from app.schemas.bookmark import BookmarkResponse
from app.schemas.common import Page, PaginationParams
from app.services.book_service import BookService
from app.services.user_service import UserService


def user_bookmarks_prefix(user_id: str) -> str:
    return f"bookmarks:user:{user_id}:"


BOOKMARK_SPEC = EntitySpec(
    name="bookmark",
    model=Bookmark,
    schema=BookmarkResponse,
    list_prefix="bookmarks:user:",
    invalidation=InvalidationPolicy(
        "bookmark",
        scoped_prefixes=lambda bookmark: [user_bookmarks_prefix(bookmark.user_id)],
    ),
    order_by=(Bookmark.created_at.desc(),),
    not_found_message="북마크를 찾을 수 없습니다.",
)


class BookmarkService:
    def __init__(self, db: AsyncSession, cache: CacheStore):
        self.db = db
        self.repo: EntityRepository[BookmarkResponse] = EntityRepository(db, cache, BOOKMARK_SPEC)
        self.books = BookService(db, cache)
        self.users = UserService(db, cache)

    async def list_bookmarks(self, user_id: str, params: PaginationParams) -> Page[BookmarkResponse]:
        scope = ListScope(condition=Bookmark.user_id == user_id, key_prefix=user_bookmarks_prefix(user_id))
        return await self.repo.list(params, scope=scope)

    async def _find(self, user_id: str, book_id: str):
        async with storage_errors(self.db, "북마크 조회"):
            result = await self.db.execute(
                select(Bookmark).where(Bookmark.user_id == user_id, Bookmark.book_id == book_id)
            )
            return result.scalar_one_or_none()

    async def add_bookmark(self, user_id: str, book_id: str) -> BookmarkResponse:
        # 토큰이 아직 유효해도 삭제된 사용자일 수 있다
        if not await self.users.user_exists(user_id):
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        if not await self.books.book_exists(book_id):
            raise NotFoundError("책을 찾을 수 없습니다.")
        if await self._find(user_id, book_id) is not None:
            raise ConflictError("이미 북마크한 책입니다.")
        return await self.repo.create({"user_id": user_id, "book_id": book_id})

    async def remove_bookmark(self, user_id: str, book_id: str) -> BookmarkResponse:
        bookmark = await self._find(user_id, book_id)
        if bookmark is None:
            raise NotFoundError("북마크를 찾을 수 없습니다.")
        return await self.repo.delete(bookmark.id)
