"""
캐시 일관성 저장소 동작 테스트 (서비스 계층을 통해 호출)
"""

import asyncio

import pytest

from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.schemas.book import BookCreate, BookUpdate
from app.schemas.chapter import ChapterCreate, ChapterUpdate
from app.schemas.common import PaginationParams, compute_total_pages
from app.schemas.genre import GenreCreate, GenreUpdate
from app.services.book_service import BookService, normalize_genre_titles
from app.services.chapter_service import ChapterService
from app.services.genre_service import GenreService


def _book(title="Solo Leveling", genres=None):
    return BookCreate(
        title=title,
        author="Chugong",
        cover="https://cdn.example.com/cover.png",
        description="A hunter story",
        genres=genres or [],
    )


class TestPagination:

    @pytest.mark.parametrize("total, size, expected", [(25, 10, 3), (20, 10, 2), (0, 10, 0), (1, 100, 1)])
    def test_total_pages(self, total, size, expected):
        assert compute_total_pages(total, size) == expected

    def test_genre_titles_normalized(self):
        assert normalize_genre_titles(" Fantasy,romance , FANTASY,,") == ("fantasy", "romance")
        assert normalize_genre_titles(" , ") == ()

    async def test_pages_are_counted_with_same_filter(self, db, cache):
        genres = GenreService(db, cache)
        for i in range(25):
            await genres.create_genre(GenreCreate(title=f"Genre {i:02d}"))

        first = await genres.list_genres(PaginationParams(page=1, page_size=10))
        last = await genres.list_genres(PaginationParams(page=3, page_size=10))
        assert first.total_items == 25
        assert first.total_pages == 3
        assert len(first.data) == 10
        assert len(last.data) == 5

    async def test_page_size_is_clamped(self, db, cache):
        page = await GenreService(db, cache).list_genres(PaginationParams(page=1, page_size=500))
        assert page.page_size == 100

    async def test_search_escapes_wildcards(self, db, cache):
        genres = GenreService(db, cache)
        await genres.create_genre(GenreCreate(title="100% Action"))
        await genres.create_genre(GenreCreate(title="1000 Actions"))

        page = await genres.list_genres(PaginationParams(search="100%"))
        assert [g.title for g in page.data] == ["100% Action"]

    async def test_search_is_case_insensitive(self, db, cache):
        books = BookService(db, cache)
        await books.create_book(_book("Solo Leveling"))
        await books.create_book(_book("Omniscient Reader"))

        page = await books.list_books(PaginationParams(search="LEVEL"))
        assert [b.title for b in page.data] == ["Solo Leveling"]

    async def test_search_folds_non_ascii_case(self, db, cache):
        genres = GenreService(db, cache)
        await genres.create_genre(GenreCreate(title="Élan"))
        await genres.create_genre(GenreCreate(title="Elan"))

        page = await genres.list_genres(PaginationParams(search="éLAN"))
        assert [g.title for g in page.data] == ["Élan"]

    async def test_separator_in_filters_does_not_share_cache_key(self, db, cache):
        books = BookService(db, cache)
        await books.create_book(_book("a:genres:fantasy"))
        first = PaginationParams(search="a:genres:fantasy")
        second = PaginationParams(search="a", genres="fantasy:genres:")

        assert books.repo.list_cache_key(first, 10) != books.repo.list_cache_key(second, 10)
        assert (await books.list_books(first)).total_items == 1
        # 두 번째 조회가 첫 번째 목록 캐시를 받으면 안 된다
        assert (await books.list_books(second)).total_items == 0

    async def test_page_beyond_integer_range_is_empty(self, db, cache):
        genres = GenreService(db, cache)
        await genres.create_genre(GenreCreate(title="Fantasy"))

        page = await genres.list_genres(PaginationParams(page=10**19))
        assert page.data == []
        assert page.page == 10**19
        assert page.total_items == 1
        assert page.total_pages == 1


class TestEntityRepository:

    async def test_create_then_get_round_trip(self, db, cache):
        genres = GenreService(db, cache)
        created = await genres.create_genre(GenreCreate(title="Fantasy", description="magic"))
        assert created.updated_at >= created.created_at
        assert await genres.get_genre(created.id) == created
        # 두 번째 조회는 캐시에서
        assert await genres.get_genre(created.id) == created

    async def test_get_missing_raises_not_found(self, db, cache):
        with pytest.raises(NotFoundError):
            await GenreService(db, cache).get_genre("missing")

    async def test_empty_update_is_noop(self, db, redis, cache):
        genres = GenreService(db, cache)
        created = await genres.create_genre(GenreCreate(title="Fantasy"))
        await genres.list_genres(PaginationParams())
        cached_keys = set(redis.store)

        result = await genres.update_genre(created.id, GenreUpdate())

        assert result.updated_at == created.updated_at
        assert result == created
        # 목록 캐시가 그대로 남아 있어야 한다
        assert cached_keys <= set(redis.store)

    async def test_read_after_update_and_delete(self, db, cache):
        genres = GenreService(db, cache)
        created = await genres.create_genre(GenreCreate(title="Fantasy"))
        await genres.get_genre(created.id)
        await genres.list_genres(PaginationParams())

        updated = await genres.update_genre(created.id, GenreUpdate(title="High Fantasy"))
        assert updated.updated_at >= created.updated_at
        assert (await genres.get_genre(created.id)).title == "High Fantasy"
        assert [g.title for g in (await genres.list_genres(PaginationParams())).data] == ["High Fantasy"]

        await genres.delete_genre(created.id)
        with pytest.raises(NotFoundError):
            await genres.get_genre(created.id)
        assert (await genres.list_genres(PaginationParams())).total_items == 0

    async def test_update_missing_raises_not_found(self, db, cache):
        with pytest.raises(NotFoundError):
            await GenreService(db, cache).update_genre("missing", GenreUpdate(title="x"))

    async def test_duplicate_genre_title_conflicts(self, db, cache):
        genres = GenreService(db, cache)
        await genres.create_genre(GenreCreate(title="Fantasy"))
        with pytest.raises(ConflictError):
            await genres.create_genre(GenreCreate(title="fantasy"))

    async def test_concurrent_gets_during_cache_outage(self, session_factory, cache, failing_cache):
        async with session_factory() as session:
            created = await GenreService(session, cache).create_genre(GenreCreate(title="Fantasy"))

        async def fetch():
            async with session_factory() as session:
                return await GenreService(session, failing_cache).get_genre(created.id)

        results = await asyncio.gather(*[fetch() for _ in range(8)])
        assert all(result == created for result in results)


class TestBookGenres:

    async def test_genre_filter_and_genre_delete(self, db, cache):
        genres = GenreService(db, cache)
        books = BookService(db, cache)
        fantasy = await genres.create_genre(GenreCreate(title="Fantasy"))
        await genres.create_genre(GenreCreate(title="Romance"))
        book = await books.create_book(_book(genres=["fantasy"]))
        await books.create_book(_book("Other", genres=["Romance"]))
        assert book.genres == ["Fantasy"]

        page = await books.list_books(PaginationParams(genres="FANTASY, "))
        assert [b.id for b in page.data] == [book.id]
        await books.get_book(book.id)

        await genres.delete_genre(fantasy.id)

        page = await books.list_books(PaginationParams(genres="fantasy"))
        assert page.total_items == 0
        survivor = await books.get_book(book.id)
        assert survivor.genres == []

    async def test_any_genre_matches(self, db, cache):
        genres = GenreService(db, cache)
        books = BookService(db, cache)
        await genres.create_genre(GenreCreate(title="Fantasy"))
        await genres.create_genre(GenreCreate(title="Romance"))
        await books.create_book(_book("A", genres=["Fantasy"]))
        await books.create_book(_book("B", genres=["Romance"]))

        page = await books.list_books(PaginationParams(genres="fantasy,romance"))
        assert page.total_items == 2

    async def test_unknown_genre_rejected(self, db, cache):
        with pytest.raises(BadRequestError):
            await BookService(db, cache).create_book(_book(genres=["Nope"]))

    async def test_genre_rename_refreshes_cached_book(self, db, cache):
        genres = GenreService(db, cache)
        books = BookService(db, cache)
        fantasy = await genres.create_genre(GenreCreate(title="Fantasy"))
        book = await books.create_book(_book(genres=["Fantasy"]))
        await books.get_book(book.id)

        await genres.update_genre(fantasy.id, GenreUpdate(title="Dark Fantasy"))

        assert (await books.get_book(book.id)).genres == ["Dark Fantasy"]

    async def test_partial_update_keeps_other_fields(self, db, cache):
        books = BookService(db, cache)
        book = await books.create_book(_book())
        updated = await books.update_book(book.id, BookUpdate(popular=True))
        assert updated.popular is True
        assert updated.title == book.title
        assert updated.author == book.author


class TestChapters:

    async def test_chapter_requires_existing_book(self, db, cache):
        with pytest.raises(NotFoundError):
            await ChapterService(db, cache).create_chapter(
                ChapterCreate(book_id="missing", title="1화", content="...", chapter_num=1)
            )

    async def test_duplicate_chapter_number_conflicts(self, db, cache):
        book = await BookService(db, cache).create_book(_book())
        chapters = ChapterService(db, cache)
        await chapters.create_chapter(ChapterCreate(book_id=book.id, title="1화", content="...", chapter_num=1))
        with pytest.raises(ConflictError):
            await chapters.create_chapter(ChapterCreate(book_id=book.id, title="1화 again", content="...", chapter_num=1))

    async def test_book_chapter_list_refreshes_after_write(self, db, cache):
        book = await BookService(db, cache).create_book(_book())
        chapters = ChapterService(db, cache)
        await chapters.create_chapter(ChapterCreate(book_id=book.id, title="2화", content="...", chapter_num=2))
        first = await chapters.create_chapter(ChapterCreate(book_id=book.id, title="1화", content="...", chapter_num=1))

        page = await chapters.list_book_chapters(book.id, PaginationParams())
        assert [c.chapter_num for c in page.data] == [1, 2]

        await chapters.update_chapter(first.id, ChapterUpdate(title="프롤로그"))
        page = await chapters.list_book_chapters(book.id, PaginationParams())
        assert page.data[0].title == "프롤로그"

    async def test_book_delete_removes_chapters(self, db, redis, cache):
        books = BookService(db, cache)
        chapters = ChapterService(db, cache)
        book = await books.create_book(_book())
        chapter = await chapters.create_chapter(
            ChapterCreate(book_id=book.id, title="1화", content="...", chapter_num=1)
        )
        await chapters.get_chapter(chapter.id)
        await chapters.list_book_chapters(book.id, PaginationParams())

        await books.delete_book(book.id)

        assert f"chapter:{chapter.id}" not in redis.store
        assert not any(key.startswith(f"chapters:book:{book.id}:") for key in redis.store)
        with pytest.raises(NotFoundError):
            await chapters.get_chapter(chapter.id)
        with pytest.raises(NotFoundError):
            await books.get_book(book.id)
