"""
캐시 저장소 / 무효화 정책 테스트
"""

import pytest

from app.core.cache import CacheStore
from app.repositories.invalidation import InvalidationPlan, InvalidationPolicy, WriteEvent
from app.schemas.genre import GenreResponse
from app.services.chapter_service import CHAPTER_SPEC


class _Entity:
    def __init__(self, id, book_id=None):
        self.id = id
        self.book_id = book_id


class TestCacheStore:

    async def test_prefix_sweep_only_touches_prefix(self, redis, cache):
        await redis.setex("books:list:page:1:size:10:search::genres:", 600, "{}")
        await redis.setex("books:list:page:2:size:10:search::genres:", 600, "{}")
        await redis.setex("book:abc", 600, "{}")
        await redis.setex("chapters:list:page:1:size:10:search:", 600, "{}")

        deleted = await cache.delete_prefix("books:list:")

        assert deleted == 2
        assert set(redis.store) == {"book:abc", "chapters:list:page:1:size:10:search:"}

    async def test_corrupt_entry_is_a_miss(self, redis, cache):
        await redis.setex("genre:1", 600, '{"broken": true}')
        assert await cache.get_model("genre:1", GenreResponse) is None
        assert "genre:1" not in redis.store

    async def test_outage_is_swallowed(self, failing_cache):
        assert await failing_cache.get_model("genre:1", GenreResponse) is None
        assert await failing_cache.exists("genre:1") is False
        assert await failing_cache.delete("genre:1") == 0
        assert await failing_cache.delete_prefix("genres:list:") == 0
        assert await failing_cache.ping() is False


class TestInvalidationPlan:

    def test_merge_deduplicates(self):
        plan = InvalidationPlan().add_keys("book:1").add_prefixes("books:list:")
        plan.merge(InvalidationPlan(keys=["book:1", "book:2"], prefixes=["books:list:"]))
        assert plan.keys == ["book:1", "book:2"]
        assert plan.prefixes == ["books:list:"]

    async def test_execute_deletes_keys_and_prefixes(self, redis, cache):
        for key in ("genre:1", "genres:list:page:1:size:10:search:", "genre:2"):
            await redis.setex(key, 600, "{}")
        await InvalidationPlan(keys=["genre:1"], prefixes=["genres:list:"]).execute(cache)
        assert set(redis.store) == {"genre:2"}


class TestInvalidationPolicy:

    async def test_create_skips_point_key(self, db):
        policy = InvalidationPolicy("genre", "genres:list:")
        plan = await policy.plan(db, WriteEvent.CREATE, _Entity("g1"))
        assert plan.keys == []
        assert plan.prefixes == ["genres:list:"]

    async def test_update_includes_point_key(self, db):
        policy = InvalidationPolicy("genre", "genres:list:")
        plan = await policy.plan(db, WriteEvent.UPDATE, _Entity("g1"))
        assert plan.keys == ["genre:g1"]

    @pytest.mark.parametrize("event", [WriteEvent.CREATE, WriteEvent.UPDATE, WriteEvent.DELETE])
    async def test_chapter_writes_sweep_book_scope(self, db, event):
        plan = await CHAPTER_SPEC.invalidation.plan(db, event, _Entity("c1", book_id="b1"))
        assert plan.prefixes == ["chapters:list:", "chapters:book:b1:"]
        assert ("chapter:c1" in plan.keys) == (event != WriteEvent.CREATE)
