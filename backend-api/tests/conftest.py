"""
공통 테스트 픽스처

- 임시 파일 SQLite (aiosqlite) 위에 테이블 생성
- Redis 대역: 메모리 구현(InMemoryRedis), 항상 실패하는 구현(FailingRedis)
- httpx AsyncClient + ASGITransport 로 앱 호출
"""

import fnmatch
from typing import Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.cache import CacheStore
from app.core.config import settings
from app.core.database import Base, build_engine, get_db
from app.core.redis_client import get_redis_client
from app.core.security import TokenService, get_password_hash
from app.main import app
from app.models.user import Role, User
from app.repositories.base import new_id, utcnow


class InMemoryRedis:
    """테스트용 redis.asyncio 대역 (TTL 은 기록만 한다)"""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    async def scan_iter(self, match: str = "*", count: int = 100):
        for key in list(self.store):
            if fnmatch.fnmatchcase(key, match):
                yield key

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        pass


class FailingRedis:
    """모든 호출이 연결 오류를 내는 Redis 대역"""

    def __init__(self):
        self.calls = 0

    def _fail(self):
        self.calls += 1
        raise RedisConnectionError("redis unavailable")

    async def get(self, key):
        self._fail()

    async def setex(self, key, ttl, value):
        self._fail()

    async def exists(self, *keys):
        self._fail()

    async def delete(self, *keys):
        self._fail()

    async def scan_iter(self, match="*", count=100):
        self._fail()
        yield  # pragma: no cover

    async def ping(self):
        self._fail()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def redis():
    return InMemoryRedis()


@pytest.fixture
def cache(redis):
    return CacheStore(redis, default_ttl=600)


@pytest.fixture
def failing_cache():
    return CacheStore(FailingRedis(), default_ttl=600)


@pytest.fixture
def token_service():
    return TokenService.from_settings()


@pytest_asyncio.fixture
async def client(session_factory, redis):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_redis():
        return redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = override_get_redis
    # Secure 쿠키를 주고받기 위해 https 로 호출
    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def api_key_headers():
    return {"x-api-key": settings.API_KEY}


async def create_user_row(session_factory, username: str, email: str, role: Role = Role.USER,
                          password: str = "password123") -> User:
    now = utcnow()
    user = User(
        id=new_id(),
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        role=role.value,
        created_at=now,
        updated_at=now,
    )
    async with session_factory() as session:
        session.add(user)
        await session.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(session_factory):
    return await create_user_row(session_factory, "admin", "admin@example.com", Role.ADMIN)


@pytest_asyncio.fixture
async def normal_user(session_factory):
    return await create_user_row(session_factory, "reader", "reader@example.com", Role.USER)


@pytest.fixture
def admin_headers(admin_user, token_service):
    token = token_service.issue_pair(admin_user.id, admin_user.email, Role.ADMIN).access_token
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(normal_user, token_service):
    token = token_service.issue_pair(normal_user.id, normal_user.email, Role.USER).access_token
    return {"Authorization": f"Bearer {token}"}
