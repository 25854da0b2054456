"""
데이터베이스 설정 및 연결
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import MetaData, event
from sqlalchemy.engine import make_url
from pathlib import Path
from typing import AsyncGenerator
import logging
import ssl
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from app.core.config import settings

logger = logging.getLogger(__name__)


def _postgres_engine_args(raw_url: str) -> tuple[str, dict]:
    """PostgreSQL(asyncpg) 용 URL/connect_args 구성

    asyncpg는 URL query의 sslmode를 받지 않으므로 제거하고 SSLContext로 전달한다.
    풀 크기와 쿼리 타임아웃은 설정값을 따른다.
    """
    url = raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    parts = urlsplit(url)
    query_items = parse_qsl(parts.query, keep_blank_values=True)
    sslmode = next((v for (k, v) in query_items if k.lower() == "sslmode"), None)
    query_filtered = [(k, v) for (k, v) in query_items if k.lower() not in ("sslmode", "ssl")]
    engine_url = urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query_filtered), parts.fragment))

    connect_args: dict = {
        "command_timeout": settings.DB_STATEMENT_TIMEOUT_MS / 1000,
        "server_settings": {"statement_timeout": str(settings.DB_STATEMENT_TIMEOUT_MS)},
    }
    mode = (sslmode or "").strip().lower()
    if mode in ("require", "prefer", "verify-ca", "verify-full"):
        ctx = ssl.create_default_context()
        # require/prefer: 암호화만, 인증서 검증 안 함 (libpq 동작과 동일)
        if mode in ("require", "prefer"):
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ctx
    return engine_url, connect_args


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record):
    """SQLite 내장 lower()는 ASCII만 변환하므로 유니코드 대소문자 변환으로 교체 (ILIKE/장르 비교용)"""
    dbapi_connection.create_function("lower", 1, _unicode_lower)


def build_engine(database_url: str) -> AsyncEngine:
    """URL에 맞는 비동기 엔진 생성"""
    if database_url.startswith("sqlite"):
        # SQLite의 경우 URL 변환 없이 사용, 파일 DB면 디렉터리 생성
        db_path = make_url(database_url).database
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        sqlite_engine = create_async_engine(database_url, echo=settings.DEBUG, future=True)
        event.listen(sqlite_engine.sync_engine, "connect", _register_sqlite_functions)
        return sqlite_engine

    engine_url, connect_args = _postgres_engine_args(database_url)
    return create_async_engine(
        engine_url,
        echo=settings.DEBUG,
        future=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
        pool_recycle=300,
        connect_args=connect_args,
    )


engine = build_engine(settings.DATABASE_URL)

# 세션 팩토리 생성
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy Base 클래스"""
    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s"
        }
    )


# 데이터베이스 세션 의존성
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """데이터베이스 세션 의존성"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# 데이터베이스 연결 테스트
async def test_db_connection() -> bool:
    """데이터베이스 연결 테스트"""
    try:
        async with engine.connect() as conn:
            await conn.exec_driver_sql("SELECT 1")
        return True
    except Exception as e:
        logger.error(f"데이터베이스 연결 실패: {e}")
        return False
