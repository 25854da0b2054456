"""
콘텐츠 카탈로그 API - FastAPI 메인 애플리케이션
"""

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from app.core.cache import CacheStore
from app.core.config import settings
from app.core.database import engine, Base, test_db_connection
from app.core.exceptions import AppError, BadRequestError, InternalServerError
from app.core.redis_client import close_redis_client
from app.dependencies import get_cache

from app.api.auth import router as auth_router
from app.api.genres import router as genres_router
from app.api.books import router as books_router
from app.api.chapters import router as chapters_router
from app.api.users import router as users_router
from app.api.bookmarks import router as bookmarks_router

# 로깅 설정
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 시 실행되는 이벤트"""
    logger.info("🚀 콘텐츠 카탈로그 API 시작")

    # 데이터베이스 테이블 생성 (개발용)
    if settings.ENVIRONMENT == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("📊 데이터베이스 테이블 생성 완료")

    yield

    await close_redis_client()
    await engine.dispose()
    logger.info("👋 콘텐츠 카탈로그 API 종료")


# FastAPI 앱 생성
app = FastAPI(
    title="콘텐츠 카탈로그 API",
    description="책/회차/장르/사용자 카탈로그 서비스",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# ---- 예외 핸들러 ----
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 실패: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    error = BadRequestError("Validation failed", details={"messages": messages})
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"처리되지 않은 예외 {request.method} {request.url.path}: {exc}")
    error = InternalServerError()
    return JSONResponse(status_code=error.status_code, content=error.to_body())


# 라우터 등록
app.include_router(auth_router, prefix="/api/auth", tags=["인증"])
app.include_router(genres_router, prefix="/api", tags=["장르"])
app.include_router(books_router, prefix="/api", tags=["책"])
app.include_router(chapters_router, prefix="/api", tags=["회차"])
app.include_router(users_router, prefix="/api", tags=["사용자 관리"])
app.include_router(bookmarks_router, prefix="/api", tags=["북마크"])


@app.get("/healthy")
async def health_check():
    """헬스 체크 엔드포인트"""
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


@app.get("/db-health")
async def db_health_check(cache: CacheStore = Depends(get_cache)):
    """데이터베이스/Redis 연결 확인"""
    database_ok = await test_db_connection()
    cache_ok = await cache.ping()
    body = {
        "status": "healthy" if database_ok and cache_ok else "unhealthy",
        "database": "connected" if database_ok else "disconnected",
        "redis": "connected" if cache_ok else "disconnected",
    }
    return JSONResponse(status_code=200 if database_ok and cache_ok else 503, content=body)
