"""
애플리케이션 설정
"""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path
from dotenv import load_dotenv


"""env 로딩 우선순위
1) OS 환경변수
2) 프로젝트 루트의 .env (repo/.env)
3) backend-api 디렉터리의 .env (repo/backend-api/.env)
"""

_here = Path(__file__).resolve()
_repo_root_env = _here.parents[3] / ".env"  # repo/.env
_backend_env = _here.parents[2] / ".env"    # backend-api/.env
for _p in (_repo_root_env, _backend_env):
    if _p.exists():
        load_dotenv(dotenv_path=str(_p), override=False)


DEFAULT_JWT_SECRET = "your-super-secret-jwt-key-change-this-in-production"
DEFAULT_API_KEY = "local-development-api-key"


class Settings(BaseSettings):
    """애플리케이션 설정"""
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+aiosqlite:///./data/catalog.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # 커넥션 풀 / 타임아웃
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_STATEMENT_TIMEOUT_MS: int = 15000
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_SOCKET_TIMEOUT: float = 2.0

    # JWT
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    JWT_REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # 공개 조회 API 키 (x-api-key 헤더)
    API_KEY: str = DEFAULT_API_KEY

    # 캐시 / 페이지네이션
    CACHE_TTL_SECONDS: int = 600
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    COOKIE_SECURE: bool = True
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'


settings = Settings()


# 환경별 설정 검증
def validate_settings():
    """설정 검증"""
    if settings.ENVIRONMENT == "production":
        if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            raise ValueError("프로덕션 환경에서는 JWT_SECRET_KEY를 변경해야 합니다.")
        if settings.API_KEY == DEFAULT_API_KEY:
            raise ValueError("프로덕션 환경에서는 API_KEY를 변경해야 합니다.")
    if settings.MAX_PAGE_SIZE < settings.DEFAULT_PAGE_SIZE:
        raise ValueError("MAX_PAGE_SIZE는 DEFAULT_PAGE_SIZE보다 작을 수 없습니다.")

    return True


validate_settings()
