"""
가입된 사용자를 관리자로 승격하는 스크립트

사용법: python scripts/set_admin.py admin@example.com
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.cache import CacheStore
from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.core.exceptions import AppError
from app.core.redis_client import close_redis_client, get_redis_client
from app.models.user import Role
from app.schemas.user import UserAdminUpdate
from app.services.user_service import UserService


async def set_admin(email: str) -> int:
    redis = await get_redis_client()
    cache = CacheStore(redis, default_ttl=settings.CACHE_TTL_SECONDS)
    try:
        async with AsyncSessionLocal() as db:
            users = UserService(db, cache)
            row = await users.get_user_by_email(email)
            if row is None:
                print(f"❌ {email} 계정을 찾을 수 없습니다.")
                print("   먼저 해당 이메일로 회원가입을 진행하세요.")
                return 1

            user = await users.admin_update_user(row.id, UserAdminUpdate(role=Role.ADMIN))
            print(f"✅ {user.email} ({user.username})을(를) 관리자로 설정했습니다!")
            print(f"   User ID: {user.id}")
            print("   기존 액세스 토큰은 만료 전까지 이전 역할을 유지합니다. 재발급(refresh) 후 반영됩니다.")
            return 0
    except AppError as e:
        print(f"❌ 오류 발생: {e.message}")
        return 1
    finally:
        await close_redis_client()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="사용자를 관리자로 승격")
    parser.add_argument("email")
    args = parser.parse_args()
    sys.exit(asyncio.run(set_admin(args.email)))
