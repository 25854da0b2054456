"""
사용자 관련 서비스
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.cache import CacheStore
from app.core.exceptions import ConflictError
from app.core.security import get_password_hash
from app.models.user import User
from app.repositories.base import EntityRepository, EntitySpec, storage_errors
from app.repositories.invalidation import InvalidationPlan, InvalidationPolicy, WriteEvent
from app.schemas.common import Page, PaginationParams
from app.schemas.user import UserAdminUpdate, UserResponse, UserUpdate

USER_LIST_PREFIX = "users:list:"


async def _user_dependents(db: AsyncSession, event: WriteEvent, user: User) -> InvalidationPlan:
    plan = InvalidationPlan()
    if event == WriteEvent.DELETE:
        plan.add_prefixes(f"bookmarks:user:{user.id}:")
    return plan


USER_SPEC = EntitySpec(
    name="user",
    model=User,
    schema=UserResponse,
    list_prefix=USER_LIST_PREFIX,
    invalidation=InvalidationPolicy("user", USER_LIST_PREFIX, dependents=_user_dependents),
    search_column=User.username,
    order_by=(User.created_at.desc(),),
    delete_options=(selectinload(User.bookmarks),),
    not_found_message="사용자를 찾을 수 없습니다.",
)


class UserService:
    def __init__(self, db: AsyncSession, cache: CacheStore):
        self.db = db
        self.repo: EntityRepository[UserResponse] = EntityRepository(db, cache, USER_SPEC)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """이메일로 사용자 조회 (로그인용, 캐시 미사용)"""
        async with storage_errors(self.db, "사용자 조회"):
            result = await self.db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        async with storage_errors(self.db, "이메일 중복 확인"):
            result = await self.db.execute(select(User.id).where(User.email == email))
            return result.first() is not None

    async def user_exists(self, user_id: str) -> bool:
        async with storage_errors(self.db, "사용자 존재 확인"):
            result = await self.db.execute(select(User.id).where(User.id == user_id))
            return result.first() is not None

    async def username_exists(self, username: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        async with storage_errors(self.db, "사용자명 중복 확인"):
            result = await self.db.execute(stmt)
            return result.first() is not None

    async def create_user(self, email: str, username: str, password: str) -> UserResponse:
        """사용자 생성 (중복 확인은 호출자가 먼저 수행, 제약조건 위반은 409)"""
        return await self.repo.create({
            "email": email,
            "username": username,
            "hashed_password": get_password_hash(password),
        })

    async def list_users(self, params: PaginationParams) -> Page[UserResponse]:
        return await self.repo.list(params)

    async def get_user(self, user_id: str) -> UserResponse:
        return await self.repo.get(user_id)

    async def update_user(self, user_id: str, data: UserUpdate) -> UserResponse:
        """본인/관리자 공용 부분 수정. UserAdminUpdate 면 역할도 변경"""
        values = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if "username" in values and await self.username_exists(values["username"], exclude_id=user_id):
            raise ConflictError("이미 사용 중인 사용자명입니다.")
        password = values.pop("password", None)
        if password:
            values["hashed_password"] = get_password_hash(password)
        return await self.repo.update(user_id, values)

    async def admin_update_user(self, user_id: str, data: UserAdminUpdate) -> UserResponse:
        return await self.update_user(user_id, data)

    async def delete_user(self, user_id: str) -> UserResponse:
        return await self.repo.delete(user_id)
