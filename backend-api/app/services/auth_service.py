"""
인증 서비스: 회원가입, 로그인, 토큰 재발급
"""

import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheStore
from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.core.security import Identity, TokenPair, TokenService, verify_password
from app.models.user import Role
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.user import UserResponse, UserUpdate
from app.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession, cache: CacheStore, tokens: TokenService):
        self.users = UserService(db, cache)
        self.tokens = tokens

    def _issue(self, user: UserResponse) -> TokenPair:
        return self.tokens.issue_pair(user.id, user.email, Role(user.role))

    async def register(self, data: RegisterRequest) -> Tuple[UserResponse, TokenPair]:
        if await self.users.email_exists(data.email):
            raise ConflictError("이미 등록된 이메일입니다.")
        if await self.users.username_exists(data.username):
            raise ConflictError("이미 사용 중인 사용자명입니다.")

        user = await self.users.create_user(data.email, data.username, data.password)
        logger.info(f"회원가입 완료: {user.id}")
        return user, self._issue(user)

    async def login(self, data: LoginRequest) -> Tuple[UserResponse, TokenPair]:
        row = await self.users.get_user_by_email(data.email)
        if row is None or not verify_password(data.password, row.hashed_password):
            raise UnauthorizedError("이메일 또는 비밀번호가 올바르지 않습니다.")
        user = UserResponse.model_validate(row)
        return user, self._issue(user)

    async def refresh(self, refresh_token: str) -> Tuple[UserResponse, TokenPair]:
        """리프레시 토큰으로 새 토큰 쌍 발급. 역할 변경은 여기서 반영된다."""
        claims = self.tokens.verify_refresh(refresh_token)
        try:
            user = await self.users.get_user(claims.sub)
        except NotFoundError:
            raise UnauthorizedError("사용자를 찾을 수 없습니다.")
        return user, self._issue(user)

    async def me(self, identity: Identity) -> UserResponse:
        return await self.users.get_user(identity.id)

    async def update_me(self, identity: Identity, data: UserUpdate) -> UserResponse:
        return await self.users.update_user(identity.id, data)
