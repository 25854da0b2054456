"""
보안 관련 유틸리티

- 패스워드 해싱 (passlib)
- 액세스/리프레시 토큰 발급 및 검증 (python-jose, HS256)
- 요청 인증/인가 의존성 (쿠키 → Bearer 헤더 순서로 토큰 추출)
"""

import hmac
import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import (
    ForbiddenError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
    UnauthorizedError,
    WrongTokenTypeError,
)
from app.models.user import Role


# 패스워드 해싱 컨텍스트
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"
API_KEY_HEADER = "x-api-key"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """패스워드 검증"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # 알 수 없는 해시 포맷
        return False


def get_password_hash(password: str) -> str:
    """패스워드 해싱"""
    return pwd_context.hash(password)


class TokenKind(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    sub: str
    email: str
    role: Role
    iat: int
    exp: int
    token_type: TokenKind


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class Identity:
    """검증된 액세스 토큰에서 얻은 인증 주체. DB를 다시 조회하지 않는다."""
    id: str
    email: str
    role: Role

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "Identity":
        return cls(id=claims.sub, email=claims.email, role=claims.role)


class TokenService:
    """서명된 타입별 만료 토큰 발급/검증 (상태 없음)"""

    def __init__(
        self,
        secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
    ):
        self.secret = secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls) -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET_KEY,
            access_ttl=timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(minutes=settings.JWT_REFRESH_TOKEN_EXPIRE_MINUTES),
            algorithm=settings.JWT_ALGORITHM,
        )

    def ttl_for(self, kind: TokenKind) -> timedelta:
        return self.access_ttl if kind == TokenKind.ACCESS else self.refresh_ttl

    def issue(
        self,
        kind: TokenKind,
        subject: str,
        email: str,
        role: Role,
        now: Optional[datetime] = None,
    ) -> str:
        """토큰 발급. 만료 시각은 now + 종류별 TTL"""
        issued_at = now or datetime.now(timezone.utc)
        expire = issued_at + self.ttl_for(kind)
        to_encode = {
            "sub": subject,
            "email": email,
            "role": Role(role).value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
            "token_type": kind.value,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def issue_pair(self, subject: str, email: str, role: Role) -> TokenPair:
        now = datetime.now(timezone.utc)
        return TokenPair(
            access_token=self.issue(TokenKind.ACCESS, subject, email, role, now=now),
            refresh_token=self.issue(TokenKind.REFRESH, subject, email, role, now=now),
        )

    def verify(self, token: str) -> TokenClaims:
        """서명/만료 검증 후 클레임 반환"""
        try:
            jwt.get_unverified_claims(token)
        except JWTError:
            raise MalformedTokenError()

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise InvalidSignatureError()

        try:
            return TokenClaims(
                sub=str(payload["sub"]),
                email=str(payload["email"]),
                role=Role(payload["role"]),
                iat=int(payload["iat"]),
                exp=int(payload["exp"]),
                token_type=TokenKind(payload["token_type"]),
            )
        except (KeyError, ValueError, TypeError):
            raise MalformedTokenError()

    def _verify_kind(self, token: str, kind: TokenKind) -> TokenClaims:
        claims = self.verify(token)
        if claims.token_type != kind:
            raise WrongTokenTypeError()
        return claims

    def verify_access(self, token: str) -> TokenClaims:
        return self._verify_kind(token, TokenKind.ACCESS)

    def verify_refresh(self, token: str) -> TokenClaims:
        return self._verify_kind(token, TokenKind.REFRESH)


def get_token_service() -> TokenService:
    return TokenService.from_settings()


def extract_token(request: Request) -> str:
    """쿠키 우선, 없으면 Authorization: Bearer 헤더"""
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token

    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    raise UnauthorizedError()


async def get_current_identity(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> Identity:
    """현재 요청의 인증 주체"""
    token = extract_token(request)
    claims = token_service.verify_access(token)
    identity = Identity.from_claims(claims)
    request.state.identity = identity
    return identity


def require_role(required: Role):
    """보호된 작업 앞단에서 역할을 확인하는 의존성 생성"""

    async def _guard(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != required:
            raise ForbiddenError()
        return identity

    return _guard


require_admin = require_role(Role.ADMIN)


async def require_api_key(request: Request) -> None:
    """공개 조회 API용 고정 API 키 확인"""
    api_key = request.headers.get(API_KEY_HEADER)
    if not api_key or not hmac.compare_digest(api_key.encode(), settings.API_KEY.encode()):
        raise UnauthorizedError("유효하지 않은 API 키입니다.")
