"""
인증 관련 API 라우터
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status

from app.core.exceptions import UnauthorizedError
from app.core.config import settings
from app.core.security import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    Identity,
    TokenKind,
    TokenPair,
    TokenService,
    get_current_identity,
)
from app.dependencies import get_auth_service
from app.schemas.auth import AuthData, LoginRequest, RefreshTokenRequest, RegisterRequest
from app.schemas.common import ApiResponse
from app.schemas.user import UserResponse, UserUpdate
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )


def set_auth_cookies(response: Response, pair: TokenPair, tokens: TokenService) -> None:
    """토큰 수명과 같은 max-age 로 HttpOnly 쿠키 설정"""
    access_age = int(tokens.ttl_for(TokenKind.ACCESS).total_seconds())
    refresh_age = int(tokens.ttl_for(TokenKind.REFRESH).total_seconds())
    _set_cookie(response, ACCESS_TOKEN_COOKIE, pair.access_token, access_age)
    _set_cookie(response, REFRESH_TOKEN_COOKIE, pair.refresh_token, refresh_age)


def clear_auth_cookies(response: Response) -> None:
    _set_cookie(response, ACCESS_TOKEN_COOKIE, "", 0)
    _set_cookie(response, REFRESH_TOKEN_COOKIE, "", 0)


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """사용자 회원가입 (가입 즉시 로그인 쿠키 발급)"""
    user, pair = await auth.register(payload)
    set_auth_cookies(response, pair, auth.tokens)
    return ApiResponse(message="회원가입이 완료되었습니다.", data=AuthData(user=user))


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    payload: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """이메일/비밀번호 로그인"""
    user, pair = await auth.login(payload)
    set_auth_cookies(response, pair, auth.tokens)
    logger.info(f"로그인 성공: {user.id}")
    return ApiResponse(message="로그인되었습니다.", data=AuthData(user=user))


@router.post("/refresh", response_model=ApiResponse[AuthData])
async def refresh(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = Body(None),
    auth: AuthService = Depends(get_auth_service),
):
    """
    토큰 재발급

    refresh_token 쿠키를 우선 사용하고, 없으면 본문의 refresh_token 을 사용한다.
    만료된 액세스 토큰만 가진 상태에서도 호출할 수 있어야 하므로 액세스 토큰은 요구하지 않는다.
    """
    token = request.cookies.get(REFRESH_TOKEN_COOKIE) or (payload.refresh_token if payload else None)
    if not token:
        raise UnauthorizedError("리프레시 토큰이 없습니다.")
    user, pair = await auth.refresh(token)
    set_auth_cookies(response, pair, auth.tokens)
    return ApiResponse(message="토큰이 재발급되었습니다.", data=AuthData(user=user))


@router.post("/logout", response_model=ApiResponse[None])
async def logout(response: Response):
    """로그아웃: 서버에 토큰 상태가 없으므로 쿠키만 비운다"""
    clear_auth_cookies(response)
    return ApiResponse(message="로그아웃되었습니다.")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def read_me(
    identity: Identity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    return ApiResponse(data=await auth.me(identity))


@router.put("/me", response_model=ApiResponse[UserResponse])
async def update_me(
    payload: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    """내 프로필 수정 (보낸 필드만 반영)"""
    user = await auth.update_me(identity, payload)
    return ApiResponse(message="프로필이 수정되었습니다.", data=user)
