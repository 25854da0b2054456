"""
인증 관련 Pydantic 스키마
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from app.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class LoginRequest(BaseModel):
    """로그인 요청 스키마"""
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    """리프레시 토큰 요청 스키마 (쿠키가 없을 때만 사용)"""
    refresh_token: Optional[str] = None


class AuthData(BaseModel):
    """토큰은 쿠키로만 전달하고 본문에는 사용자만 담는다"""
    user: UserResponse
