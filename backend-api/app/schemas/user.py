"""
사용자 관련 Pydantic 스키마
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime

from app.models.user import Role


class UserResponse(BaseModel):
    """사용자 응답 스키마 (패스워드 해시 제외)"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: EmailStr
    role: Role
    bio: Optional[str] = None
    profile_pic: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserUpdate(BaseModel):
    """본인 프로필 수정 스키마"""
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    bio: Optional[str] = Field(None, max_length=1000)
    profile_pic: Optional[str] = Field(None, max_length=500)


class UserAdminUpdate(UserUpdate):
    """관리자용 사용자 수정 스키마 (역할 변경 포함)"""
    role: Optional[Role] = None
