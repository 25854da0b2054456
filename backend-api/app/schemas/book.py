"""
책 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime

from app.models.book import BookStatus, BookLanguage


class BookBase(BaseModel):
    """책 기본 스키마"""
    title: str = Field(..., min_length=1, max_length=200)
    author: str = Field(..., min_length=1, max_length=200)
    cover: str = Field(..., max_length=500)
    description: str = Field(..., max_length=20000)
    asset: Optional[str] = Field(None, max_length=500)
    status: BookStatus = BookStatus.ONGOING
    language: BookLanguage = BookLanguage.KOREAN
    release_date: Optional[int] = Field(None, ge=0, le=9999)
    popular: bool = False


class BookCreate(BookBase):
    """책 생성 스키마. genres 는 장르 제목 목록"""
    genres: List[str] = Field(default_factory=list, max_length=20)


class BookUpdate(BaseModel):
    """책 부분 수정 스키마 (보낸 필드만 반영)"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    author: Optional[str] = Field(None, min_length=1, max_length=200)
    cover: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=20000)
    asset: Optional[str] = Field(None, max_length=500)
    status: Optional[BookStatus] = None
    language: Optional[BookLanguage] = None
    release_date: Optional[int] = Field(None, ge=0, le=9999)
    popular: Optional[bool] = None
    genres: Optional[List[str]] = Field(None, max_length=20)


class BookResponse(BookBase):
    """책 응답 스키마"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
    # 장르 제목 목록
    genres: List[str] = Field(default_factory=list)

    @field_validator("genres", mode="before")
    @classmethod
    def _genre_titles(cls, v):
        return [g if isinstance(g, str) else g.title for g in (v or [])]
