"""
공통 응답/페이지네이션 스키마
"""

from pydantic import BaseModel, Field, field_validator, model_serializer
from typing import Generic, List, Optional, TypeVar

from app.core.config import settings

T = TypeVar("T")


def compute_total_pages(total_items: int, page_size: int) -> int:
    """ceil(total_items / page_size). 0건이면 0페이지"""
    if page_size <= 0:
        raise ValueError("page_size는 1 이상이어야 합니다")
    if total_items <= 0:
        return 0
    return (total_items + page_size - 1) // page_size


class PaginationParams(BaseModel):
    """목록 조회 파라미터"""
    page: int = Field(1, ge=1)
    page_size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)
    search: Optional[str] = None
    genres: Optional[str] = None  # 쉼표 구분, 대소문자 무시 (책 목록 전용)

    @field_validator("search", "genres")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class Page(BaseModel, Generic[T]):
    """페이지 응답 컨테이너"""
    data: List[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int


class ApiResponse(BaseModel, Generic[T]):
    """공통 성공 응답: 비어 있는 message/data 는 응답에서 생략"""
    message: Optional[str] = None
    data: Optional[T] = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler):
        body = handler(self)
        return {k: v for k, v in body.items() if v is not None}
