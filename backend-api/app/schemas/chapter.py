"""
회차 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class ChapterBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    content: str = Field(..., min_length=1)
    chapter_num: int = Field(..., ge=1)


class ChapterCreate(ChapterBase):
    book_id: str = Field(..., min_length=1, max_length=36)


class ChapterUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    content: Optional[str] = Field(None, min_length=1)
    chapter_num: Optional[int] = Field(None, ge=1)


class ChapterResponse(ChapterBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    book_id: str
    created_at: datetime
    updated_at: datetime
