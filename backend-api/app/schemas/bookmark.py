from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime


class BookmarkCreate(BaseModel):
    book_id: str = Field(..., min_length=1, max_length=36)


class BookmarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    book_id: str
    created_at: datetime
