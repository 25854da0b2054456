"""
책(작품) 모델
"""

from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base


class BookStatus(str, enum.Enum):
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    DROP = "Drop"


class BookLanguage(str, enum.Enum):
    ENGLISH = "English"
    JAPANESE = "Japanese"
    KOREAN = "Korean"


class Book(Base):
    """책 모델"""
    __tablename__ = "books"

    id = Column(String(36), primary_key=True)
    title = Column(String(200), nullable=False, index=True)
    author = Column(String(200), nullable=False)
    cover = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    asset = Column(String(500))
    status = Column(String(20), nullable=False, default=BookStatus.ONGOING.value)
    language = Column(String(20), nullable=False, default=BookLanguage.KOREAN.value)
    release_date = Column(Integer)  # 출간 연도
    popular = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # 관계 설정
    genres = relationship("Genre", secondary="book_genres", back_populates="books", order_by="Genre.title")
    chapters = relationship("Chapter", back_populates="book", cascade="all, delete-orphan")
    bookmarks = relationship("Bookmark", back_populates="book", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Book(id={self.id}, title={self.title})>"
