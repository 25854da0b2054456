"""
장르 모델 및 책-장르 연결 테이블
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base


class Genre(Base):
    __tablename__ = "genres"

    id = Column(String(36), primary_key=True)
    title = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # 관계
    books = relationship("Book", secondary="book_genres", back_populates="genres")

    def __repr__(self):
        return f"<Genre(id={self.id}, title={self.title})>"


class BookGenre(Base):
    __tablename__ = "book_genres"

    book_id = Column(String(36), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    genre_id = Column(String(36), ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True, index=True)

    __table_args__ = (
        UniqueConstraint('book_id', 'genre_id', name='uq_book_genre'),
    )
