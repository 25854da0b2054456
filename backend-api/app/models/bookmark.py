"""
북마크 모델
"""
from sqlalchemy import Column, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base


class Bookmark(Base):
    """책 북마크 모델"""
    __tablename__ = "bookmarks"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="bookmarks")
    book = relationship("Book", back_populates="bookmarks")

    # 한 유저가 같은 책을 중복으로 북마크할 수 없도록 제약조건 설정
    __table_args__ = (UniqueConstraint('user_id', 'book_id', name='_user_book_bookmark_uc'),)

    def __repr__(self):
        return f"<Bookmark(user_id={self.user_id}, book_id={self.book_id})>"
