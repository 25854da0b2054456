"""
회차 모델
"""

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base


class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(String(36), primary_key=True)
    book_id = Column(String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    chapter_num = Column(Integer, nullable=False)  # 1부터 시작하는 회차 번호
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint('book_id', 'chapter_num', name='uq_book_chapter_num'),
    )

    # 관계
    book = relationship("Book", back_populates="chapters")

    def __repr__(self):
        return f"<Chapter(book_id={self.book_id}, chapter_num={self.chapter_num})>"
