"""
사용자 모델
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base


class Role(str, enum.Enum):
    """사용자 역할"""
    USER = "User"
    ADMIN = "Admin"


class User(Base):
    """사용자 모델"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    bio = Column(String(1000))
    profile_pic = Column(String(500))
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # 관계 설정
    bookmarks = relationship("Bookmark", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, username={self.username})>"
