"""
Pydantic 스키마 패키지
"""

from .common import ApiResponse, Page, PaginationParams, compute_total_pages
from .auth import RegisterRequest, LoginRequest, RefreshTokenRequest, AuthData
from .user import UserResponse, UserUpdate, UserAdminUpdate
from .genre import GenreCreate, GenreUpdate, GenreResponse
from .book import BookCreate, BookUpdate, BookResponse
from .chapter import ChapterCreate, ChapterUpdate, ChapterResponse
from .bookmark import BookmarkCreate, BookmarkResponse

__all__ = [
    "ApiResponse",
    "Page",
    "PaginationParams",
    "compute_total_pages",
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "AuthData",
    "UserResponse",
    "UserUpdate",
    "UserAdminUpdate",
    "GenreCreate",
    "GenreUpdate",
    "GenreResponse",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "ChapterCreate",
    "ChapterUpdate",
    "ChapterResponse",
    "BookmarkCreate",
    "BookmarkResponse",
]
