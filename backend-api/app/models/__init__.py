"""
모델 패키지
"""

from .user import User, Role
from .genre import Genre, BookGenre
from .book import Book, BookStatus, BookLanguage
from .chapter import Chapter
from .bookmark import Bookmark

__all__ = [
    "User",
    "Role",
    "Genre",
    "BookGenre",
    "Book",
    "BookStatus",
    "BookLanguage",
    "Chapter",
    "Bookmark",
]
