"""
북마크 API 라우터 (로그인 사용자)
"""

from fastapi import APIRouter, Depends, status

from app.core.security import Identity, get_current_identity
from app.dependencies import get_bookmark_service, get_pagination
from app.schemas.bookmark import BookmarkCreate, BookmarkResponse
from app.schemas.common import ApiResponse, Page, PaginationParams
from app.services.bookmark_service import BookmarkService

router = APIRouter()


@router.get("/bookmarks", response_model=Page[BookmarkResponse])
async def list_my_bookmarks(
    params: PaginationParams = Depends(get_pagination),
    identity: Identity = Depends(get_current_identity),
    service: BookmarkService = Depends(get_bookmark_service),
):
    return await service.list_bookmarks(identity.id, params)


@router.post("/bookmark", response_model=ApiResponse[BookmarkResponse], status_code=status.HTTP_201_CREATED)
async def add_bookmark(
    payload: BookmarkCreate,
    identity: Identity = Depends(get_current_identity),
    service: BookmarkService = Depends(get_bookmark_service),
):
    bookmark = await service.add_bookmark(identity.id, payload.book_id)
    return ApiResponse(message="북마크에 추가되었습니다.", data=bookmark)


@router.delete("/bookmark/{book_id}", response_model=ApiResponse[None])
async def remove_bookmark(
    book_id: str,
    identity: Identity = Depends(get_current_identity),
    service: BookmarkService = Depends(get_bookmark_service),
):
    await service.remove_bookmark(identity.id, book_id)
    return ApiResponse(message="북마크가 해제되었습니다.")
