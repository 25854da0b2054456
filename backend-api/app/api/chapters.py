"""
회차 API 라우터
"""

from fastapi import APIRouter, Depends, status

from app.core.security import require_admin, require_api_key
from app.dependencies import get_chapter_service, get_pagination
from app.schemas.chapter import ChapterCreate, ChapterResponse, ChapterUpdate
from app.schemas.common import ApiResponse, Page, PaginationParams
from app.services.chapter_service import ChapterService

router = APIRouter()


@router.get("/chapters", response_model=Page[ChapterResponse], dependencies=[Depends(require_api_key)])
async def list_chapters(
    params: PaginationParams = Depends(get_pagination),
    service: ChapterService = Depends(get_chapter_service),
):
    return await service.list_chapters(params)


@router.get("/chapters/book/{book_id}", response_model=Page[ChapterResponse], dependencies=[Depends(require_api_key)])
async def list_book_chapters(
    book_id: str,
    params: PaginationParams = Depends(get_pagination),
    service: ChapterService = Depends(get_chapter_service),
):
    """특정 책의 회차 목록 (회차 번호 오름차순)"""
    return await service.list_book_chapters(book_id, params)


@router.get("/chapter/{chapter_id}", response_model=ApiResponse[ChapterResponse], dependencies=[Depends(require_api_key)])
async def get_chapter(chapter_id: str, service: ChapterService = Depends(get_chapter_service)):
    return ApiResponse(data=await service.get_chapter(chapter_id))


@router.post(
    "/chapter",
    response_model=ApiResponse[ChapterResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_chapter(payload: ChapterCreate, service: ChapterService = Depends(get_chapter_service)):
    chapter = await service.create_chapter(payload)
    return ApiResponse(message="회차가 등록되었습니다.", data=chapter)


@router.put("/chapter/{chapter_id}", response_model=ApiResponse[ChapterResponse], dependencies=[Depends(require_admin)])
async def update_chapter(chapter_id: str, payload: ChapterUpdate, service: ChapterService = Depends(get_chapter_service)):
    chapter = await service.update_chapter(chapter_id, payload)
    return ApiResponse(message="회차가 수정되었습니다.", data=chapter)


@router.delete("/chapter/{chapter_id}", response_model=ApiResponse[None], dependencies=[Depends(require_admin)])
async def delete_chapter(chapter_id: str, service: ChapterService = Depends(get_chapter_service)):
    await service.delete_chapter(chapter_id)
    return ApiResponse(message="회차가 삭제되었습니다.")
