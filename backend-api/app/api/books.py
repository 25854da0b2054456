"""
책 API 라우터
"""

from fastapi import APIRouter, Depends, status

from app.core.security import require_admin, require_api_key
from app.dependencies import get_book_service, get_pagination
from app.schemas.book import BookCreate, BookResponse, BookUpdate
from app.schemas.common import ApiResponse, Page, PaginationParams
from app.services.book_service import BookService

router = APIRouter()


@router.get("/books", response_model=Page[BookResponse], dependencies=[Depends(require_api_key)])
async def list_books(
    params: PaginationParams = Depends(get_pagination),
    service: BookService = Depends(get_book_service),
):
    """
    책 목록 조회
    - **search**: 제목 부분 일치 (대소문자 무시)
    - **genres**: 쉼표로 구분한 장르 제목, 하나라도 일치하면 포함
    """
    return await service.list_books(params)


@router.get("/book/{book_id}", response_model=ApiResponse[BookResponse], dependencies=[Depends(require_api_key)])
async def get_book(book_id: str, service: BookService = Depends(get_book_service)):
    return ApiResponse(data=await service.get_book(book_id))


@router.post(
    "/book",
    response_model=ApiResponse[BookResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_book(payload: BookCreate, service: BookService = Depends(get_book_service)):
    book = await service.create_book(payload)
    return ApiResponse(message="책이 등록되었습니다.", data=book)


@router.put("/book/{book_id}", response_model=ApiResponse[BookResponse], dependencies=[Depends(require_admin)])
async def update_book(book_id: str, payload: BookUpdate, service: BookService = Depends(get_book_service)):
    book = await service.update_book(book_id, payload)
    return ApiResponse(message="책이 수정되었습니다.", data=book)


@router.delete("/book/{book_id}", response_model=ApiResponse[None], dependencies=[Depends(require_admin)])
async def delete_book(book_id: str, service: BookService = Depends(get_book_service)):
    """책 삭제 (회차, 북마크, 장르 연결도 함께 삭제)"""
    await service.delete_book(book_id)
    return ApiResponse(message="책이 삭제되었습니다.")
