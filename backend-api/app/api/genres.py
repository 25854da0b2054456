"""
장르 API 라우터

조회는 API 키, 생성/수정/삭제는 관리자 권한이 필요하다.
"""

from fastapi import APIRouter, Depends, status

from app.core.security import require_admin, require_api_key
from app.dependencies import get_genre_service, get_pagination
from app.schemas.common import ApiResponse, Page, PaginationParams
from app.schemas.genre import GenreCreate, GenreResponse, GenreUpdate
from app.services.genre_service import GenreService

router = APIRouter()


@router.get("/genres", response_model=Page[GenreResponse], dependencies=[Depends(require_api_key)])
async def list_genres(
    params: PaginationParams = Depends(get_pagination),
    service: GenreService = Depends(get_genre_service),
):
    return await service.list_genres(params)


@router.get("/genre/{genre_id}", response_model=ApiResponse[GenreResponse], dependencies=[Depends(require_api_key)])
async def get_genre(genre_id: str, service: GenreService = Depends(get_genre_service)):
    return ApiResponse(data=await service.get_genre(genre_id))


@router.post(
    "/genre",
    response_model=ApiResponse[GenreResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_genre(payload: GenreCreate, service: GenreService = Depends(get_genre_service)):
    genre = await service.create_genre(payload)
    return ApiResponse(message="장르가 생성되었습니다.", data=genre)


@router.put("/genre/{genre_id}", response_model=ApiResponse[GenreResponse], dependencies=[Depends(require_admin)])
async def update_genre(genre_id: str, payload: GenreUpdate, service: GenreService = Depends(get_genre_service)):
    genre = await service.update_genre(genre_id, payload)
    return ApiResponse(message="장르가 수정되었습니다.", data=genre)


@router.delete("/genre/{genre_id}", response_model=ApiResponse[None], dependencies=[Depends(require_admin)])
async def delete_genre(genre_id: str, service: GenreService = Depends(get_genre_service)):
    await service.delete_genre(genre_id)
    return ApiResponse(message="장르가 삭제되었습니다.")
