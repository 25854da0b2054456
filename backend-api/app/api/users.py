"""
사용자 관리 API 라우터 (관리자 전용)
"""

from fastapi import APIRouter, Depends

from app.core.security import require_admin
from app.dependencies import get_pagination, get_user_service
from app.schemas.common import ApiResponse, Page, PaginationParams
from app.schemas.user import UserAdminUpdate, UserResponse
from app.services.user_service import UserService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/users", response_model=Page[UserResponse])
async def list_users(
    params: PaginationParams = Depends(get_pagination),
    service: UserService = Depends(get_user_service),
):
    """사용자 목록 (사용자명 검색)"""
    return await service.list_users(params)


@router.get("/user/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return ApiResponse(data=await service.get_user(user_id))


@router.put("/user/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(user_id: str, payload: UserAdminUpdate, service: UserService = Depends(get_user_service)):
    user = await service.admin_update_user(user_id, payload)
    return ApiResponse(message="사용자 정보가 수정되었습니다.", data=user)


@router.delete("/user/{user_id}", response_model=ApiResponse[None])
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    await service.delete_user(user_id)
    return ApiResponse(message="사용자가 삭제되었습니다.")
