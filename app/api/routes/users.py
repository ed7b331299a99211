"""사용자 관리 라우터 — 관리자 전용 사용자 CRUD 및 통계.

User Management Router — Admin-only user CRUD and statistics.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import DataResponse, ListResponse, MessageResponse
from app.schemas.dashboard import UserSummary
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=ListResponse[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ListResponse[UserResponse]:
    """전체 사용자 목록 (List all users)."""
    return ListResponse.of(await user_service.list_users(db, current_user))


# /stats는 /{user_id}보다 먼저 등록 — Registered before /{user_id}
@router.get("/stats", response_model=DataResponse[UserSummary])
async def get_user_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserSummary]:
    """사용자 통계 — 전체 및 역할별 (User counts, total and per role)."""
    return DataResponse(data=await user_service.get_summary(db, current_user))


@router.get("/{user_id}", response_model=DataResponse[UserResponse])
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserResponse]:
    """사용자 상세 정보 (Retrieve a user)."""
    return DataResponse(data=await user_service.get_user(db, user_id, current_user))


@router.post("", response_model=DataResponse[UserResponse], status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserResponse]:
    """사용자를 생성합니다 — 역할 지정 가능.

    Create a user with any role.
    """
    result: UserResponse = await user_service.create_user(db, data, current_user)
    await db.commit()
    return DataResponse(data=result)


@router.put("/{user_id}", response_model=DataResponse[UserResponse])
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserResponse]:
    """사용자 정보를 수정합니다 (Update a user)."""
    result: UserResponse = await user_service.update_user(db, user_id, data, current_user)
    await db.commit()
    return DataResponse(data=result)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    """사용자를 삭제합니다 — 매장 소유자는 매장 정리 후 삭제 가능.

    Delete a user. Refused with 409 while the user owns stores.
    """
    await user_service.delete_user(db, user_id, current_user)
    await db.commit()
    return MessageResponse(message="User deleted successfully")
