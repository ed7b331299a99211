"""대시보드 라우터 — 관리자 대시보드 집계 API.

Dashboard Router — Admin dashboard aggregation API.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import DataResponse
from app.schemas.dashboard import DashboardResponse
from app.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("/stats", response_model=DataResponse[DashboardResponse])
async def get_dashboard_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[DashboardResponse]:
    """대시보드 통계 — 수량, 역할별 사용자, 상위 매장, 최근 평점.

    Counts, users by role, top-rated stores and recent ratings. Admin only.
    """
    return DataResponse(data=await dashboard_service.get_stats(db, current_user))
