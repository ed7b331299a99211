"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router
for inclusion in the FastAPI application under /api.

Included routers:
    - auth: 인증 (Registration, login, profile, password)
    - users: 사용자 관리 (Admin user management)
    - stores: 매장 (Stores and store statistics)
    - ratings: 평점 (/stores/{store_id}/ratings and /ratings)
    - dashboard: 대시보드 (Admin dashboard aggregates)
"""

from fastapi import APIRouter

from app.api.routes.auth import router as auth_router
from app.api.routes.dashboard import router as dashboard_router
from app.api.routes.ratings import router as ratings_router
from app.api.routes.stores import router as stores_router
from app.api.routes.users import router as users_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(stores_router, prefix="/stores", tags=["Stores"])
# 평점: /stores/{store_id}/ratings 및 /ratings 하위 (nested under stores and standalone)
api_router.include_router(ratings_router, tags=["Ratings"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
