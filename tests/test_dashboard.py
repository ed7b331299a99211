"""대시보드 API 테스트.

Dashboard API tests — admin-only cross-entity aggregates.
"""

import pytest
from httpx import AsyncClient

from app.models import UserRole
from tests.conftest import auth_header, create_rating, create_store, role_token

DASHBOARD = "/api/dashboard/stats"


class TestDashboard:
    """대시보드 통계 테스트."""

    async def test_counts_and_rankings(
        self, client: AsyncClient, db, admin_token, owner_user, other_owner, normal_user, other_user
    ):
        """수량, 역할별 사용자, 상위 매장, 최근 평점."""
        coffee = await create_store(db, owner_user, "Coffee Shop")
        deli = await create_store(db, other_owner, "Deli")
        await create_rating(db, normal_user, coffee, 3)
        await create_rating(db, other_user, coffee, 4)
        await create_rating(db, normal_user, deli, 5, "Best sandwiches")

        res = await client.get(DASHBOARD, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()["data"]

        assert data["counts"] == {
            "users": 5,
            "stores": 2,
            "ratings": 3,
            "users_by_role": {"admin": 1, "store_owner": 2, "normal_user": 2},
        }
        top = data["top_rated_stores"]
        assert [s["name"] for s in top] == ["Deli", "Coffee Shop"]
        assert top[0]["average_rating"] == 5
        assert top[1]["average_rating"] == 3.5
        assert top[1]["rating_count"] == 2
        assert top[0]["owner"]["name"] == "Carol"

        recent = data["recent_ratings"]
        assert len(recent) == 3
        assert recent[0]["comment"] == "Best sandwiches"
        assert recent[0]["store"]["name"] == "Deli"
        assert recent[0]["user"]["name"] == "Alice"

    async def test_empty_database(self, client: AsyncClient, admin_token):
        """관리자만 있는 빈 상태."""
        res = await client.get(DASHBOARD, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["counts"]["users"] == 1
        assert data["counts"]["users_by_role"] == {"admin": 1, "store_owner": 0, "normal_user": 0}
        assert data["top_rated_stores"] == []
        assert data["recent_ratings"] == []

    @pytest.mark.parametrize("role", [UserRole.STORE_OWNER, UserRole.NORMAL_USER])
    async def test_non_admin_forbidden(self, client: AsyncClient, db, role):
        token = await role_token(db, role)
        res = await client.get(DASHBOARD, headers=auth_header(token))
        assert res.status_code == 403
        assert res.json()["message"] == "Not authorized to access dashboard statistics"

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.get(DASHBOARD)
        assert res.status_code == 401
