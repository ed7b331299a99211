"""매장 API 테스트 — 공개 조회, 권한, 소유자 지정, 통계, 평점 집계.

Store API tests — Public browsing, permissions, owner assignment,
statistics and derived rating aggregates.
"""

import uuid

import pytest
from httpx import AsyncClient

from app.models import UserRole
from tests.conftest import auth_header, create_rating, create_store, role_token

STORES = "/api/stores"


# ===== Public browsing =====

class TestStoreBrowse:
    """공개 매장 조회 테스트."""

    async def test_list_public(self, client: AsyncClient, store):
        """토큰 없이 목록 조회, 평점 없는 매장은 0 / 0."""
        res = await client.get(STORES)
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["count"] == 1
        item = body["data"][0]
        assert item["name"] == "Coffee Shop"
        assert item["average_rating"] == 0
        assert item["rating_count"] == 0
        assert item["owner"]["name"] == "Bob"

    async def test_list_empty(self, client: AsyncClient):
        res = await client.get(STORES)
        assert res.status_code == 200
        assert res.json() == {"success": True, "count": 0, "data": []}

    async def test_list_aggregates(self, client: AsyncClient, db, store, normal_user, other_user):
        """평균 평점과 평점 수는 평점에서 계산."""
        await create_rating(db, normal_user, store, 5)
        await create_rating(db, other_user, store, 4)
        res = await client.get(STORES)
        item = res.json()["data"][0]
        assert item["average_rating"] == 4.5
        assert item["rating_count"] == 2

    async def test_list_newest_first(self, client: AsyncClient, db, owner_user):
        await create_store(db, owner_user, "First")
        await create_store(db, owner_user, "Second")
        res = await client.get(STORES)
        names = [s["name"] for s in res.json()["data"]]
        assert names == ["Second", "First"]

    async def test_detail_public(self, client: AsyncClient, db, store, normal_user):
        """상세 조회는 평점 목록과 작성자 포함."""
        await create_rating(db, normal_user, store, 3, "Okay coffee")
        res = await client.get(f"{STORES}/{store.id}")
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["id"] == str(store.id)
        assert data["owner_id"] == str(store.owner_id)
        assert data["average_rating"] == 3
        assert data["rating_count"] == 1
        assert len(data["ratings"]) == 1
        rating = data["ratings"][0]
        assert rating["comment"] == "Okay coffee"
        assert rating["user"]["name"] == "Alice"

    async def test_detail_not_found(self, client: AsyncClient):
        res = await client.get(f"{STORES}/{uuid.uuid4()}")
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "Store not found"}

    async def test_detail_malformed_id(self, client: AsyncClient):
        res = await client.get(f"{STORES}/not-a-uuid")
        assert res.status_code == 400

    async def test_public_endpoint_rejects_bad_token(self, client: AsyncClient, store):
        """공개 엔드포인트라도 잘못된 토큰은 401."""
        res = await client.get(STORES, headers=auth_header("garbage"))
        assert res.status_code == 401


# ===== Create =====

class TestStoreCreate:
    """매장 생성 테스트."""

    async def test_owner_creates_store(self, client: AsyncClient, owner_user, owner_token):
        """매장 소유자가 생성하면 본인이 소유자."""
        res = await client.post(STORES, headers=auth_header(owner_token), json={
            "name": "Bakery",
            "description": "Fresh bread",
            "address": "1 Flour St",
        })
        assert res.status_code == 201
        data = res.json()["data"]
        assert data["name"] == "Bakery"
        assert data["owner_id"] == str(owner_user.id)
        assert data["average_rating"] == 0
        assert data["rating_count"] == 0

    async def test_owner_id_of_self_ok(self, client: AsyncClient, owner_user, owner_token):
        res = await client.post(STORES, headers=auth_header(owner_token), json={
            "name": "Bakery",
            "owner_id": str(owner_user.id),
        })
        assert res.status_code == 201

    async def test_owner_cannot_assign_other_owner(self, client: AsyncClient, owner_token, other_owner):
        """비관리자는 다른 소유자 지정 불가."""
        res = await client.post(STORES, headers=auth_header(owner_token), json={
            "name": "Bakery",
            "owner_id": str(other_owner.id),
        })
        assert res.status_code == 403

    async def test_admin_assigns_owner(self, client: AsyncClient, admin_token, other_owner):
        res = await client.post(STORES, headers=auth_header(admin_token), json={
            "name": "Deli",
            "owner_id": str(other_owner.id),
        })
        assert res.status_code == 201
        assert res.json()["data"]["owner_id"] == str(other_owner.id)
        assert res.json()["data"]["owner"]["name"] == "Carol"

    async def test_admin_owns_by_default(self, client: AsyncClient, admin_user, admin_token):
        res = await client.post(STORES, headers=auth_header(admin_token), json={"name": "HQ Shop"})
        assert res.status_code == 201
        assert res.json()["data"]["owner_id"] == str(admin_user.id)

    async def test_admin_assigns_normal_user_rejected(self, client: AsyncClient, admin_token, normal_user):
        """일반 사용자는 소유자가 될 수 없음."""
        res = await client.post(STORES, headers=auth_header(admin_token), json={
            "name": "Deli",
            "owner_id": str(normal_user.id),
        })
        assert res.status_code == 400

    async def test_admin_assigns_unknown_owner(self, client: AsyncClient, admin_token):
        res = await client.post(STORES, headers=auth_header(admin_token), json={
            "name": "Deli",
            "owner_id": str(uuid.uuid4()),
        })
        assert res.status_code == 400

    async def test_admin_assigns_malformed_owner(self, client: AsyncClient, admin_token):
        res = await client.post(STORES, headers=auth_header(admin_token), json={
            "name": "Deli",
            "owner_id": "abc",
        })
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid owner_id"

    async def test_normal_user_forbidden(self, client: AsyncClient, user_token):
        res = await client.post(STORES, headers=auth_header(user_token), json={"name": "Nope"})
        assert res.status_code == 403
        assert res.json()["message"] == "Only store owners can create stores"

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.post(STORES, json={"name": "Nope"})
        assert res.status_code == 401

    async def test_missing_name(self, client: AsyncClient, owner_token):
        res = await client.post(STORES, headers=auth_header(owner_token), json={"address": "Somewhere"})
        assert res.status_code == 400


# ===== Update / Delete =====

class TestStoreUpdate:
    """매장 수정 테스트."""

    async def test_owner_updates(self, client: AsyncClient, store, owner_token):
        res = await client.put(f"{STORES}/{store.id}", headers=auth_header(owner_token), json={
            "name": "Coffee House",
        })
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["name"] == "Coffee House"
        assert data["address"] == "123 Main St"

    async def test_other_owner_forbidden(self, client: AsyncClient, store, other_owner_token):
        """다른 소유자는 403."""
        res = await client.put(f"{STORES}/{store.id}", headers=auth_header(other_owner_token), json={
            "name": "Hijacked",
        })
        assert res.status_code == 403

    async def test_admin_updates_any(self, client: AsyncClient, store, admin_token):
        res = await client.put(f"{STORES}/{store.id}", headers=auth_header(admin_token), json={
            "description": "Updated by admin",
        })
        assert res.status_code == 200
        assert res.json()["data"]["description"] == "Updated by admin"

    async def test_admin_reassigns_owner(self, client: AsyncClient, store, admin_token, other_owner):
        res = await client.put(f"{STORES}/{store.id}", headers=auth_header(admin_token), json={
            "owner_id": str(other_owner.id),
        })
        assert res.status_code == 200
        assert res.json()["data"]["owner_id"] == str(other_owner.id)
        assert res.json()["data"]["owner"]["name"] == "Carol"

    async def test_owner_cannot_reassign(self, client: AsyncClient, store, owner_token, other_owner):
        """소유자 변경은 관리자만."""
        res = await client.put(f"{STORES}/{store.id}", headers=auth_header(owner_token), json={
            "owner_id": str(other_owner.id),
        })
        assert res.status_code == 403

    async def test_null_name_ignored(self, client: AsyncClient, store, owner_token):
        res = await client.put(f"{STORES}/{store.id}", headers=auth_header(owner_token), json={"name": None})
        assert res.status_code == 200
        assert res.json()["data"]["name"] == "Coffee Shop"

    async def test_update_not_found(self, client: AsyncClient, owner_token):
        res = await client.put(f"{STORES}/{uuid.uuid4()}", headers=auth_header(owner_token), json={"name": "X"})
        assert res.status_code == 404


class TestStoreDelete:
    """매장 삭제 테스트."""

    async def test_owner_deletes_with_ratings(self, client: AsyncClient, db, store, owner_token, normal_user, user_token):
        """매장 삭제 시 평점도 삭제."""
        await create_rating(db, normal_user, store, 5)
        res = await client.delete(f"{STORES}/{store.id}", headers=auth_header(owner_token))
        assert res.status_code == 200
        assert res.json()["message"] == "Store deleted successfully"

        assert (await client.get(f"{STORES}/{store.id}")).status_code == 404
        mine = await client.get("/api/ratings/user", headers=auth_header(user_token))
        assert mine.json()["count"] == 0

    async def test_other_owner_forbidden(self, client: AsyncClient, store, other_owner_token):
        res = await client.delete(f"{STORES}/{store.id}", headers=auth_header(other_owner_token))
        assert res.status_code == 403

    async def test_normal_user_forbidden(self, client: AsyncClient, store, user_token):
        res = await client.delete(f"{STORES}/{store.id}", headers=auth_header(user_token))
        assert res.status_code == 403

    async def test_admin_deletes_any(self, client: AsyncClient, store, admin_token):
        res = await client.delete(f"{STORES}/{store.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

    async def test_delete_not_found(self, client: AsyncClient, admin_token):
        res = await client.delete(f"{STORES}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404


# ===== Owned / statistics =====

class TestOwnedStores:
    """내 매장 목록 테스트."""

    async def test_owned_only_mine(self, client: AsyncClient, db, store, owner_token, other_owner, normal_user):
        """본인 매장만 평점과 함께 반환."""
        await create_store(db, other_owner, "Carol's Deli")
        await create_rating(db, normal_user, store, 4, "Nice")
        res = await client.get(f"{STORES}/owned", headers=auth_header(owner_token))
        assert res.status_code == 200
        body = res.json()
        assert body["count"] == 1
        assert body["data"][0]["name"] == "Coffee Shop"
        assert body["data"][0]["rating_count"] == 1
        assert body["data"][0]["ratings"][0]["comment"] == "Nice"

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.NORMAL_USER])
    async def test_owned_forbidden_for_other_roles(self, client: AsyncClient, db, role):
        token = await role_token(db, role)
        res = await client.get(f"{STORES}/owned", headers=auth_header(token))
        assert res.status_code == 403


class TestStoreStats:
    """매장 통계 테스트."""

    async def test_store_stats(self, client: AsyncClient, db, store, owner_token, normal_user, other_user):
        """매장별 통계 — 수, 평균, 분포, 최근 평점."""
        await create_rating(db, normal_user, store, 5)
        await create_rating(db, other_user, store, 2)
        res = await client.get(f"{STORES}/{store.id}/stats", headers=auth_header(owner_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["store"]["name"] == "Coffee Shop"
        stats = data["stats"]
        assert stats["rating_count"] == 2
        assert stats["average_rating"] == 3.5
        assert stats["rating_distribution"] == [
            {"score": 5, "count": 1},
            {"score": 4, "count": 0},
            {"score": 3, "count": 0},
            {"score": 2, "count": 1},
            {"score": 1, "count": 0},
        ]
        assert len(stats["recent_ratings"]) == 2

    async def test_store_stats_empty(self, client: AsyncClient, store, admin_token):
        res = await client.get(f"{STORES}/{store.id}/stats", headers=auth_header(admin_token))
        assert res.status_code == 200
        stats = res.json()["data"]["stats"]
        assert stats["rating_count"] == 0
        assert stats["average_rating"] == 0
        assert all(bucket["count"] == 0 for bucket in stats["rating_distribution"])

    async def test_store_stats_other_owner_forbidden(self, client: AsyncClient, store, other_owner_token):
        res = await client.get(f"{STORES}/{store.id}/stats", headers=auth_header(other_owner_token))
        assert res.status_code == 403

    async def test_summary_top_rated(self, client: AsyncClient, db, owner_user, admin_token, normal_user):
        """상위 매장은 평균 평점 내림차순."""
        low = await create_store(db, owner_user, "Low")
        high = await create_store(db, owner_user, "High")
        await create_store(db, owner_user, "Unrated")
        await create_rating(db, normal_user, low, 2)
        await create_rating(db, normal_user, high, 5)

        res = await client.get(f"{STORES}/stats", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["count"] == 3
        assert [s["name"] for s in data["top_rated"]] == ["High", "Low", "Unrated"]
        assert data["top_rated"][0]["average_rating"] == 5
        assert data["top_rated"][2]["rating_count"] == 0

    async def test_summary_forbidden(self, client: AsyncClient, owner_token):
        res = await client.get(f"{STORES}/stats", headers=auth_header(owner_token))
        assert res.status_code == 403
