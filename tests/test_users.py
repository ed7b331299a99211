"""사용자 관리 API 테스트 — 관리자 CRUD, 권한, 통계, 삭제 충돌.

User management API tests — Admin CRUD, permissions, statistics and the
delete-while-owning-stores conflict.
"""

import uuid

import pytest
from httpx import AsyncClient

from app.models import UserRole
from app.repositories.store_repository import store_repository
from app.repositories.user_repository import user_repository
from app.services.authorization_service import OWNS_STORES_MESSAGE
from tests.conftest import auth_header, create_rating, role_token

USERS = "/api/users"


class TestUserList:
    """사용자 목록 테스트."""

    async def test_admin_lists_users(self, client: AsyncClient, admin_token, normal_user, owner_user):
        """관리자는 전체 사용자 목록 조회."""
        res = await client.get(USERS, headers=auth_header(admin_token))
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["count"] == 3
        emails = {u["email"] for u in body["data"]}
        assert emails == {"admin@test.com", "alice@test.com", "bob@test.com"}
        assert all("password_hash" not in u for u in body["data"])

    @pytest.mark.parametrize("role", [UserRole.STORE_OWNER, UserRole.NORMAL_USER])
    async def test_non_admin_forbidden(self, client: AsyncClient, db, role):
        """관리자가 아니면 403."""
        token = await role_token(db, role)
        res = await client.get(USERS, headers=auth_header(token))
        assert res.status_code == 403
        assert res.json()["message"] == "Not authorized to view all users"

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.get(USERS)
        assert res.status_code == 401


class TestUserDetail:
    """사용자 상세 테스트."""

    async def test_get_user(self, client: AsyncClient, admin_token, normal_user):
        res = await client.get(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["name"] == "Alice"
        assert data["role"] == "normal_user"

    async def test_get_user_not_found(self, client: AsyncClient, admin_token):
        """없는 사용자는 404."""
        res = await client.get(f"{USERS}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404
        assert res.json()["message"] == "User not found"

    async def test_get_user_malformed_id(self, client: AsyncClient, admin_token):
        """UUID가 아닌 ID는 400."""
        res = await client.get(f"{USERS}/not-a-uuid", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_get_user_forbidden(self, client: AsyncClient, user_token, owner_user):
        res = await client.get(f"{USERS}/{owner_user.id}", headers=auth_header(user_token))
        assert res.status_code == 403


class TestUserCreate:
    """사용자 생성 테스트."""

    async def test_admin_creates_admin(self, client: AsyncClient, admin_token):
        """관리자는 임의 역할 지정 가능."""
        res = await client.post(USERS, headers=auth_header(admin_token), json={
            "name": "Second Admin",
            "email": "admin2@test.com",
            "password": "secret123",
            "role": "admin",
        })
        assert res.status_code == 201
        assert res.json()["data"]["role"] == "admin"

    async def test_default_role(self, client: AsyncClient, admin_token):
        res = await client.post(USERS, headers=auth_header(admin_token), json={
            "name": "Plain",
            "email": "plain@test.com",
            "password": "secret123",
        })
        assert res.status_code == 201
        assert res.json()["data"]["role"] == "normal_user"

    async def test_duplicate_email(self, client: AsyncClient, admin_token, normal_user):
        res = await client.post(USERS, headers=auth_header(admin_token), json={
            "name": "Alice Clone",
            "email": "alice@test.com",
            "password": "secret123",
        })
        assert res.status_code == 409

    async def test_invalid_role(self, client: AsyncClient, admin_token):
        """알 수 없는 역할은 400."""
        res = await client.post(USERS, headers=auth_header(admin_token), json={
            "name": "Weird",
            "email": "weird@test.com",
            "password": "secret123",
            "role": "superuser",
        })
        assert res.status_code == 400

    async def test_invalid_email(self, client: AsyncClient, admin_token):
        res = await client.post(USERS, headers=auth_header(admin_token), json={
            "name": "Bad",
            "email": "a,b@c.com",
            "password": "secret123",
        })
        assert res.status_code == 400

    async def test_duplicate_email_past_precheck(self, client: AsyncClient, admin_token, normal_user, monkeypatch):
        """사전 검사를 우회해도 unique 제약이 409로 막음."""
        async def _never_exists(*args, **kwargs):
            return False

        monkeypatch.setattr(user_repository, "exists", _never_exists)
        res = await client.post(USERS, headers=auth_header(admin_token), json={
            "name": "Alice Clone",
            "email": "alice@test.com",
            "password": "secret123",
        })
        assert res.status_code == 409
        assert res.json() == {"success": False, "message": "Email already registered"}

    async def test_non_admin_cannot_create(self, client: AsyncClient, owner_token):
        res = await client.post(USERS, headers=auth_header(owner_token), json={
            "name": "Sneaky",
            "email": "sneaky@test.com",
            "password": "secret123",
            "role": "admin",
        })
        assert res.status_code == 403


class TestUserUpdate:
    """사용자 수정 테스트."""

    async def test_update_name_and_role(self, client: AsyncClient, admin_token, normal_user):
        res = await client.put(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token), json={
            "name": "Alice Owner",
            "role": "store_owner",
        })
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["name"] == "Alice Owner"
        assert data["role"] == "store_owner"
        assert data["email"] == "alice@test.com"

    async def test_update_password_rehashed(self, client: AsyncClient, admin_token, normal_user):
        """새 비밀번호로 로그인 가능."""
        res = await client.put(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token), json={
            "password": "reset999",
        })
        assert res.status_code == 200
        login = await client.post("/api/auth/login", json={"email": "alice@test.com", "password": "reset999"})
        assert login.status_code == 200

    async def test_update_email_in_use(self, client: AsyncClient, admin_token, normal_user, owner_user):
        """다른 사용자의 이메일로 변경 시 409."""
        res = await client.put(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token), json={
            "email": "bob@test.com",
        })
        assert res.status_code == 409
        assert res.json()["message"] == "Email already in use"

    async def test_update_email_in_use_past_precheck(
        self, client: AsyncClient, admin_token, normal_user, owner_user, monkeypatch
    ):
        async def _never_exists(*args, **kwargs):
            return False

        monkeypatch.setattr(user_repository, "exists", _never_exists)
        res = await client.put(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token), json={
            "email": "bob@test.com",
        })
        assert res.status_code == 409
        assert res.json() == {"success": False, "message": "Email already in use"}

    async def test_update_invalid_email(self, client: AsyncClient, admin_token, normal_user):
        res = await client.put(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token), json={
            "email": "a@b..com",
        })
        assert res.status_code == 400

    async def test_update_same_email_ok(self, client: AsyncClient, admin_token, normal_user):
        res = await client.put(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token), json={
            "email": "alice@test.com",
        })
        assert res.status_code == 200

    async def test_update_not_found(self, client: AsyncClient, admin_token):
        res = await client.put(f"{USERS}/{uuid.uuid4()}", headers=auth_header(admin_token), json={"name": "X"})
        assert res.status_code == 404

    async def test_update_forbidden(self, client: AsyncClient, user_token, normal_user):
        """일반 사용자는 자기 자신도 수정 불가."""
        res = await client.put(f"{USERS}/{normal_user.id}", headers=auth_header(user_token), json={"role": "admin"})
        assert res.status_code == 403


class TestUserDelete:
    """사용자 삭제 테스트."""

    async def test_delete_user_cascades_ratings(self, client: AsyncClient, db, admin_token, normal_user, store):
        """사용자 삭제 시 평점도 삭제."""
        await create_rating(db, normal_user, store, 4)
        res = await client.delete(f"{USERS}/{normal_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["message"] == "User deleted successfully"

        detail = await client.get(f"/api/stores/{store.id}")
        assert detail.json()["data"]["rating_count"] == 0
        assert detail.json()["data"]["ratings"] == []

    async def test_delete_owner_with_stores_conflict(self, client: AsyncClient, admin_token, owner_user, store):
        """매장을 소유한 사용자 삭제는 409, 매장 삭제 후에는 성공."""
        res = await client.delete(f"{USERS}/{owner_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 409
        assert "owns stores" in res.json()["message"]

        res = await client.delete(f"/api/stores/{store.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        res = await client.delete(f"{USERS}/{owner_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

    async def test_delete_owner_past_store_count(
        self, client: AsyncClient, admin_token, owner_user, store, monkeypatch
    ):
        """소유 매장 수 검사를 우회해도 RESTRICT 외래 키가 409로 막음."""
        async def _no_stores(*args, **kwargs):
            return 0

        monkeypatch.setattr(store_repository, "count", _no_stores)
        res = await client.delete(f"{USERS}/{owner_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 409
        assert res.json() == {"success": False, "message": OWNS_STORES_MESSAGE}

    async def test_delete_not_found(self, client: AsyncClient, admin_token):
        res = await client.delete(f"{USERS}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404

    @pytest.mark.parametrize("role", [UserRole.STORE_OWNER, UserRole.NORMAL_USER])
    async def test_delete_forbidden(self, client: AsyncClient, db, other_user, role):
        """관리자가 아니면 어떤 사용자도 삭제 불가."""
        token = await role_token(db, role)
        res = await client.delete(f"{USERS}/{other_user.id}", headers=auth_header(token))
        assert res.status_code == 403


class TestUserStats:
    """사용자 통계 테스트."""

    async def test_stats(self, client: AsyncClient, admin_token, owner_user, other_owner, normal_user):
        res = await client.get(f"{USERS}/stats", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data == {
            "count": 4,
            "admin_count": 1,
            "store_owner_count": 2,
            "normal_user_count": 1,
        }

    async def test_stats_forbidden(self, client: AsyncClient, owner_token):
        res = await client.get(f"{USERS}/stats", headers=auth_header(owner_token))
        assert res.status_code == 403
