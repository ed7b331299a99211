"""API 로깅 헬퍼 테스트 — 마스킹, 오류 메시지 추출, 호출자 식별.

API logging helper tests — masking, error message extraction and caller claims.
"""

import json

from starlette.requests import Request

from app.middleware.axiom_logging import caller_claims, error_message, mask_sensitive
from app.models.user import UserRole
from app.utils.jwt import create_access_token


def _request(authorization: str | None = None) -> Request:
    headers = [(b"authorization", authorization.encode())] if authorization else []
    return Request({"type": "http", "method": "GET", "path": "/api/stores", "headers": headers})


class TestMaskSensitive:
    """민감 필드 마스킹."""

    def test_masks_nested(self):
        data = {
            "email": "alice@test.com",
            "password": "secret123",
            "nested": {"current_password": "x", "new_password": "y", "name": "Alice"},
            "items": [{"access_token": "abc"}],
        }
        masked = mask_sensitive(data)
        assert masked["email"] == "alice@test.com"
        assert masked["password"] == "***"
        assert masked["nested"] == {"current_password": "***", "new_password": "***", "name": "Alice"}
        assert masked["items"] == [{"access_token": "***"}]

    def test_scalars_untouched(self):
        assert mask_sensitive("plain") == "plain"
        assert mask_sensitive(5) == 5


class TestErrorMessage:
    """오류 봉투 메시지 추출."""

    def test_envelope(self):
        body = json.dumps({"success": False, "message": "Store not found"}).encode()
        assert error_message(body) == "Store not found"

    def test_non_json(self):
        assert error_message(b"Internal Server Error") == "Internal Server Error"

    def test_truncated(self):
        body = json.dumps({"success": False, "message": "x" * 600}).encode()
        assert error_message(body) == "x" * 500 + "..."


class TestCallerClaims:
    """토큰에서 호출자 식별."""

    def test_anonymous(self):
        assert caller_claims(_request()) == {}

    def test_valid_token(self):
        token = create_access_token("user-1", UserRole.STORE_OWNER.value)
        assert caller_claims(_request(f"Bearer {token}")) == {"user_id": "user-1", "role": "store_owner"}

    def test_invalid_token(self):
        assert caller_claims(_request("Bearer nope")) == {}
