"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API call to Axiom: method, path, params,
masked request body, status code, duration, calling user and the error
message of failed calls. Credentials (password, token, ...) are masked.
"""

import json
import re
import time
from typing import Any

import jwt
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.utils.jwt import decode_access_token

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and params
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_ERROR_LEN = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


def error_message(body: bytes) -> str:
    """오류 응답 봉투에서 메시지 추출.

    Extract the message of an error envelope {"success": false, "message": ...};
    non-envelope bodies are logged raw, truncated.
    """
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_ERROR_LEN]

    message = data.get("message", data) if isinstance(data, dict) else data
    message = message if isinstance(message, str) else json.dumps(message)
    if len(message) > _MAX_ERROR_LEN:
        message = message[:_MAX_ERROR_LEN] + "..."
    return message


def caller_claims(request: Request) -> dict[str, str]:
    """베어러 토큰의 사용자 ID/역할 — 검증된 토큰만.

    User id and role from a verified bearer token, empty when the request is
    anonymous or the token does not verify.
    """
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return {}
    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError:
        return {}
    return {"user_id": str(payload.get("sub")), "role": str(payload.get("role"))}


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs every API call to Axiom. Without AXIOM_API_TOKEN and
    AXIOM_DATASET it is a pass-through.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        """요청 body 읽기 — JSON만 마스킹 후 기록 (Masked JSON body, if any)."""
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return mask_sensitive(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    def _ship(self, event: dict[str, Any]) -> None:
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            pass  # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break request on log failure

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS or not self._client:
            return await call_next(request)

        start_time = time.time()
        event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
            **caller_claims(request),
        }
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))

        request_body = await self._read_body(request)
        if request_body is not None:
            event["request_body"] = request_body

        try:
            response = await call_next(request)
            event["status_code"] = response.status_code

            # 에러 응답시 봉투에서 메시지 추출 후 body 재구성
            # Consume the error body for its message, then rebuild the response
            if response.status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = error_message(resp_body)
                response = Response(
                    content=resp_body,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            if request.path_params:
                event["path_params"] = dict(request.path_params)
            event["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            self._ship(event)

        return response
