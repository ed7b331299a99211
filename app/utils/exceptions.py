"""커스텀 HTTP 예외 클래스 및 응답 봉투 핸들러 모듈.

Custom HTTP exception classes and envelope exception handlers.
Services raise these pre-configured HTTPException subclasses; the handlers
registered by register_exception_handlers() render every failure as
{"success": false, "message": "..."} so clients see one response shape.

Usage:
    from app.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("Store not found")
    raise DuplicateError("You have already rated this store")
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a requested user, store, or rating id does not resolve.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 또는 상태 충돌 시 사용.

    409 Conflict exception.
    Raised for duplicate emails, duplicate ratings, and deleting a user
    who still owns stores.
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Raised when the authenticated actor's role or ownership does not permit
    the requested action.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when the bearer token is missing, malformed, expired, or badly
    signed, and when login credentials do not match.
    """

    def __init__(self, detail: str = "Not authorized to access this route") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    Raised for business-rule validation failures that Pydantic cannot catch
    (e.g. assigning a store to a normal_user).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _error_body(message: str) -> dict[str, bool | str]:
    return {"success": False, "message": message}


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTPException → 오류 봉투 (Render HTTPException as error envelope)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 실패 → 400 (Malformed input is reported as 400 with the first error)."""
    errors = exc.errors()
    message = "Invalid request data"
    if errors:
        first = errors[0]
        # loc 첫 요소는 "body"/"query"/"path" — 필드 경로만 표시 (Show field path only)
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(message))


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상치 못한 오류 → 500. 내부 상세는 응답에 포함하지 않음.

    Unexpected failures become a generic 500; detail is recorded by the
    logging middleware, never returned to the caller.
    """
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """애플리케이션에 봉투 예외 핸들러를 등록합니다.

    Register envelope-rendering exception handlers on the application.
    """
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
