"""전역 예외 핸들러.

모든 에러 응답을 {"error": "...", "error_code": "..."} 형식으로 통일한다.
- AppException 계열: 클래스에 정의된 status/code/message
- 요청 검증 실패 (FastAPI): 400
- 라우팅/HTTP 예외 (404, 405 등): 해당 status
- 그 외 처리되지 않은 예외: 500 INTERNAL_ERROR
main.py에서 register_exception_handlers(app)로 등록한다.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import AppException

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "UPLOAD_TOO_LARGE",
}


def _error(status_code: int, error_code: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "error_code": error_code},
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.error_code}: {exc}")
    return _error(exc.status_code, exc.error_code, exc.message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid {field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
    code = "INVALID_UPLOAD" if request.url.path == "/api/upload" else "INVALID_REQUEST"
    return _error(400, code, message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    return _error(exc.status_code, code, str(exc.detail), getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.bind(event="unhandled_error").exception(
        f"{request.method} {request.url.path} -> unhandled {type(exc).__name__}"
    )
    return _error(500, AppException.error_code, AppException.message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
