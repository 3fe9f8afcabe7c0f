from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storecms.api.public.router import router as public_router
from storecms.api.v1.router import api_router
from storecms.core.config import create_app
from storecms.core.errors import CMSError, error_envelope
from storecms.core.logging import configure_logging, request_id_var
from storecms.core.settings import settings
from storecms.middleware.request_id import RequestIdMiddleware

logger = logging.getLogger("storecms")

app = create_app()
configure_logging(settings.LOG_LEVEL)

app.add_middleware(RequestIdMiddleware)

_HTTP_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
}


def _request_id(request: Request) -> str | None:
    return (
        getattr(request.state, "request_id", None)
        or request.headers.get(settings.REQUEST_ID_HEADER)
        or request_id_var.get()
    )


def _envelope_response(request: Request, status_code: int, *, code: str, message: str,
                       details=None, headers=None) -> JSONResponse:
    request_id = _request_id(request)
    response = JSONResponse(
        status_code=status_code,
        content=error_envelope(code=code, message=message, request_id=request_id, details=details),
        headers=headers,
    )
    # 500s are rendered outside RequestIdMiddleware, so stamp the header here too
    if request_id and request_id != "-":
        response.headers[settings.REQUEST_ID_HEADER] = request_id
    return response


@app.exception_handler(CMSError)
async def cms_error_handler(request: Request, exc: CMSError):
    if exc.status_code >= 500:
        logger.error("cms error %s: %s", exc.code, exc.message, extra={"request_id": _request_id(request)})
    return _envelope_response(request, exc.status_code, code=exc.code, message=exc.message, details=exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
        details.append({"field": ".".join(loc) or "body", "message": err.get("msg", "invalid")})
    return _envelope_response(request, 400, code="validation_error", message="Request validation failed",
                              details=details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _envelope_response(
        request,
        exc.status_code,
        code=_HTTP_CODES.get(exc.status_code, "http_error"),
        message=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path,
                     extra={"request_id": _request_id(request)})
    return _envelope_response(request, 500, code="internal_error", message="Internal server error")


# Admin API
app.include_router(api_router, prefix=settings.API_V1_STR)

# Storefront read path
app.include_router(public_router, prefix=settings.PUBLIC_STR)
