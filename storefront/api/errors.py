# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.errors import ServiceError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_HTTP_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}

_INTERNAL_MESSAGES = {
    "/checkout/create": "Unexpected error creating checkout session.",
    "/checkout/webhook": "Unable to process webhook.",
    "/catalog/admin": "Unexpected catalog administration error.",
}


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=error_body("validation_error", details or "Invalid request."))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "http_error")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed."
    return JSONResponse(status_code=exc.status_code, content=error_body(code, message), headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # szczegoly tylko w logu, klient dostaje ogolny komunikat
    logger.exception(f"{request.method} {request.url.path} failed: {exc!r}")
    message = _INTERNAL_MESSAGES.get(request.url.path, "Unexpected server error.")
    return JSONResponse(status_code=500, content=error_body("internal_error", message))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
