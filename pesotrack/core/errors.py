from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from pesotrack.services.identity.errors import AuthProviderError, ProviderUnavailableError

logger = logging.getLogger("pesotrack.errors")


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "not_found",
                "detail": f"No route for {request.method} {request.url.path}",
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "http_error", "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def auth_provider_error_handler(request: Request, exc: AuthProviderError):  # type: ignore
    logger.info("identity provider rejected %s with %s", exc.operation, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "auth_error", "code": exc.code, "detail": exc.message},
    )


def provider_unavailable_handler(request: Request, exc: ProviderUnavailableError):  # type: ignore
    logger.warning("identity provider unavailable: %s", exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "auth_unavailable", "detail": exc.message},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
