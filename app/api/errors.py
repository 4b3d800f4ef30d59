import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import (
    LudoError,
    ValidationError,
    NotFoundError,
    AuthError,
    PermissionDeniedError,
    CsrfError,
    RateLimitError,
    StorageError,
    ConfigError
)

logger = logging.getLogger("ErrorHandlers")

# El orden importa: las subclases antes que sus bases
ERROR_STATUS = [
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (CsrfError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (RateLimitError, status.HTTP_429_TOO_MANY_REQUESTS),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ConfigError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

def status_for(exc: LudoError) -> int:
    for error_class, http_status in ERROR_STATUS:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR

def rate_limit_headers(exc: RateLimitError) -> dict:
    return {
        "X-RateLimit-Limit": str(exc.limit),
        "X-RateLimit-Remaining": str(exc.remaining),
        "X-RateLimit-Reset": str(exc.reset_time),
    }

def register_error_handlers(app: FastAPI):
    """
    Registra los manejadores globales de excepciones para la aplicación.
    Todas las respuestas de error tienen la forma {"error": mensaje}.
    """

    @app.exception_handler(LudoError)
    async def global_ludo_handler(request: Request, exc: LudoError):
        http_status = status_for(exc)

        if isinstance(exc, RateLimitError):
            return JSONResponse(
                status_code=http_status,
                content={"error": exc.message, "resetTime": exc.reset_time},
                headers=rate_limit_headers(exc),
            )

        if http_status >= 500:
            logger.error(f"{exc.__class__.__name__} en {request.url.path}: {exc.message}")
            # Los errores de configuración no se describen al cliente
            message = "Server configuration error" if isinstance(exc, ConfigError) else exc.message
            return JSONResponse(status_code=http_status, content={"error": message})

        return JSONResponse(status_code=http_status, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
            message = f"{field}: {first.get('msg')}" if field else first.get("msg")
        else:
            message = "Invalid request"
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Captura cualquier error no controlado para evitar fugas de información."""
        logger.error(f"Unhandled error: {str(exc)}", exc_info=True)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
