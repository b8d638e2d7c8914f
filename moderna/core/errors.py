"""
Errores de dominio y su traducción a respuestas HTTP.

Cada error lleva una etiqueta estable (``kind``) que el cliente puede usar
para decidir qué hacer, sin depender del texto del mensaje.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Error base de la aplicación"""

    kind = "AppError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    kind = "ValidationError"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidKindError(ValidationError):
    kind = "InvalidKind"


class NotFoundError(AppError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class ProductNotFoundError(NotFoundError):
    kind = "ProductNotFound"


class InsufficientStockError(AppError):
    kind = "InsufficientStock"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransitionError(AppError):
    kind = "InvalidTransition"
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateError(AppError):
    kind = "Duplicate"
    status_code = status.HTTP_409_CONFLICT


class ConflictDuringCommitError(AppError):
    """La transacción no pudo confirmarse; el cliente puede reintentar"""

    kind = "ConflictDuringCommit"
    status_code = status.HTTP_409_CONFLICT


class DependencyUnavailableError(AppError):
    kind = "DependencyUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def error_body(kind: str, message: str) -> dict:
    return {
        "success": False,
        "error": {
            "kind": kind,
            "message": message,
        },
    }


def setup_exception_handlers(app: FastAPI):
    """Registrar los manejadores de errores de la aplicación"""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.kind}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.kind, exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        problems = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        message = "Datos inválidos: " + "; ".join(problems)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(ValidationError.kind, message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Error no controlado en {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("InternalError", "Error interno del servidor"),
        )
