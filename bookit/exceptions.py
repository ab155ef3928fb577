"""Domain errors and their FastAPI handlers."""

from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class DomainError(Exception):
    """Base domain error with customizable message and status code."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(DomainError):
    """Missing or malformed request data (400)."""

    def __init__(self, message: str):
        super().__init__(message, 400)


class AuthenticationError(DomainError):
    def __init__(self, message: str):
        super().__init__(message, 401)


class AuthorizationError(DomainError):
    """Caller may not perform this action (403)."""

    def __init__(self, message: str):
        super().__init__(message, 403)


class NotFoundError(DomainError):
    def __init__(self, message: str):
        super().__init__(message, 404)


class ConflictError(DomainError):
    """Booking overlap or concurrent modification (409)."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        self.details = details
        super().__init__(message, 409)


class StorageError(Exception):
    """The document store rejected or failed an operation."""


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.error(f'Domain error on {request.method} {request.url.path}: {exc.message}')
    content: Dict[str, Any] = {'error': exc.message}
    details = getattr(exc, 'details', None)
    if details:
        content['details'] = details
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.error(f'Invalid request on {request.url.path}: {errors}')
    details = [
        {'field': '.'.join(str(part) for part in err.get('loc', ())), 'reason': err.get('msg', '')}
        for err in errors
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'error': 'Invalid request', 'details': details},
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f'Unhandled exception: {str(exc)}')
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'error': 'Internal server error'},
    )


EXCEPTION_HANDLERS = {
    DomainError: domain_error_handler,
    RequestValidationError: request_validation_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app):
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
