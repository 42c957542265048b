from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from loguru import logger
from pymongo.errors import PyMongoError
from starlette.responses import Response


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


class CustomBaseError(Exception):
    """Base class for errors that map straight onto an HTTP response."""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class InvalidIdError(CustomBaseError):
    def __init__(self, message: str = 'Invalid id') -> None:
        super().__init__(message, 400)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


async def custom_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc), 500)
    return PlainTextResponse(error.message, status_code=error.status_code)


def _describe(error: dict) -> str:
    location = '.'.join(str(part) for part in error.get('loc', ()) if part != 'body')
    return f'{location}: {error.get("msg")}' if location else str(error.get('msg'))


async def validation_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    message = '; '.join(_describe(e) for e in errors) or 'Invalid request'
    return PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)


async def database_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.opt(exception=exc).error(f'Database error on {request.method} {request.url.path}')
    return PlainTextResponse('Database error', status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def general_500_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.opt(exception=exc).error(f'Unhandled error on {request.method} {request.url.path}')
    return PlainTextResponse(
        'Internal server error', status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    RequestValidationError: validation_error_handler,
    PyMongoError: database_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
