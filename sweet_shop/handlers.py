import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sweet_shop.models.response import ApiResponse
from sweet_shop.services.errors import (
    InvalidCredentialsError,
    NotEnoughStockError,
    SweetNotFoundError,
    UserAlreadyExistsError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    SweetNotFoundError: status.HTTP_404_NOT_FOUND,
    NotEnoughStockError: status.HTTP_409_CONFLICT,
    UserAlreadyExistsError: status.HTTP_208_ALREADY_REPORTED,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
}

MESSAGE_BY_ERROR = {
    UserAlreadyExistsError: "User Already Exist !",
}

def _envelope(status_code: int, message: str, data=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(message=message, data=data).model_dump(mode="json"),
        headers=headers,
    )

def register_exception_handlers(app: FastAPI) -> None:
    for error_type, status_code in STATUS_BY_ERROR.items():
        message = MESSAGE_BY_ERROR.get(error_type)

        async def handle(request: Request, exc: Exception, status_code=status_code, message=message):
            return _envelope(status_code, message or str(exc))

        app.add_exception_handler(error_type, handle)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_validation(request: Request, exc: RequestValidationError):
        errors = {}
        for error in exc.errors():
            loc = error.get("loc") or ("body",)
            # malformed JSON reports a character offset as the last loc entry
            field = loc[-1] if isinstance(loc[-1], str) else "body"
            errors.setdefault(field, error["msg"])
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, f"An unexpected error occurred: {exc}"
        )
