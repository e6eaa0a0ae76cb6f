"""Map marketplace errors onto HTTP responses.

Protean's handlers cover its base exceptions; the marketplace error kinds
are registered explicitly so each keeps a fixed status code and a
``{"error": ...}`` body. Malformed request bodies are reported the same way
as ``InvalidInput``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from marketplace.crop.errors import (
    AlreadyDecided,
    DuplicateInterest,
    InsufficientQuantity,
    InvalidInput,
    NotFound,
    Unavailable,
)
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    InvalidInput: 400,
    DuplicateInterest: 400,
    AlreadyDecided: 400,
    InsufficientQuantity: 400,
    NotFound: 404,
}


async def _domain_error_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(status_code=_STATUS_CODES[type(exc)], content={"error": exc.messages})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        messages.setdefault(field, []).append(error["msg"])
    return JSONResponse(status_code=400, content={"error": messages})


async def _unavailable_handler(request: Request, exc: Unavailable) -> JSONResponse:
    logger.error(
        "Crop unavailable",
        crop_id=str(exc.crop_id),
        attempts=exc.attempts,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=503,
        content={"error": str(exc)},
        headers={"Retry-After": "1"},
    )


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_class in _STATUS_CODES:
        app.add_exception_handler(exc_class, _domain_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Unavailable, _unavailable_handler)
