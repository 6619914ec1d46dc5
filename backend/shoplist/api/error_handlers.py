"""Error Handlers — maps every failure to the JSON error envelope.

Invariants:
    - ShoppingListError → its own http_status and to_response() envelope
    - A malformed id in the URL path is a 404 of that resource, not a 400
    - Any other RequestValidationError → 400 with field-level details
    - Unhandled exceptions → 500 without internal details
"""

import logging
from collections.abc import Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shoplist.core.errors import (
    ErrorSeverity, InvitationNotFoundOrUsedError, ItemNotFoundError,
    ListNotFoundOrAccessDeniedError, MemberNotFoundError, ResourceNotFoundError,
    ShoppingListError,
)

logger = logging.getLogger(__name__)

PATH_ID_ERRORS: dict[str, Callable[[str], ResourceNotFoundError]] = {
    "list_id": ListNotFoundOrAccessDeniedError,
    "item_id": ItemNotFoundError,
    "user_id": MemberNotFoundError,
    "invitation_id": InvitationNotFoundOrUsedError,
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShoppingListError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_domain_error(request: Request, exc: ShoppingListError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    not_found = path_id_not_found(exc.errors())
    if not_found is not None:
        return await handle_domain_error(request, not_found)

    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data", "validation",
            ErrorSeverity.WARNING,
            details=[
                {
                    "field": ".".join(str(part) for part in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred", "internal",
            ErrorSeverity.CRITICAL,
        ),
    )


def path_id_not_found(errors: list[dict]) -> ResourceNotFoundError | None:
    """The not-found error for an unparseable path id, if that is the only problem."""
    if not errors or any(e["loc"][0] != "path" for e in errors):
        return None
    first = errors[0]
    build = PATH_ID_ERRORS.get(str(first["loc"][-1]))
    if build is None:
        return None
    return build(str(first.get("input", "")))


def _envelope(
    code: str, message: str, category: str, severity: ErrorSeverity, **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category,
            "severity": severity.value,
            **extra,
        },
    }
