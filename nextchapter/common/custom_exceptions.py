from typing import Any, Optional
from fastapi import FastAPI, HTTPException, Request,status
from fastapi.exceptions import RequestValidationError
from nextchapter.common.logging_setup import get_logger
from nextchapter.common.utils import build_error, json_error
from nextchapter.common.constants import request_id_ctx

logger = get_logger("nextchapter.errors")


class BookstoreError(Exception):
    """Base for every domain failure that maps onto an http status."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "SERVER_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class Unauthorized(BookstoreError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "Unauthorized"

class Forbidden(BookstoreError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "Forbidden"

class ValidationFailed(BookstoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    message = "Invalid input data"

class NotFound(BookstoreError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Not found"

class Conflict(BookstoreError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "Conflict"

class AlreadyProcessed(Conflict):
    code = "ALREADY_PROCESSED"
    message = "Payment already processed"

class DuplicateReview(Conflict):
    code = "DUPLICATE_REVIEW"
    message = "Review already exists for this book"

class InvalidTransition(Conflict):
    code = "INVALID_TRANSITION"
    message = "Delivery status transition not allowed"

class NotDeliverable(ValidationFailed):
    code = "NOT_DELIVERED"
    message = "Can only review delivered items"

class EmptyCart(ValidationFailed):
    code = "EMPTY_CART"
    message = "No items found"

class InvalidSignature(ValidationFailed):
    code = "INVALID_SIGNATURE"
    message = "Invalid signature"

class GatewayError(BookstoreError):
    code = "GATEWAY_ERROR"
    message = "Error creating payment order"

class SchemaError(BookstoreError):
    code = "SCHEMA_ERROR"
    message = "Database tables not set up correctly"

class StorageError(BookstoreError):
    code = "STORAGE_ERROR"
    message = "Database operation failed"


async def bookstore_error_handler(request: Request, exc: BookstoreError):
    rid = request_id_ctx.get(None)
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request.domain_error",
        extra={"code": exc.code, "path": request.url.path, "method": request.method},
    )
    payload = build_error(exc.message, code=exc.code, details=exc.details, request_id=rid)
    return json_error(payload, status_code=exc.status_code)


async def fallback_handler(request: Request, exc: Exception):

    rid = request_id_ctx.get(None)

    logger.error(
        "unexpected.exception",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=exc,
    )

    payload = build_error("Internal Server Error", code="SERVER_ERROR", request_id=rid)
    return json_error(payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = request_id_ctx.get(None)
    logger.warning(
        "request.validation_failed",
        extra={
            "errors": exc.errors(),
            "path": request.url.path,
        },
    )

    payload = build_error("Invalid input data", code="UNPROCESSABLE_ENTITY", details=exc.errors(), request_id=rid)
    return json_error(payload, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


async def http_exception_handler(request: Request, exc: HTTPException):

    rid = request_id_ctx.get(None)
    payload = build_error(str(exc.detail), code=f"HTTP_{exc.status_code}", request_id=rid)
    return json_error(payload, status_code=exc.status_code, headers=getattr(exc, "headers", None))


def register_all_exceptions(app: FastAPI):

    app.add_exception_handler(
        Exception, # catch all unidentified/unhandled exceptions
        fallback_handler
    )

    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler
    )

    app.add_exception_handler(
        HTTPException,
        http_exception_handler
    )

    app.add_exception_handler(
        BookstoreError,
        bookstore_error_handler
    )
