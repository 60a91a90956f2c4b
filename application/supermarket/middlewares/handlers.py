from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any
from supermarket.config.sentry import capture_exception, add_breadcrumb
from supermarket.core.exceptions import InvoicingError
from supermarket.logging.utils import get_app_logger
from supermarket.middlewares.request_context import request_context

from supermarket.config.settings import SupermarketConfigs
configs = SupermarketConfigs()

logger = get_app_logger(__name__)

# DEBUG=false means production
DEBUG = configs.DEBUG


async def _invoicing_exception_handler(request: Request, exc: InvoicingError):
    """Map domain errors to their HTTP status with a stable error code."""
    request_context.module_name = 'middleware_handlers'
    logger.warning(f"invoicing_error | method={request.method} url={str(request.url)} code={exc.code} key={exc.key} message={exc.message}")

    add_breadcrumb(
        message=f"{exc.code} on {request.method} {request.url}",
        category="invoicing",
        level="warning",
        data={"code": exc.code, "key": exc.key},
    )

    if DEBUG:
        payload = exc.to_dict()
    else:
        payload = {"message": _production_message(exc.status_code), "code": exc.code}
    return JSONResponse(status_code=exc.status_code, content=payload)


def _production_message(status_code: int) -> str:
    if status_code == 404:
        return "Resource not found"
    if status_code == 409:
        return "Request conflicts with the current state"
    if 400 <= status_code < 500:
        return "Invalid request"
    return "Something went wrong"


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with production-safe messages."""
    request_context.module_name = 'middleware_handlers'
    logger.warning(f"validation_error | method={request.method} url={str(request.url)} errors={exc.errors()}")

    add_breadcrumb(
        message=f"Validation error on {request.method} {request.url}",
        category="validation",
        level="error",
        data={"errors": str(exc.errors())}
    )

    if not DEBUG:
        payload = {"message": "Invalid request data"}
    else:
        # "field_path: error_message" per error
        error_messages = []
        for err in exc.errors():
            field_path = " -> ".join(str(loc) for loc in err.get("loc", []))
            error_msg = err.get("msg", "Invalid input")
            error_messages.append(f"{field_path}: {error_msg}")

        if len(error_messages) == 1:
            payload = {"message": error_messages[0]}
        else:
            payload = {"message": "Validation errors", "errors": error_messages}

    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=payload)


async def _general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions with production-safe messages."""
    request_context.module_name = 'middleware_handlers'
    logger.error(
        f"unhandled_exception | method={request.method} url={str(request.url)} exception_type={type(exc).__name__} exception_message={str(exc)}",
        exc_info=True,
    )

    add_breadcrumb(
        message=f"Unhandled exception on {request.method} {request.url}",
        category="exception",
        level="error",
        data={"exception_type": type(exc).__name__, "exception_message": str(exc)}
    )
    capture_exception(exc)

    if not DEBUG:
        payload = {"message": "Something went wrong"}
    else:
        payload = {"message": f"Internal server error: {str(exc)}"}

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def _http_exception_handler(request: Request, exc: Any):
    """Handle HTTP exceptions with production-safe messages."""
    request_context.module_name = 'middleware_handlers'
    status_code = getattr(exc, 'status_code', status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = getattr(exc, 'detail', str(exc))
    if status_code >= 500:
        logger.error(f"http_exception | method={request.method} url={str(request.url)} status_code={status_code} detail={detail}", exc_info=True)
        add_breadcrumb(
            message=f"HTTP {status_code} error on {request.method} {request.url}",
            category="http",
            level="error",
            data={"status_code": status_code, "detail": detail}
        )
        capture_exception(exc)
    else:
        logger.warning(f"http_exception | method={request.method} url={str(request.url)} status_code={status_code} detail={detail}")

    if not DEBUG:
        payload = {"message": _production_message(status_code)}
    else:
        payload = {"message": detail}

    return JSONResponse(status_code=status_code, content=payload)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the given FastAPI instance."""
    from starlette.exceptions import HTTPException

    app.add_exception_handler(InvoicingError, _invoicing_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _general_exception_handler)
