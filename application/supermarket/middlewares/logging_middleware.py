"""
Request logging middleware: assigns a request id and logs one line per request.
"""
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from supermarket.logging.utils import get_app_logger
from supermarket.middlewares.request_context import (
    RequestContext,
    create_request_id,
    request_context,
    set_request_context,
)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.logger = get_app_logger('supermarket.requests')
        self.exclude_paths = exclude_paths or ['/health', '/docs', '/redoc']

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # one context per request
        set_request_context(RequestContext())
        incoming_id = request.headers.get(REQUEST_ID_HEADER)
        if incoming_id:
            request_context.request_id = incoming_id
            request_id = incoming_id
        else:
            request_id = create_request_id()
        request_context.request_method = request.method
        request_context.request_path = request.url.path
        request_context.employee_id = request.headers.get('x-employee-id')

        start_time = time.time()
        should_log = not any(request.url.path.startswith(p) for p in self.exclude_paths)
        try:
            response = await call_next(request)
        except Exception as exc:
            duration = (time.time() - start_time) * 1000
            self.logger.error(
                f"request_failed | method={request.method} path={request.url.path} exception={exc.__class__.__name__} duration_ms={duration:.0f}",
                exc_info=True,
            )
            raise

        duration = (time.time() - start_time) * 1000
        if should_log:
            self.logger.info(f"request_completed | method={request.method} path={request.url.path} status_code={response.status_code} duration_ms={duration:.0f}")
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
