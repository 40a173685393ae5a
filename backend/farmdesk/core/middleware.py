"""
Request context and error translation.

RequestContextMiddleware tags each request with an id (taken from the
``X-Request-ID`` header when the caller sends one), times it, and turns
unexpected exceptions into a 500 JSON body. farmdesk_error_handler renders
FarmDeskError subclasses with their own status code.
"""
import time
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from farmdesk.core.exceptions import FarmDeskError
from farmdesk.core.logging import (
    api_logger,
    generate_request_id,
    get_request_id,
    request_id_var,
)

QUIET_PATHS = ('/healthz', '/readyz')
REQUEST_ID_HEADER = 'X-Request-ID'


def _error_response(status_code: int, detail, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={'detail': detail, 'request_id': request_id},
        headers={REQUEST_ID_HEADER: request_id},
    )


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        started = time.time()
        id_token = request_id_var.set(request_id)
        request.state.request_id = request_id

        label = f"{request.method} {request.url.path}"
        quiet = request.url.path in QUIET_PATHS

        try:
            response = await call_next(request)
            duration = round((time.time() - started) * 1000, 2)
            response.headers[REQUEST_ID_HEADER] = request_id
            if not quiet:
                log = api_logger.info if response.status_code < 400 else api_logger.warning
                log(f"{label} -> {response.status_code}", duration_ms=duration)
            return response
        except Exception as e:
            duration = round((time.time() - started) * 1000, 2)
            api_logger.error(f"{label} -> 500", error=e, duration_ms=duration)
            return _error_response(500, "Internal server error", request_id)
        finally:
            request_id_var.reset(id_token)


async def farmdesk_error_handler(request: Request, exc: FarmDeskError) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', None) or get_request_id() or 'unknown'

    log = api_logger.error if exc.status_code >= 500 else api_logger.warning
    log(f"{type(exc).__name__}: {exc.message}", path=request.url.path, status=exc.status_code)

    return _error_response(exc.status_code, exc.to_dict(), request_id)
