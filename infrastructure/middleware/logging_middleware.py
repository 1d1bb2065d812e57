import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp
from typing import Optional, Set, Dict
import logging
import contextvars

# logging_config installs RequestIdLogFilter from this module, so no import back
logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# --- Context Variable for Request ID ---
request_id_contextvar = contextvars.ContextVar[Optional[str]]("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Helper function to retrieve the current request ID from context."""
    return request_id_contextvar.get()


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs incoming requests, outgoing responses and processing time.

    The request id is taken from the X-Request-ID header when the caller
    sends one, otherwise a new one is generated. It is stored on
    ``request.state``, in a context variable for log records, and echoed
    back in the response header.
    """
    def __init__(
        self,
        app: ASGIApp,
        exclude_headers: Optional[Set[str]] = None
    ):
        super().__init__(app)
        default_exclude = {'authorization', 'cookie', 'x-api-key', 'proxy-authorization'}
        self.exclude_headers = default_exclude.union(
            {h.lower() for h in exclude_headers} if exclude_headers else set()
        )

    def _redact(self, headers) -> Dict[str, str]:
        return {
            k: "[REDACTED]" if k.lower() in self.exclude_headers else v
            for k, v in headers.items()
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_id_token = request_id_contextvar.set(request_id)
        request.state.request_id = request_id

        start_time = time.monotonic()
        client_host = request.client.host if request.client else "unknown"
        client_port = request.client.port if request.client else "unknown"

        log_extra_request = {
            "http.request.id": request_id,
            "http.request.method": request.method,
            "http.request.url": str(request.url),
            "http.request.host": request.headers.get("host", ""),
            "http.request.headers": self._redact(request.headers),
            "http.user_agent": request.headers.get("user-agent", ""),
            "network.client.ip": client_host,
            "network.client.port": client_port,
        }
        logger.info(f"--> {request.method} {request.url.path}", extra=log_extra_request)

        response = None
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
        except Exception as e:
            log_extra_exception = {**log_extra_request, "exception_type": type(e).__name__}
            logger.exception("Unhandled exception during middleware/endpoint processing",
                             exc_info=e, extra=log_extra_exception)
            raise
        finally:
            process_time = (time.monotonic() - start_time) * 1000

            log_extra_response = {
                "http.request.id": request_id,
                "http.route": request.url.path,
                "http.response.status_code": status_code,
                "duration_ms": round(process_time, 2),
            }
            if response is not None:
                log_extra_response["http.response.headers"] = self._redact(response.headers)

            log_level = logging.WARNING if 400 <= status_code < 500 else logging.ERROR if status_code >= 500 else logging.INFO
            logger.log(log_level, f"<-- {status_code} ({request.method} {request.url.path}) [{process_time:.2f}ms]", extra=log_extra_response)

            request_id_contextvar.reset(request_id_token)

        return response


class RequestIdLogFilter(logging.Filter):
    """Logging filter to inject the request ID from contextvar into log records."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_contextvar.get() or "-"  # type: ignore[attr-defined]
        return True
