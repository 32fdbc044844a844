"""Access log middleware: one structured JSON line per request, correlated by request ID.

An inbound ``X-Request-ID`` is reused so verification calls can be traced across
the onboarding front end and this service; otherwise a short one is generated.
"""

import json
import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("onboarding.access")

REQUEST_ID_HEADER = "X-Request-ID"
_RESOURCE_PATTERN = re.compile(r"/v1/(clients|documents)/(\d+)")


def _log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        request.state.request_id = request_id

        response = await call_next(request)

        entry = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S%z"),
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - start_time) * 1000, 1),
        }
        # Tag the client or document the call is about
        match = _RESOURCE_PATTERN.search(request.url.path)
        if match:
            entry[f"{match.group(1)[:-1]}_id"] = int(match.group(2))

        logger.log(_log_level(response.status_code), json.dumps(entry))

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
