"""Request logging middleware.

One line per facade request: method, path, status, latency and a short
request ID, plus who was signed in and how many ledger mutations they had
in flight when the response went out. The request ID goes on request.state
for ApiResponse and back to the client as X-Request-ID.

Log format:
    INFO [POST] /api/v1/ponders/7/votes → 200 (812ms) req_a1b2c3d4e5f6
        user=0x01cf...5450 in_flight=0

5xx responses are logged at WARNING.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.bootstrap import Container
from src.fp_analytics.formatting import format_address

logger = logging.getLogger("fp.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, container: Container) -> None:
        super().__init__(app)
        self._container = container

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers[REQUEST_ID_HEADER] = request.state.request_id

        address = self._container.auth.session.address
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s user=%s in_flight=%d",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
            format_address(address) if address else "-",
            len(self._container.orchestrator.pending_operations()),
        )
        return response
