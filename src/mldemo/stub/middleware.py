import logging
import time
import uuid
from typing import Final

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from mldemo.stub.routes import ROUTE_DOMAINS

logger = logging.getLogger("mldemo.stub")

REQUEST_ID_HEADER: Final[str] = "x-request-id"
MAX_PAYLOAD_BYTES: Final[int] = 1_000_000  # ~1MB


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag every stub request with its model domain and a request id.

    Bodies whose declared length exceeds `MAX_PAYLOAD_BYTES` are turned
    away with 413 before reaching a route. One log line is written per
    answered request, keyed on the same `domain` field the client logs.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        domain = ROUTE_DOMAINS.get(request.url.path)
        started = time.perf_counter()

        declared = request.headers.get("content-length", "0")
        if declared.isdigit() and int(declared) > MAX_PAYLOAD_BYTES:
            response = Response(status_code=413, content="Payload too large.")
        else:
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "stub reply",
            extra={
                "domain": domain,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "request_id": request_id,
            },
        )
        return response
