import time

from prometheus_client import Counter
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp
from uuid_extensions import uuid7

from testnetfaucet import api_logger
from testnetfaucet.utils import http_headers

logger = api_logger.get()

response_status_codes_counter = Counter(
    "response_status_codes",
    "Total number of HTTP status codes of each endpoint",
    ["endpoint", "status_code"],
)


class MainMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(uuid7())
        ip_address = request.client.host if request.client else None
        logger.info(
            f"REQUEST STARTED "
            f"request_id={request_id} "
            f"request_path={request.url.path} "
            f"ip={ip_address} "
        )
        before = time.time()
        try:
            response: Response = await call_next(request)
        except Exception:
            response_status_codes_counter.labels(request.url.path, 500).inc()
            logger.error(
                f"Error while handling request. request_id={request_id} "
                f"request_path={request.url.path} ",
                exc_info=True,
            )
            raise

        response_status_codes_counter.labels(
            request.url.path, response.status_code
        ).inc()
        process_time = (time.time() - before) * 1000
        formatted_process_time = "{0:.2f}".format(process_time)
        logger.info(
            f"REQUEST COMPLETED "
            f"request_id={request_id} "
            f"request_path={request.url.path} "
            f"completed_in={formatted_process_time}ms "
            f"status_code={response.status_code}"
        )
        response.headers["X-Request-ID"] = request_id
        return await http_headers.add_response_headers(response)
