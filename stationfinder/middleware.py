import time
import uuid

import structlog

logger = structlog.get_logger(__name__)


class RequestLoggingMiddleware:
    """Logs every request with a request id and latency"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        start_time = time.time()
        request_id = request.headers.get('X-Request-ID') or uuid.uuid4().hex

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.path,
                error=str(e)
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars('request_id')

        logger.info(
            "request_completed",
            request_id=request_id,
            method=request.method,
            path=request.path,
            status=response.status_code,
            latency_ms=int((time.time() - start_time) * 1000)
        )
        response['X-Request-ID'] = request_id
        return response
