import os
import json
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class LoggingMiddleware(BaseHTTPMiddleware):
    """Print one JSON line per request when ``LOGGING_ENABLED=true``.

    The line carries the Panchanga cache size after the request so cache
    warm-up is visible in request logs.
    """

    async def dispatch(self, request: Request, call_next):
        if os.getenv("LOGGING_ENABLED", "false").lower() != "true":
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        cache = getattr(request.app.state, "panchanga_cache", None)
        print(
            json.dumps(
                {
                    "ts": time.time(),
                    "method": request.method,
                    "endpoint": request.url.path,
                    "params": dict(request.query_params),
                    "status": response.status_code,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                    "cache_size": cache.size if cache is not None else None,
                }
            )
        )
        return response
