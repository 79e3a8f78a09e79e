"""API key middleware for protecting non-public routes."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from commitlink.config import settings

# Signed webhook deliveries and health probes carry no API key
_EXEMPT_PATHS = ("/healthz", "/webhooks/github", "/webhooks/github/ping")


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require a valid X-API-Key header on protected routes.

    Behaviour:
    - When ``settings.api_key`` is empty the middleware is a no-op (local dev).
    - The health check and the GitHub webhook endpoints are always exempt.
    - Everything else, including ``/admin/*`` and ``/tasks/*``, must send a
      matching ``X-API-Key`` header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not settings.api_key:
            return await call_next(request)

        if request.url.path.rstrip("/") in _EXEMPT_PATHS:
            return await call_next(request)

        provided = request.headers.get("X-API-Key")
        if not provided or provided != settings.api_key:
            return JSONResponse(
                status_code=401, content={"detail": "Invalid or missing API key"}
            )

        return await call_next(request)
