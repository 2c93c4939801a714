from fastapi import Request, Response
from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


def apply_security_headers(path: str, headers: MutableHeaders, hsts_enabled: bool = False) -> None:
    """
    Browser hardening headers shared by the middleware and the 500 handler.

    The catch-all exception handler runs in Starlette's ServerErrorMiddleware,
    outside this middleware, so it calls this directly.
    """
    headers["X-Frame-Options"] = "DENY"
    headers["X-Content-Type-Options"] = "nosniff"
    headers["X-XSS-Protection"] = "1; mode=block"
    headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    headers["X-DNS-Prefetch-Control"] = "off"
    headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=(), payment=(), usb=()"

    # Responses may carry tokens
    if path.startswith("/api/"):
        headers["Cache-Control"] = "no-store, max-age=0"

    if hsts_enabled:
        headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains; preload"
        headers["Cross-Origin-Embedder-Policy"] = "require-corp"
        headers["Cross-Origin-Opener-Policy"] = "same-origin"
        headers["Cross-Origin-Resource-Policy"] = "same-origin"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds browser hardening headers to every response.

    Strict-Transport-Security and the cross-origin isolation headers are
    only sent when HSTS is enabled (production behind TLS).
    """

    def __init__(self, app, hsts_enabled: bool = False):
        super().__init__(app)
        self.hsts_enabled = hsts_enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        apply_security_headers(request.url.path, response.headers, self.hsts_enabled)
        return response
