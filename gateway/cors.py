"""
CORS layer backed by OriginGuard.

Rejected origins are terminated here with 403 before routing.
Admitted origins get CORS headers on every response. Every admitted
OPTIONS request is answered here with 200, preflight or not, and requested
headers are echoed back.
"""

from typing import Sequence

from fastapi.datastructures import Headers
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .origin import OriginGuard

CORS_REJECTION = (
    "The CORS policy for this site does not allow access from the specified Origin."
)


class OriginAdmissionMiddleware(CORSMiddleware):
    """CORSMiddleware whose origin check is an OriginGuard."""

    def __init__(
        self,
        app,
        guard: OriginGuard,
        allow_methods: Sequence[str] = ("GET", "POST"),
        allow_headers: Sequence[str] = ("*",),
    ):
        super().__init__(
            app,
            allow_origins=(),
            allow_methods=allow_methods,
            allow_headers=allow_headers,
        )
        self.guard = guard

    def is_allowed_origin(self, origin: str) -> bool:
        return self.guard.evaluate(origin).admitted

    def options_response(self, request_headers: Headers) -> PlainTextResponse:
        """200 for an admitted OPTIONS request, with the preflight headers."""
        headers = dict(self.preflight_headers)
        origin = request_headers.get("origin")
        if origin:
            headers["Access-Control-Allow-Origin"] = origin

        requested_headers = request_headers.get("access-control-request-headers")
        if self.allow_all_headers and requested_headers:
            headers["Access-Control-Allow-Headers"] = requested_headers

        return PlainTextResponse("OK", status_code=200, headers=headers)

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] == "http":
            headers = Headers(scope=scope)
            if not self.guard.admit(headers.get("origin")):
                response = PlainTextResponse(CORS_REJECTION, status_code=403)
                await response(scope, receive, send)
                return
            if scope["method"] == "OPTIONS":
                await self.options_response(headers)(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
