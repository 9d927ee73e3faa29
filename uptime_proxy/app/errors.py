"""
Proxy Errors
============

Every way a /api/get-monitors request can fail is one of three variants of
ProxyError. Each variant knows the status code and plain-text body it maps to,
so the route renders all failures through a single call to ``to_response()``.

    ConfigurationError -> 500, diagnostic text
    UpstreamError      -> upstream status, "UptimeRobot API error: ..."
    UnexpectedError    -> 500, "Internal server error: ..."
"""

from fastapi import status
from fastapi.responses import PlainTextResponse


class ProxyError(Exception):
    """Base exception for get-monitors proxy failures"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def detail(self) -> str:
        return str(self)

    def to_response(self) -> PlainTextResponse:
        return PlainTextResponse(self.detail, status_code=self.status_code)


class ConfigurationError(ProxyError):
    """The UptimeRobot API key is not configured"""

    def __init__(
        self,
        message: str = "UptimeRobot API Key is not configured in the proxy environment variables.",
    ):
        super().__init__(message)


class UpstreamError(ProxyError):
    """UptimeRobot answered with a non-2xx status"""

    def __init__(self, upstream_status: int, body: str):
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(f"UptimeRobot API error: {upstream_status} - {body}")

    @property
    def status_code(self) -> int:
        return self.upstream_status


class UnexpectedError(ProxyError):
    """Anything else: bad inbound JSON, network failure, bad upstream JSON"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Internal server error: {message}")

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UnexpectedError":
        # Some httpx errors stringify to an empty message.
        return cls(str(exc) or type(exc).__name__)
