from fastapi import HTTPException
from starlette.status import HTTP_429_TOO_MANY_REQUESTS, HTTP_503_SERVICE_UNAVAILABLE

AMOUNT_HINT = "Enter a valid amount (supports k/L/Cr)"


class InvalidAmount(ValueError):
    """Malformed revenue or multiple text. Never retried."""

    def __init__(self, message: str = AMOUNT_HINT):
        super().__init__(message)


class MarketDataUnavailable(RuntimeError):
    """The model call and its single retry both failed to yield usable JSON."""


class ServiceUnavailable(HTTPException):
    def __init__(self, detail: str = "AI service unavailable. Please contact support."):
        super().__init__(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class RateLimited(HTTPException):
    def __init__(self, detail: str = "Rate limit exceeded. Please wait a minute before trying again."):
        super().__init__(status_code=HTTP_429_TOO_MANY_REQUESTS, detail=detail)
