import logging

from fastapi import Request
from .config import settings
from .cache import rate_counter
from .errors import RateLimited, ServiceUnavailable

logger = logging.getLogger(__name__)

def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"

def rate_limit(request: Request):
    """
    Fixed-window limiter keyed by client address: RATE_LIMIT_RPM requests per
    RATE_LIMIT_WINDOW_SECONDS. Runs as a dependency so it rejects before any
    model call is attempted.
    """
    client_ip = client_address(request)
    if rate_counter.hit(client_ip) is None:
        logger.warning("rate limit exceeded for %s", client_ip)
        raise RateLimited()

def require_model_credential():
    """
    The external model needs a key; without one the service cannot answer at all.
    """
    if not settings.has_model_credential():
        raise ServiceUnavailable()
