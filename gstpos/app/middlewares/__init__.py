from .http_errors import HttpErrorCounterMiddleware
from .request_id import RequestIdMiddleware

__all__ = [
    "RequestIdMiddleware",
    "HttpErrorCounterMiddleware",
]
