from .request_id import RequestIDMiddleware, get_request_id, get_client_ip, PRINCIPAL_HEADER
from .logging import LoggingMiddleware

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
    "PRINCIPAL_HEADER",
    "get_request_id",
    "get_client_ip",
]
