from .config import RelayConfig
from .errors import RelayError, TooManyRedirects, TransportError
from .models import CORS_HEADERS, OutboundAttempt, RelayResult
from .service import Relay

__all__ = [
    "CORS_HEADERS",
    "OutboundAttempt",
    "Relay",
    "RelayConfig",
    "RelayError",
    "RelayResult",
    "TooManyRedirects",
    "TransportError",
]
