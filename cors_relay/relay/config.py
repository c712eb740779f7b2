import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from cors_relay.vars import (
    DEFAULT_HOST,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_PORT,
    DEFAULT_UPSTREAM_URL,
)


@dataclass(frozen=True)
class RelayConfig:
    """Process-wide relay configuration, built once at startup."""

    upstream_url: str = DEFAULT_UPSTREAM_URL
    listen_port: int = DEFAULT_PORT
    listen_host: str = DEFAULT_HOST
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    # None disables the timeout entirely
    upstream_timeout: Optional[float] = None

    def __post_init__(self):
        parsed = urlparse(self.upstream_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"Upstream URL must be an absolute http(s) URL: {self.upstream_url!r}"
            )
        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be >= 0, got {self.max_redirects}")
        if self.upstream_timeout is not None and self.upstream_timeout <= 0:
            raise ValueError(
                f"upstream_timeout must be positive, got {self.upstream_timeout}"
            )

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Load the relay configuration from environment variables."""
        raw_timeout = os.getenv("RELAY_UPSTREAM_TIMEOUT", "").strip()
        return cls(
            upstream_url=os.getenv("UPSTREAM_URL", DEFAULT_UPSTREAM_URL),
            listen_port=int(os.getenv("PORT", str(DEFAULT_PORT))),
            listen_host=os.getenv("HOST", DEFAULT_HOST),
            max_redirects=int(
                os.getenv("RELAY_MAX_REDIRECTS", str(DEFAULT_MAX_REDIRECTS))
            ),
            upstream_timeout=float(raw_timeout) if raw_timeout else None,
        )
