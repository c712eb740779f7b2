from dataclasses import dataclass, field, replace
from typing import Dict, Optional

import httpx
from pydantic import BaseModel

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

# Upstream is always treated as accepting raw text/JSON payloads
OUTBOUND_CONTENT_TYPE = "text/plain;charset=utf-8"


class FailureEnvelope(BaseModel):
    ok: bool = False
    error: str


@dataclass(frozen=True)
class OutboundAttempt:
    """One hop of a redirect chain."""

    method: str
    url: httpx.URL
    body: bytes = b""
    depth: int = 0

    def attached_body(self) -> Optional[bytes]:
        """Body to send on the wire; GET never carries one."""
        if self.method == "GET" or not self.body:
            return None
        return self.body

    def follow(self, status_code: int, location: str) -> "OutboundAttempt":
        """
        Build the next attempt for a redirect response.

        303 always switches to GET. Every other redirect code keeps the method
        and the original body.
        """
        return replace(
            self,
            method="GET" if status_code == 303 else self.method,
            url=self.url.join(location),
            depth=self.depth + 1,
        )


@dataclass(frozen=True)
class RelayResult:
    status_code: int
    body: bytes = b""
    error: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def preflight(cls) -> "RelayResult":
        return cls(status_code=200)

    @classmethod
    def success(cls, body: bytes) -> "RelayResult":
        # The upstream's own status is deliberately not propagated
        return cls(status_code=200, body=body)

    @classmethod
    def failure(cls, error: str) -> "RelayResult":
        envelope = FailureEnvelope(error=error)
        return cls(
            status_code=500,
            body=envelope.model_dump_json().encode("utf-8"),
            error=error,
        )
