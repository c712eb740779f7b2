import logging
from typing import Iterable, Tuple

import httpx
from fastapi import Request
from opentelemetry import trace

from cors_relay.relay.config import RelayConfig
from cors_relay.relay.errors import RelayError, TooManyRedirects, TransportError
from cors_relay.relay.models import (
    OUTBOUND_CONTENT_TYPE,
    REDIRECT_STATUSES,
    OutboundAttempt,
    RelayResult,
)
from cors_relay.utils import (
    format_exception_message,
    log_exception_with_details,
    traced_request,
)

tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")


class Relay:
    """
    Forwards inbound requests to the configured upstream and follows its
    redirects, so callers only ever see the terminal response.

    Holds nothing but the read-only config. Each inbound request gets its own
    HTTP client, so concurrent requests share no connection state.
    """

    def __init__(self, config: RelayConfig):
        self.config = config

    def build_target_url(self, query_items: Iterable[Tuple[str, str]]) -> httpx.URL:
        """Overlay inbound query parameters on the upstream URL, inbound winning."""
        # dict() keeps the last value of a repeated inbound key
        overrides = dict(query_items)
        target = httpx.URL(self.config.upstream_url)
        if not overrides:
            return target
        return target.copy_merge_params(overrides)

    async def handle(self, request: Request) -> RelayResult:
        if request.method == "OPTIONS":
            return RelayResult.preflight()

        body = await request.body()
        attempt = OutboundAttempt(
            method=request.method.upper(),
            url=self.build_target_url(request.query_params.multi_items()),
            body=body,
        )

        with traced_request(
            tracer,
            operation="relay_request",
            start_message=f"[Relay] {attempt.method} -> {attempt.url}",
            extra_attrs={
                "relay.method": attempt.method,
                "relay.target_url": str(attempt.url),
            },
        ) as span:
            try:
                response, final_attempt = await self.resolve(attempt)
            except RelayError as e:
                span.set_attribute("relay.error", str(e))
                log_exception_with_details(
                    logger, "[Relay]", e, level=logging.WARNING
                )
                return RelayResult.failure(str(e))

            span.set_attribute("relay.redirects", final_attempt.depth)
            span.set_attribute("relay.upstream_status", response.status_code)
            return RelayResult.success(response.content)

    async def resolve(
        self, attempt: OutboundAttempt
    ) -> Tuple[httpx.Response, OutboundAttempt]:
        """
        Follow the upstream redirect chain starting at `attempt`.

        Returns the terminal response together with the attempt that produced
        it. At most `max_redirects` redirects are followed; the hop past the
        bound is never sent.

        Raises:
            TransportError: the upstream could not be reached at some hop
            TooManyRedirects: the chain is longer than `max_redirects`
        """
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.upstream_timeout),
            follow_redirects=False,
        ) as client:
            while True:
                response = await self._send(client, attempt)
                location = response.headers.get("location")
                if response.status_code not in REDIRECT_STATUSES or not location:
                    return response, attempt

                if attempt.depth + 1 > self.config.max_redirects:
                    raise TooManyRedirects()

                try:
                    attempt = attempt.follow(response.status_code, location)
                except httpx.InvalidURL as e:
                    raise TransportError(format_exception_message(e)) from e
                logger.debug(
                    f"[Relay] Upstream answered {response.status_code}, "
                    f"following to {attempt.method} {attempt.url} (hop {attempt.depth})"
                )

    async def _send(
        self, client: httpx.AsyncClient, attempt: OutboundAttempt
    ) -> httpx.Response:
        try:
            return await client.request(
                method=attempt.method,
                url=attempt.url,
                headers={"Content-Type": OUTBOUND_CONTENT_TYPE},
                content=attempt.attached_body(),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(format_exception_message(e)) from e
