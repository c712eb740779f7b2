from fastapi import FastAPI, Request
from fastapi.responses import Response

from cors_relay.relay.models import RelayResult
from cors_relay.relay.service import Relay

# Starlette routes without a method list match every method, so verbs like
# PROPFIND or TRACE reach the relay instead of a CORS-less 405
RELAY_PATH = "/{path:path}"


def get_relay(request: Request) -> Relay:
    """Resolve the relay configured for the running application."""
    return request.app.state.relay


def to_response(result: RelayResult) -> Response:
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
        media_type=None if result.ok else "application/json",
    )


async def relay_all(request: Request) -> Response:
    """Catch-all endpoint that relays every request to the configured upstream."""
    # The path is accepted but never forwarded; every path maps to the upstream URL
    result = await get_relay(request).handle(request)
    return to_response(result)


def register_relay_route(app: FastAPI) -> None:
    app.add_route(RELAY_PATH, relay_all, include_in_schema=False)
