# Ensure tests import the service package from this directory first, so
# `import cors_relay.*` works without an editable install.
import os
import sys
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from fastapi import Request
from starlette.datastructures import QueryParams

SERVICE_ROOT = os.path.dirname(__file__)

if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

TEST_UPSTREAM_URL = "https://upstream.example.com/macros/exec"


@pytest.fixture
def relay_config():
    from cors_relay.relay.config import RelayConfig

    return RelayConfig(upstream_url=TEST_UPSTREAM_URL, max_redirects=5)


@pytest.fixture
def mock_request():
    """Create a mock FastAPI Request object."""

    def _create_request(method="GET", query="", body=b""):
        request = Mock(spec=Request)
        request.method = method
        request.query_params = QueryParams(query)
        request.body = AsyncMock(return_value=body)
        return request

    return _create_request


@pytest.fixture
def upstream_response():
    """Create a real httpx Response as the simulated upstream would send it."""

    def _create_response(status_code=200, content=b"", location=None, headers=None):
        headers = dict(headers or {})
        if location is not None:
            headers["location"] = location
        return httpx.Response(status_code, headers=headers, content=content)

    return _create_response
