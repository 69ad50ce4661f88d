"""Shared pytest fixtures for nounproject_mcp tests."""

from typing import Callable

import httpx
import pytest

from nounproject_mcp.client import NounProjectClient
from nounproject_mcp.config import Credentials
from nounproject_mcp.dispatcher import Dispatcher, build_handlers

BASE_URL = "https://api.test.nounproject.invalid"


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key="test-key", api_secret="test-secret")


@pytest.fixture
def make_client(credentials: Credentials) -> Callable[..., NounProjectClient]:
    """Build a client whose requests go to the given transport."""

    def _make(transport: httpx.AsyncBaseTransport) -> NounProjectClient:
        return NounProjectClient(credentials, base_url=BASE_URL, transport=transport)

    return _make


@pytest.fixture
def make_dispatcher(make_client: Callable[..., NounProjectClient]) -> Callable[..., Dispatcher]:
    def _make(transport: httpx.AsyncBaseTransport) -> Dispatcher:
        return Dispatcher(build_handlers(make_client(transport)))

    return _make
