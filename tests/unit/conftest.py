"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from configuration import AppConfig

DYNATRACE_URL = "https://abc12345.live.dynatrace.com"


def _make_response(status: int = 200, reason: str = "OK", text: str = "") -> AsyncMock:
    response = AsyncMock()
    response.status = status
    response.reason = reason
    response.text.return_value = text
    return response


@pytest.fixture(name="mock_session")
def mock_session_fixture() -> AsyncMock:
    """Create a mock aiohttp session with successful response."""
    session = AsyncMock(spec=aiohttp.ClientSession)
    session.post.return_value.__aenter__.return_value = _make_response()
    return session


@pytest.fixture(name="make_response")
def make_response_fixture() -> Callable[..., AsyncMock]:
    """Create a factory of mock aiohttp responses."""
    return _make_response


@pytest.fixture(name="session_with_responses")
def session_with_responses_fixture() -> Callable[..., AsyncMock]:
    """Create a factory of mock sessions answering requests in given order.

    Each item is either a response or an exception raised when entering the
    request context.
    """

    def factory(*results: AsyncMock | Exception) -> AsyncMock:
        session = AsyncMock(spec=aiohttp.ClientSession)
        contexts = []
        for result in results:
            context = MagicMock()
            if isinstance(result, Exception):
                context.__aenter__.side_effect = result
            else:
                context.__aenter__.return_value = result
            contexts.append(context)
        session.post.side_effect = contexts
        return session

    return factory


@pytest.fixture(name="minimal_config")
def minimal_config_fixture() -> AppConfig:
    """Create a minimal AppConfig with only required fields.

    Returns:
        AppConfig: A minimal AppConfig instance with required fields only.
    """
    cfg = AppConfig()
    cfg.init_from_dict(
        {
            "dynatrace": {
                "url": DYNATRACE_URL,
                "token": "dt0c01.test-token",
            },
        }
    )
    return cfg
