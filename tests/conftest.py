"""Shared fixtures: a fixed clock, a test Config and a fake aiohttp session."""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from config import Config

NOW = datetime(2025, 3, 7, 12, 0, 0, tzinfo=timezone.utc)


class MockAsyncContextManager:
    """Async context manager standing in for ``session.get(...)``."""

    def __init__(self, return_value: Any = None, enter_side_effect: Exception | None = None) -> None:
        self.return_value = return_value
        self.enter_side_effect = enter_side_effect

    async def __aenter__(self) -> Any:
        if self.enter_side_effect:
            raise self.enter_side_effect
        return self.return_value

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        pass


def make_response(status: int = 200, payload: Any = None, text: str = "") -> MagicMock:
    """Build a fake aiohttp response."""
    resp = MagicMock()
    resp.status = status
    if isinstance(payload, Exception):
        resp.json = AsyncMock(side_effect=payload)
    else:
        resp.json = AsyncMock(return_value=payload)
    resp.text = AsyncMock(return_value=text)
    return resp


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        github_repo="acme/widget",
        github_api_url="https://api.test",
        docs_index_url="https://docs.test/docs",
        docs_base_url="https://docs.test/docs",
        release_notes_url="https://platform.test/release-notes",
        output_dir=tmp_path / "daily",
        log_dir=tmp_path / "log",
    )


@pytest.fixture
def make_session():
    """Factory for a fake session routing URLs to canned responses.

    Routes map a URL substring to either a response (see make_response)
    or an exception raised when the request is entered. Unrouted URLs
    answer HTTP 404.
    """

    def _make(routes: dict[str, Any]) -> MagicMock:
        session = MagicMock()

        def _get(url: str, **kwargs: Any) -> MockAsyncContextManager:
            for fragment, outcome in routes.items():
                if fragment in url:
                    if isinstance(outcome, Exception):
                        return MockAsyncContextManager(enter_side_effect=outcome)
                    return MockAsyncContextManager(outcome)
            return MockAsyncContextManager(make_response(status=404))

        session.get = MagicMock(side_effect=_get)
        return session

    return _make
