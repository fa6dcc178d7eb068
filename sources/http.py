"""Shared HTTP helpers for the source fetchers.

Every fetcher goes through ``fetch_json`` or ``fetch_text``. Both resolve to
``None`` instead of raising on any upstream problem, so a fetcher only has
to turn ``None`` into an empty result.

Error Handling Strategy:
    - Non-200 responses are logged at WARNING with the status code
    - Timeouts and connection errors are logged at WARNING
    - Undecodable JSON is treated the same as an unavailable upstream
"""

import asyncio
import logging
import ssl
from typing import Any, Awaitable, Callable

import aiohttp
import certifi

logger = logging.getLogger(__name__)

# Browser-like User-Agent to avoid being blocked by documentation hosts
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

GITHUB_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "docdigest-scraper",
}


def create_ssl_context() -> ssl.SSLContext:
    """Create an SSL context that verifies against the certifi bundle."""
    return ssl.create_default_context(cafile=certifi.where())


async def _get(
    session: aiohttp.ClientSession,
    url: str,
    read: Callable[[aiohttp.ClientResponse], Awaitable[Any]],
    timeout: int,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> Any | None:
    """GET a URL and decode the body with ``read``.

    Args:
        session: aiohttp client session
        url: URL to fetch
        read: Coroutine that decodes the response body
        timeout: Request timeout in seconds
        headers: Extra request headers
        params: Query string parameters

    Returns:
        Decoded body, or None on any error
    """
    try:
        async with session.get(
            url,
            params=params,
            timeout=aiohttp.ClientTimeout(total=timeout),
            headers=headers or {"User-Agent": USER_AGENT},
            ssl=create_ssl_context(),
        ) as resp:
            if resp.status != 200:
                logger.warning("Fetch %s: HTTP %d", url, resp.status)
                return None
            return await read(resp)
    except asyncio.TimeoutError:
        logger.warning("Fetch %s: request timed out after %ds", url, timeout)
        return None
    except ValueError as e:
        logger.warning("Fetch %s: malformed response body: %s", url, e)
        return None
    except Exception as e:
        logger.warning("Fetch %s: %s: %s", url, type(e).__name__, e)
        return None


async def fetch_json(
    session: aiohttp.ClientSession,
    url: str,
    timeout: int = 30,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> Any | None:
    """Fetch and decode a JSON document.

    The Content-Type header is not checked; a body that is not valid JSON
    is reported as a malformed response.

    Returns:
        Decoded JSON value, or None on any error
    """
    return await _get(
        session,
        url,
        lambda resp: resp.json(content_type=None),
        timeout,
        headers=headers,
        params=params,
    )


async def fetch_text(
    session: aiohttp.ClientSession,
    url: str,
    timeout: int = 30,
    headers: dict[str, str] | None = None,
) -> str | None:
    """Fetch a page body as text.

    Returns:
        Page content, or None on any error
    """
    return await _get(
        session,
        url,
        lambda resp: resp.text(errors="replace"),
        timeout,
        headers=headers,
    )
