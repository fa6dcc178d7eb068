"""Documentation index and release notes scrapers.

Both scrapers are best-effort pattern matching over raw HTML, not real
parsing. Markup that no longer matches simply yields fewer results; only an
unavailable page is logged as a failure.
"""

import logging
import re
from datetime import datetime

import aiohttp

from config import Config
from models.records import DocPageRecord
from sources.http import fetch_text

logger = logging.getLogger(__name__)

_DOC_LINK_PATTERN = re.compile(r'href="/docs/([^"]+)"')
_HEADING_PATTERN = re.compile(r"<h[23][^>]*>(.*?)</h[23]>", re.IGNORECASE)
_TAG_PATTERN = re.compile(r"<[^>]*>")


def extract_doc_paths(html: str) -> list[str]:
    """Return the distinct /docs/ paths linked from a page.

    Duplicates are dropped; the remaining paths keep the order in which
    they first appear in the markup.
    """
    return list(dict.fromkeys(_DOC_LINK_PATTERN.findall(html)))


def doc_title(path: str) -> str:
    """Title for a doc path: its last segment, or the whole path if that is empty."""
    return path.split("/")[-1] or path


def parse_doc_pages(html: str, base_url: str, scraped_at: datetime) -> list[DocPageRecord]:
    """Build DocPageRecords for every doc path linked from ``html``.

    Args:
        html: Documentation index markup
        base_url: Prefix joined with each relative path
        scraped_at: Recorded as ``last_updated`` on every page

    Returns:
        One record per distinct path
    """
    base = base_url.rstrip("/")
    return [
        DocPageRecord(title=doc_title(path), url=f"{base}/{path}", last_updated=scraped_at)
        for path in extract_doc_paths(html)
    ]


def parse_release_notes(html: str) -> list[str]:
    """Extract plain-text h2/h3 headings from a release notes page."""
    notes = []
    for raw in _HEADING_PATTERN.findall(html):
        text = _TAG_PATTERN.sub("", raw).strip()
        if text:
            notes.append(text)
    return notes


async def fetch_doc_pages(
    session: aiohttp.ClientSession,
    config: Config,
    now: datetime,
) -> list[DocPageRecord]:
    """Scrape the documentation index for linked pages.

    Args:
        session: aiohttp client session
        config: Application configuration (index URL, base URL, timeout)
        now: Run start instant, recorded as each page's ``last_updated``

    Returns:
        DocPageRecords, or an empty list if the index is unavailable
    """
    html = await fetch_text(session, config.docs_index_url, timeout=config.request_timeout)
    if html is None:
        logger.warning("Failed to fetch docs site | url=%s", config.docs_index_url)
        return []
    pages = parse_doc_pages(html, config.docs_base_url, now)
    logger.info("Found %d documentation pages", len(pages))
    return pages


async def fetch_release_notes(
    session: aiohttp.ClientSession,
    config: Config,
) -> list[str]:
    """Scrape heading entries from the platform release notes page."""
    html = await fetch_text(session, config.release_notes_url, timeout=config.request_timeout)
    if html is None:
        logger.warning("Failed to fetch release notes | url=%s", config.release_notes_url)
        return []
    notes = parse_release_notes(html)
    logger.info("Found %d release note entries", len(notes))
    return notes
