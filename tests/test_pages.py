"""Tests for the documentation index and release notes scrapers."""

import aiohttp
import pytest

from conftest import make_response
from sources.pages import (
    doc_title,
    extract_doc_paths,
    fetch_doc_pages,
    fetch_release_notes,
    parse_doc_pages,
    parse_release_notes,
)

DOCS_HTML = """
<nav>
  <a href="/docs/overview">Overview</a>
  <a href="/docs/en/setup">Setup</a>
  <a href="/docs/en/hooks">Hooks</a>
  <a href="/docs/en/setup">Setup again</a>
  <a href="https://elsewhere.test/docs/ignored">External</a>
  <a href="/blog/post">Blog</a>
  <a href="/docs/en/sdk/">SDK</a>
</nav>
"""

NOTES_HTML = """
<h1>Release notes</h1>
<h2 id="march">March 7, 2025</h2>
<p>Text</p>
<h3 class="x"><a href="#tools">New <code>tools</code> API</a></h3>
<H2>  Uppercase tags  </H2>
<h3><span></span></h3>
<h4>Too deep</h4>
"""


def test_extract_doc_paths_dedupes_in_first_seen_order():
    assert extract_doc_paths(DOCS_HTML) == ["overview", "en/setup", "en/hooks", "en/sdk/"]


def test_extract_doc_paths_no_matches():
    assert extract_doc_paths("<html><body>nothing here</body></html>") == []


@pytest.mark.parametrize(
    "path, title",
    [
        ("overview", "overview"),
        ("en/setup", "setup"),
        ("en/sdk/", "en/sdk/"),
    ],
)
def test_doc_title(path, title):
    assert doc_title(path) == title


def test_parse_doc_pages(now):
    pages = parse_doc_pages(DOCS_HTML, "https://docs.test/docs/", now)
    assert [p.title for p in pages] == ["overview", "setup", "hooks", "en/sdk/"]
    assert pages[1].url == "https://docs.test/docs/en/setup"
    assert all(p.last_updated == now for p in pages)


def test_parse_release_notes_strips_tags_and_empties():
    assert parse_release_notes(NOTES_HTML) == [
        "March 7, 2025",
        "New tools API",
        "Uppercase tags",
    ]


def test_parse_release_notes_no_headings():
    assert parse_release_notes("<p>No headings</p>") == []


@pytest.mark.asyncio
async def test_fetch_doc_pages(config, now, make_session):
    session = make_session({"docs.test": make_response(text=DOCS_HTML)})

    pages = await fetch_doc_pages(session, config, now)

    assert len(pages) == 4
    assert session.get.call_args.args[0] == "https://docs.test/docs"


@pytest.mark.asyncio
async def test_fetch_doc_pages_failure(config, now, make_session):
    session = make_session({"docs.test": make_response(status=503)})
    assert await fetch_doc_pages(session, config, now) == []


@pytest.mark.asyncio
async def test_fetch_release_notes(config, make_session):
    session = make_session({"platform.test": make_response(text=NOTES_HTML)})
    notes = await fetch_release_notes(session, config)
    assert notes[0] == "March 7, 2025"


@pytest.mark.asyncio
async def test_fetch_release_notes_network_error(config, make_session):
    session = make_session({"platform.test": aiohttp.ClientConnectionError("reset")})
    assert await fetch_release_notes(session, config) == []


class _BytesResponse:
    """Response whose text() decodes raw bytes like aiohttp does."""

    status = 200

    def __init__(self, body: bytes) -> None:
        self.body = body

    async def text(self, encoding: str | None = None, errors: str = "strict") -> str:
        return self.body.decode(encoding or "utf-8", errors)


INVALID_UTF8_PAGE = (
    b'<a href="/docs/en/setup">Setup \xe9</a><a href="/docs/en/hooks">H</a>'
    b"<h2>March \xa0 7</h2>"
)


@pytest.mark.asyncio
async def test_invalid_bytes_do_not_drop_doc_pages(config, now, make_session):
    session = make_session({"docs.test": _BytesResponse(INVALID_UTF8_PAGE)})

    pages = await fetch_doc_pages(session, config, now)

    assert [p.title for p in pages] == ["setup", "hooks"]


@pytest.mark.asyncio
async def test_invalid_bytes_are_replaced_in_release_notes(config, make_session):
    session = make_session({"platform.test": _BytesResponse(INVALID_UTF8_PAGE)})

    notes = await fetch_release_notes(session, config)

    assert notes == ["March \ufffd 7"]
