"""Tests for report assembly and the end-to-end run."""

from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from conftest import make_response
from models import CommitRecord, ReleaseRecord
from pipeline import NO_UPDATES_SUMMARY, assemble_report, build_summary, gather_sources, run_once


def test_summary_no_updates():
    assert build_summary([], [], [], [], []) == "No updates detected in the last 24 hours."


def test_summary_singular_plural_and_order():
    assert build_summary([1], [1, 2], [], [], []) == "Daily updates: 1 commit, 2 releases."


def test_summary_all_categories():
    summary = build_summary([1, 2], [1], [1, 2, 3], [1], [1, 2])
    assert summary == "Daily updates: 2 commits, 1 release, 3 PRs, 1 doc page, 2 release notes."


def test_summary_skips_empty_middle_categories():
    assert build_summary([], [], [1], [], [1]) == "Daily updates: 1 PR, 1 release note."


@pytest.mark.asyncio
async def test_gather_sources_absorbs_unexpected_exceptions(config, now, make_session):
    commit = CommitRecord(sha="abc1234", message="m", author_name="a", authored_at=now, url="u")
    with patch("pipeline.fetch_recent_commits", AsyncMock(return_value=[commit])), \
         patch("pipeline.fetch_recent_releases", AsyncMock(side_effect=RuntimeError("boom"))), \
         patch("pipeline.fetch_recent_pull_requests", AsyncMock(return_value=[])), \
         patch("pipeline.fetch_doc_pages", AsyncMock(return_value=[])), \
         patch("pipeline.fetch_release_notes", AsyncMock(return_value=["note"])):
        results = await gather_sources(config, now, session=make_session({}))

    assert results.commits == [commit]
    assert results.releases == []
    assert results.release_notes == ["note"]


@pytest.mark.asyncio
async def test_assemble_report(config, now, make_session):
    release = ReleaseRecord(tag_name="v1", name="v1", url="u", published_at=now, body="")
    with patch("pipeline.fetch_recent_commits", AsyncMock(return_value=[])), \
         patch("pipeline.fetch_recent_releases", AsyncMock(return_value=[release, release])), \
         patch("pipeline.fetch_recent_pull_requests", AsyncMock(return_value=[])), \
         patch("pipeline.fetch_doc_pages", AsyncMock(return_value=[])), \
         patch("pipeline.fetch_release_notes", AsyncMock(return_value=[])):
        report = await assemble_report(config, now, session=make_session({}))

    assert report.date == "2025-03-07"
    assert report.summary == "Daily updates: 2 releases."
    assert report.counts()["releases"] == 2


@pytest.mark.asyncio
async def test_run_once_when_every_source_fails(config, now, make_session):
    session = make_session({
        "api.test": aiohttp.ClientConnectionError("down"),
        "docs.test": make_response(status=500),
        "platform.test": TimeoutError(),
    })

    stats = await run_once(config, now=now, session=session)

    path = config.output_dir / "2025" / "03" / "07.md"
    assert stats.path == str(path)
    assert stats.commits == stats.releases == stats.pull_requests == stats.docs == stats.release_notes == 0
    text = path.read_text(encoding="utf-8")
    assert f"## Summary\n\n{NO_UPDATES_SUMMARY}\n" in text


@pytest.mark.asyncio
async def test_run_once_end_to_end(config, now, make_session):
    commits = [{
        "sha": "fedcba9876543210",
        "commit": {"message": "Ship it\n\nlong body", "author": {"name": "Ada", "date": "2025-03-07T09:00:00Z"}},
        "html_url": "https://github.com/acme/widget/commit/fedcba9",
    }]
    session = make_session({
        "/commits": make_response(payload=commits),
        "/releases": make_response(payload=[]),
        "/pulls": make_response(payload=[]),
        "docs.test": make_response(text='<a href="/docs/en/quickstart">Q</a>'),
        "platform.test": make_response(text="<h2>Models</h2>"),
    })

    stats = await run_once(config, now=now, session=session)

    assert stats.to_dict()["commits"] == 1
    text = (config.output_dir / "2025" / "03" / "07.md").read_text(encoding="utf-8")
    assert "Daily updates: 1 commit, 1 doc page, 1 release note." in text
    assert "- [fedcba9](https://github.com/acme/widget/commit/fedcba9) - Ship it" in text
    assert "- [quickstart](https://docs.test/docs/en/quickstart)" in text
    assert "- Models" in text


@pytest.mark.asyncio
async def test_run_once_propagates_write_failure(config, now, make_session):
    config.output_dir.parent.mkdir(parents=True, exist_ok=True)
    config.output_dir.write_text("blocking file")

    with pytest.raises(OSError):
        await run_once(config, now=now, session=make_session({}))
