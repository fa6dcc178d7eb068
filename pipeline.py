"""Daily report pipeline: fetch, assemble, render, write.

Pipeline Flow:
    1. FETCH: Run the five source fetchers concurrently in one session
    2. ASSEMBLE: Build the summary sentence and the Report for today
    3. RENDER: Serialize the Report to Markdown
    4. WRITE: Save to <output_dir>/<YYYY>/<MM>/<DD>.<ext>

Every fetcher absorbs its own upstream failures, so the fan-in always
receives five lists (possibly empty). Only a failed write aborts a run.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import aiohttp

from config import Config
from models.records import CommitRecord, DocPageRecord, PullRequestRecord, ReleaseRecord
from models.report import Report
from observability.logging import clear_context, set_run_context
from observability.tracing import trace_operation
from render import render_report
from sources import (
    fetch_doc_pages,
    fetch_recent_commits,
    fetch_recent_pull_requests,
    fetch_recent_releases,
    fetch_release_notes,
)
from storage import save_daily_report
from timewindow import iso_date, utc_now

logger = logging.getLogger(__name__)

NO_UPDATES_SUMMARY = "No updates detected in the last 24 hours."

_SOURCE_NAMES = ("commits", "releases", "pull_requests", "docs", "release_notes")


@dataclass
class SourceResults:
    """Outputs of the five fetchers for one run."""

    commits: list[CommitRecord]
    releases: list[ReleaseRecord]
    pull_requests: list[PullRequestRecord]
    docs: list[DocPageRecord]
    release_notes: list[str]


@dataclass
class RunStats:
    """Statistics from a single pipeline run.

    Attributes:
        commits: Commits in the window
        releases: Releases in the window
        pull_requests: Pull requests merged in the window
        docs: Documentation pages found
        release_notes: Release note headings found
        path: Where the report was written
        duration: Total run time in seconds
    """

    commits: int = 0
    releases: int = 0
    pull_requests: int = 0
    docs: int = 0
    release_notes: int = 0
    path: str = ""
    duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        d = asdict(self)
        d["duration"] = round(d["duration"], 2)
        return d


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def build_summary(
    commits: list,
    releases: list,
    pull_requests: list,
    docs: list,
    release_notes: list,
) -> str:
    """Build the one-line summary of a run.

    Non-empty categories are listed in fixed order with singular/plural
    wording; empty ones are omitted.

    Example:
        >>> build_summary(["a"], ["b", "c"], [], [], [])
        'Daily updates: 1 commit, 2 releases.'
    """
    parts = [
        _plural(len(items), noun)
        for items, noun in (
            (commits, "commit"),
            (releases, "release"),
            (pull_requests, "PR"),
            (docs, "doc page"),
            (release_notes, "release note"),
        )
        if items
    ]
    if not parts:
        return NO_UPDATES_SUMMARY
    return f"Daily updates: {', '.join(parts)}."


async def _gather(
    session: aiohttp.ClientSession,
    config: Config,
    now: datetime,
) -> SourceResults:
    results = await asyncio.gather(
        fetch_recent_commits(session, config, now),
        fetch_recent_releases(session, config, now),
        fetch_recent_pull_requests(session, config, now),
        fetch_doc_pages(session, config, now),
        fetch_release_notes(session, config),
        return_exceptions=True,
    )

    collected = []
    for name, result in zip(_SOURCE_NAMES, results):
        if isinstance(result, Exception):
            logger.error("Source failed | source=%s error=%s (%s)", name, result, type(result).__name__)
            collected.append([])
        elif isinstance(result, BaseException):
            raise result
        else:
            collected.append(result)
    return SourceResults(*collected)


async def gather_sources(
    config: Config,
    now: datetime,
    session: aiohttp.ClientSession | None = None,
) -> SourceResults:
    """Run all five fetchers concurrently and wait for every one of them.

    Args:
        config: Application configuration
        now: Run start instant (defines the time window)
        session: Existing session to reuse; a new one is opened if omitted

    Returns:
        SourceResults with one list per source
    """
    if session is not None:
        return await _gather(session, config, now)
    async with aiohttp.ClientSession() as own_session:
        return await _gather(own_session, config, now)


async def assemble_report(
    config: Config,
    now: datetime | None = None,
    session: aiohttp.ClientSession | None = None,
) -> Report:
    """Fetch every source and combine the results into today's Report."""
    if now is None:
        now = utc_now()

    with trace_operation("fetch_sources", {"repo": config.github_repo}) as attrs:
        results = await gather_sources(config, now, session)
        attrs.update({name: len(getattr(results, name)) for name in _SOURCE_NAMES})

    summary = build_summary(
        results.commits,
        results.releases,
        results.pull_requests,
        results.docs,
        results.release_notes,
    )
    return Report(
        date=iso_date(now.date()),
        summary=summary,
        commits=results.commits,
        releases=results.releases,
        pull_requests=results.pull_requests,
        docs=results.docs,
        release_notes=results.release_notes,
    )


async def build_daily_report(
    config: Config,
    now: datetime | None = None,
    session: aiohttp.ClientSession | None = None,
) -> tuple[Report, str]:
    """Assemble and render today's report without writing it."""
    report = await assemble_report(config, now, session)
    with trace_operation("render_report"):
        markdown = render_report(report)
    return report, markdown


async def run_once(
    config: Config,
    now: datetime | None = None,
    session: aiohttp.ClientSession | None = None,
) -> RunStats:
    """Execute one complete run and write the report.

    Args:
        config: Application configuration
        now: Run start instant (defaults to the current time)
        session: Optional aiohttp session to reuse

    Returns:
        RunStats with per-category counts and the written path

    Raises:
        OSError: If the report cannot be written
    """
    run_id = uuid.uuid4().hex[:8]
    set_run_context(run_id)
    start = time.time()
    if now is None:
        now = utc_now()

    logger.info("Run started | repo=%s date=%s", config.github_repo, iso_date(now.date()))

    try:
        report, markdown = await build_daily_report(config, now, session)
        with trace_operation("write_report"):
            path = save_daily_report(markdown, now.date(), config.output_dir, config.report_ext)

        stats = RunStats(**report.counts(), path=str(path), duration=time.time() - start)
        logger.info("Run done | duration=%.1fs summary=%s", stats.duration, report.summary)
        return stats
    finally:
        clear_context()
