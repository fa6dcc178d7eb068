"""GitHub activity fetchers: commits, releases and merged pull requests.

Each fetcher issues one request against the GitHub REST API and maps the
payload into frozen records. Upstream failures never reach the caller:
an unavailable API or a payload that is not a list yields an empty list,
and individual entries with an unexpected shape are skipped.

Window rules:
    - Commits are windowed by the API itself via ``since``
    - Releases and pull requests are filtered client-side; an entry counts
      only when its timestamp is present and strictly after the window start
"""

import logging
from datetime import datetime
from typing import Any, Callable, TypeVar

import aiohttp
from pydantic import ValidationError

from config import Config
from models.records import CommitRecord, PullRequestRecord, ReleaseRecord
from sources.http import GITHUB_HEADERS, fetch_json
from timewindow import parse_timestamp, to_iso, window_start

logger = logging.getLogger(__name__)

COMMITS_PER_PAGE = 100
RELEASES_PER_PAGE = 10
PULLS_PER_PAGE = 30
SHORT_SHA_LENGTH = 7
RELEASE_BODY_LIMIT = 200

T = TypeVar("T")

# Raised by a mapper when an entry does not have the expected shape
_ENTRY_ERRORS = (KeyError, TypeError, AttributeError, ValueError, ValidationError)


def _repo_url(config: Config, resource: str) -> str:
    return f"{config.github_api_url}/repos/{config.github_repo}/{resource}"


def _map_entries(payload: Any, mapper: Callable[[dict], T | None], kind: str) -> list[T]:
    """Map raw API entries, skipping any with an unexpected shape.

    Args:
        payload: Decoded JSON response
        mapper: Converts one entry to a record, or None to drop it
        kind: Label used in log messages

    Returns:
        Mapped records in API order
    """
    if not isinstance(payload, list):
        logger.warning("GitHub %s: expected a list, got %s", kind, type(payload).__name__)
        return []

    records = []
    skipped = 0
    for entry in payload:
        try:
            record = mapper(entry)
        except _ENTRY_ERRORS as e:
            skipped += 1
            logger.debug("GitHub %s: skipping malformed entry: %s", kind, e)
            continue
        if record is not None:
            records.append(record)

    if skipped:
        logger.warning("GitHub %s: skipped %d malformed entries", kind, skipped)
    return records


def first_line(message: str) -> str:
    """Return the text before the first line break."""
    return message.split("\n", 1)[0].rstrip("\r")


def truncate_body(body: str | None, limit: int = RELEASE_BODY_LIMIT) -> str:
    """Truncate a release body to ``limit`` characters plus an ellipsis.

    An absent or empty body stays empty.
    """
    if not body:
        return ""
    return body[:limit] + "..."


def parse_commits(payload: Any) -> list[CommitRecord]:
    """Map a commits listing into CommitRecords."""

    def _map(entry: dict) -> CommitRecord:
        commit = entry["commit"]
        author = commit.get("author") or {}
        return CommitRecord(
            sha=entry["sha"][:SHORT_SHA_LENGTH],
            message=first_line(commit["message"]),
            author_name=author.get("name") or "",
            authored_at=author["date"],
            url=entry["html_url"],
        )

    return _map_entries(payload, _map, "commits")


def parse_releases(payload: Any, since: datetime) -> list[ReleaseRecord]:
    """Map a releases listing, keeping those published after ``since``."""

    def _map(entry: dict) -> ReleaseRecord | None:
        published_at = parse_timestamp(entry.get("published_at"))
        if published_at is None or published_at <= since:
            return None
        tag = entry["tag_name"]
        return ReleaseRecord(
            tag_name=tag,
            name=entry.get("name") or tag,
            url=entry["html_url"],
            published_at=published_at,
            body=truncate_body(entry.get("body")),
        )

    return _map_entries(payload, _map, "releases")


def parse_pull_requests(payload: Any, since: datetime) -> list[PullRequestRecord]:
    """Map a closed pull request listing, keeping those merged after ``since``.

    Closed-but-unmerged requests have no ``merged_at`` and are dropped.
    """

    def _map(entry: dict) -> PullRequestRecord | None:
        merged_at = parse_timestamp(entry.get("merged_at"))
        if merged_at is None or merged_at <= since:
            return None
        return PullRequestRecord(
            number=entry["number"],
            title=entry["title"],
            url=entry["html_url"],
            merged_at=merged_at,
        )

    return _map_entries(payload, _map, "pulls")


async def fetch_recent_commits(
    session: aiohttp.ClientSession,
    config: Config,
    now: datetime,
) -> list[CommitRecord]:
    """Fetch commits authored since the window start.

    Args:
        session: aiohttp client session
        config: Application configuration (repo, API URL, timeout)
        now: Run start instant

    Returns:
        CommitRecords, or an empty list if the API is unavailable
    """
    since = window_start(now)
    payload = await fetch_json(
        session,
        _repo_url(config, "commits"),
        timeout=config.request_timeout,
        headers=GITHUB_HEADERS,
        params={"since": to_iso(since), "per_page": str(COMMITS_PER_PAGE)},
    )
    if payload is None:
        logger.error("Error fetching commits | repo=%s", config.github_repo)
        return []
    commits = parse_commits(payload)
    logger.info("Commits fetched | repo=%s count=%d", config.github_repo, len(commits))
    return commits


async def fetch_recent_releases(
    session: aiohttp.ClientSession,
    config: Config,
    now: datetime,
) -> list[ReleaseRecord]:
    """Fetch the latest releases and keep those published in the window."""
    payload = await fetch_json(
        session,
        _repo_url(config, "releases"),
        timeout=config.request_timeout,
        headers=GITHUB_HEADERS,
        params={"per_page": str(RELEASES_PER_PAGE)},
    )
    if payload is None:
        logger.error("Error fetching releases | repo=%s", config.github_repo)
        return []
    releases = parse_releases(payload, window_start(now))
    logger.info("Releases fetched | repo=%s count=%d", config.github_repo, len(releases))
    return releases


async def fetch_recent_pull_requests(
    session: aiohttp.ClientSession,
    config: Config,
    now: datetime,
) -> list[PullRequestRecord]:
    """Fetch recently updated closed pull requests and keep those merged in the window."""
    payload = await fetch_json(
        session,
        _repo_url(config, "pulls"),
        timeout=config.request_timeout,
        headers=GITHUB_HEADERS,
        params={"state": "closed", "sort": "updated", "per_page": str(PULLS_PER_PAGE)},
    )
    if payload is None:
        logger.error("Error fetching pull requests | repo=%s", config.github_repo)
        return []
    pulls = parse_pull_requests(payload, window_start(now))
    logger.info("Pull requests fetched | repo=%s count=%d", config.github_repo, len(pulls))
    return pulls
