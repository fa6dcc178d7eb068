"""Remote sources for the daily report.

GitHub (sources.github):
    fetch_recent_commits, fetch_recent_releases, fetch_recent_pull_requests

Web pages (sources.pages):
    fetch_doc_pages, fetch_release_notes

All fetchers take an aiohttp session plus the Config and resolve to an
empty list when their upstream is unavailable.
"""

from sources.github import fetch_recent_commits, fetch_recent_pull_requests, fetch_recent_releases
from sources.pages import fetch_doc_pages, fetch_release_notes

__all__ = [
    "fetch_recent_commits",
    "fetch_recent_releases",
    "fetch_recent_pull_requests",
    "fetch_doc_pages",
    "fetch_release_notes",
]
