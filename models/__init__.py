"""Pydantic models for the docdigest daily report.

CommitRecord:
    Commit authored in the window (short sha, first message line).

ReleaseRecord:
    Release published in the window (name falls back to tag).

PullRequestRecord:
    Pull request merged in the window.

DocPageRecord:
    Page linked from the documentation index.

Report:
    The aggregate for one day: summary plus every category above and
    the release note headings.

Example:
    >>> from models import Report
    >>> report = Report(date="2025-03-07", summary="No updates detected in the last 24 hours.")
"""

from models.records import CommitRecord, DocPageRecord, PullRequestRecord, ReleaseRecord
from models.report import Report

__all__ = [
    "CommitRecord",
    "ReleaseRecord",
    "PullRequestRecord",
    "DocPageRecord",
    "Report",
]
