"""Aggregate report model for one calendar day."""

from pydantic import BaseModel, ConfigDict, Field

from models.records import CommitRecord, DocPageRecord, PullRequestRecord, ReleaseRecord


class Report(BaseModel):
    """Everything fetched in one run, plus the derived summary sentence.

    Attributes:
        date: Run date as YYYY-MM-DD (not per-item dates)
        summary: Human-readable one-line summary
        commits: Commits authored in the window
        releases: Releases published in the window
        pull_requests: Pull requests merged in the window
        docs: Documentation pages found on the index
        release_notes: Headings from the platform release notes page
    """

    model_config = ConfigDict(frozen=True)

    date: str = Field(description="Report date (YYYY-MM-DD)")
    summary: str = Field(description="Summary sentence")
    commits: list[CommitRecord] = Field(default_factory=list)
    releases: list[ReleaseRecord] = Field(default_factory=list)
    pull_requests: list[PullRequestRecord] = Field(default_factory=list)
    docs: list[DocPageRecord] = Field(default_factory=list)
    release_notes: list[str] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        """Per-category item counts, in report order."""
        return {
            "commits": len(self.commits),
            "releases": len(self.releases),
            "pull_requests": len(self.pull_requests),
            "docs": len(self.docs),
            "release_notes": len(self.release_notes),
        }
