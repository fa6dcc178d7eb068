"""Value records produced by the source fetchers.

Each record is built fresh every run from remote data and never read back.
Records are frozen so a fetched result cannot be mutated on its way to the
renderer.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommitRecord(BaseModel):
    """A commit authored inside the time window.

    Attributes:
        sha: Abbreviated commit id (first 7 characters)
        message: First line of the commit message
        author_name: Commit author display name
        authored_at: Author timestamp (UTC)
        url: Link to the commit on GitHub
    """

    model_config = ConfigDict(frozen=True)

    sha: str = Field(description="Abbreviated commit id")
    message: str = Field(description="First line of the commit message")
    author_name: str = Field(default="", description="Commit author name")
    authored_at: datetime = Field(description="Author timestamp (UTC)")
    url: str = Field(description="Commit page URL")


class ReleaseRecord(BaseModel):
    """A release published inside the time window."""

    model_config = ConfigDict(frozen=True)

    tag_name: str = Field(description="Release tag")
    name: str = Field(description="Display name (tag when the release is unnamed)")
    url: str = Field(description="Release page URL")
    published_at: datetime = Field(description="Publish timestamp (UTC)")
    body: str = Field(default="", description="Truncated release notes body")


class PullRequestRecord(BaseModel):
    """A pull request merged inside the time window."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(description="Pull request number")
    title: str = Field(description="Pull request title")
    url: str = Field(description="Pull request page URL")
    merged_at: datetime = Field(description="Merge timestamp (UTC)")


class DocPageRecord(BaseModel):
    """A page linked from the documentation index.

    ``last_updated`` is the time the index was scraped, not the page's
    real modification time.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(description="Last path segment of the page")
    url: str = Field(description="Absolute page URL")
    last_updated: datetime = Field(description="Scrape time (UTC)")
