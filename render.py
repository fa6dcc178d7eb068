"""Markdown rendering for the daily report.

``render_report`` is a pure function of the Report and the generation
timestamp: rendering the same Report with the same ``generated_at`` always
produces identical text.
"""

from datetime import datetime

from models.report import Report
from timewindow import to_iso, utc_now

REPORT_TITLE = "Anthropic Claude Code Documentation Update"
MAX_DOC_PAGES = 20
MAX_RELEASE_NOTES = 10

FOOTER_LINES = [
    "---",
    "*Generated by [claude-code-anthropic-docs](https://github.com/ebowwa/claude-code-anthropic-docs) "
    "daily automation*",
    "*Data sourced from [anthropics/claude-code](https://github.com/anthropics/claude-code), "
    "[code.claude.com](https://code.claude.com/docs), "
    "and [platform.claude.com](https://platform.claude.com)*",
]


def _commit_lines(report: Report) -> list[str]:
    if not report.commits:
        return ["## GitHub Commits", "", "No commits in the last 24 hours.", ""]
    lines = [f"## GitHub Commits ({len(report.commits)})", ""]
    for commit in report.commits:
        lines.append(f"- [{commit.sha}]({commit.url}) - {commit.message}")
        lines.append(f"  - by {commit.author_name} at {to_iso(commit.authored_at)}")
    lines.append("")
    return lines


def _release_lines(report: Report) -> list[str]:
    if not report.releases:
        return ["## Releases", "", "No new releases in the last 24 hours.", ""]
    lines = [f"## Releases ({len(report.releases)})", ""]
    for release in report.releases:
        lines.append(f"- [{release.tag_name}]({release.url}) - {release.name}")
        lines.append(f"  - {release.body}")
        lines.append(f"  - Published: {to_iso(release.published_at)}")
    lines.append("")
    return lines


def _pull_request_lines(report: Report) -> list[str]:
    if not report.pull_requests:
        return ["## Merged Pull Requests", "", "No PRs merged in the last 24 hours.", ""]
    lines = [f"## Merged Pull Requests ({len(report.pull_requests)})", ""]
    for pr in report.pull_requests:
        lines.append(f"- [#{pr.number}]({pr.url}) - {pr.title}")
        lines.append(f"  - Merged: {to_iso(pr.merged_at)}")
    lines.append("")
    return lines


def _doc_lines(report: Report) -> list[str]:
    if not report.docs:
        return []
    lines = [
        f"## Documentation Pages ({len(report.docs)})",
        "",
        "*Current documentation pages available:*",
        "",
    ]
    lines.extend(f"- [{doc.title}]({doc.url})" for doc in report.docs[:MAX_DOC_PAGES])
    hidden = len(report.docs) - MAX_DOC_PAGES
    if hidden > 0:
        lines.extend(["", f"*... and {hidden} more pages*"])
    lines.append("")
    return lines


def _release_note_lines(report: Report) -> list[str]:
    if not report.release_notes:
        return []
    lines = ["## Platform Release Notes", ""]
    lines.extend(f"- {note}" for note in report.release_notes[:MAX_RELEASE_NOTES])
    hidden = len(report.release_notes) - MAX_RELEASE_NOTES
    if hidden > 0:
        lines.extend(["", f"*... and {hidden} more entries*"])
    lines.append("")
    return lines


def render_report(report: Report, generated_at: datetime | None = None) -> str:
    """Render a Report into the daily Markdown document.

    Args:
        report: Report to render
        generated_at: Timestamp for the "Generated" line; captured now if omitted

    Returns:
        Markdown text ending with a newline
    """
    if generated_at is None:
        generated_at = utc_now()

    lines = [
        f"# {REPORT_TITLE} - {report.date}",
        "",
        f"**Generated:** {to_iso(generated_at)}",
        "",
        "## Summary",
        "",
        report.summary,
        "",
    ]
    lines.extend(_commit_lines(report))
    lines.extend(_release_lines(report))
    lines.extend(_pull_request_lines(report))
    lines.extend(_doc_lines(report))
    lines.extend(_release_note_lines(report))
    lines.extend(FOOTER_LINES)

    return "\n".join(lines) + "\n"
