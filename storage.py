"""Date-partitioned persistence for rendered reports.

Reports land at ``<root>/<YYYY>/<MM>/<DD>.<ext>``. Rerunning for the same
date replaces the earlier report. Writes go through a temporary file in the
target directory and ``os.replace``, so a failed run never leaves a
half-written report behind.

Unlike the fetchers, write failures are not absorbed: without a persisted
report the run has nothing to show, so the error propagates.
"""

import logging
import os
import tempfile
from datetime import date
from pathlib import Path

from timewindow import date_parts

logger = logging.getLogger(__name__)


def report_path(root: Path, day: date, ext: str = "md") -> Path:
    """Return the file path for ``day``'s report under ``root``.

    Example:
        >>> report_path(Path("daily"), date(2025, 3, 7))
        PosixPath('daily/2025/03/07.md')
    """
    parts = date_parts(day)
    return Path(root) / parts.year / parts.month / f"{parts.day}.{ext.lstrip('.')}"


def save_daily_report(
    markdown: str,
    day: date,
    root: Path,
    ext: str = "md",
) -> Path:
    """Write the rendered report for ``day``, overwriting any previous one.

    Args:
        markdown: Rendered report text
        day: Report calendar date
        root: Output root directory
        ext: File extension

    Returns:
        Path of the written report

    Raises:
        OSError: If the directory or file cannot be written
    """
    filepath = report_path(root, day, ext)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(markdown)
        os.replace(tmp_name, filepath)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Report saved | path=%s bytes=%d", filepath, len(markdown.encode("utf-8")))
    return filepath
