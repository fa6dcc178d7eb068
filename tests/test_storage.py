"""Tests for date-partitioned report persistence."""

from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from storage import report_path, save_daily_report


def test_report_path_layout():
    assert report_path(Path("daily"), date(2025, 3, 7)) == Path("daily/2025/03/07.md")
    assert report_path(Path("out"), date(2024, 11, 23), ext=".txt") == Path("out/2024/11/23.txt")


def test_save_creates_directories(tmp_path):
    path = save_daily_report("# hello\n", date(2025, 3, 7), tmp_path / "daily")

    assert path == tmp_path / "daily" / "2025" / "03" / "07.md"
    assert path.read_text(encoding="utf-8") == "# hello\n"


def test_save_overwrites_same_date(tmp_path):
    root = tmp_path / "daily"
    save_daily_report("first", date(2025, 3, 7), root)
    path = save_daily_report("second", date(2025, 3, 7), root)

    assert path.read_text(encoding="utf-8") == "second"
    assert sorted(p.name for p in path.parent.iterdir()) == ["07.md"]


def test_failed_write_leaves_no_partial_file(tmp_path):
    root = tmp_path / "daily"
    save_daily_report("original", date(2025, 3, 7), root)

    with patch("storage.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            save_daily_report("replacement", date(2025, 3, 7), root)

    target = root / "2025" / "03" / "07.md"
    assert target.read_text(encoding="utf-8") == "original"
    assert sorted(p.name for p in target.parent.iterdir()) == ["07.md"]


def test_unwritable_root_raises(tmp_path):
    blocker = tmp_path / "daily"
    blocker.write_text("not a directory")

    with pytest.raises(OSError):
        save_daily_report("text", date(2025, 3, 7), blocker)
