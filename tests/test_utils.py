"""Tests for shared utilities."""

import os
import time
from datetime import date

import pytest

from utils import (
    cleanup_old_exports,
    format_plan_date,
    join_requirements,
    sanitize_for_path,
    split_requirements,
)


@pytest.mark.parametrize("text, expected", [
    ("Joel", "Joel"),
    ("[YourLastname]", "YourLastname"),
    ("Mary  Ann", "Mary_Ann"),
    ("a/b\\c:d", "abcd"),
    ("   ", "item"),
    ("", ""),
])
def test_sanitize_for_path(text, expected):
    assert sanitize_for_path(text) == expected


def test_sanitize_compact_style_is_short():
    assert sanitize_for_path("Supply chain and logistics!", style='compact') == "Supply_chain_an"


@pytest.mark.parametrize("value, expected", [
    (date(2026, 10, 17), "October 17, 2026"),
    (date(2025, 1, 5), "January 5, 2025"),
])
def test_format_plan_date(value, expected):
    assert format_plan_date(value) == expected


def test_format_plan_date_defaults_to_today():
    assert format_plan_date() == format_plan_date(date.today())


def test_split_requirements_one_per_line():
    assert split_requirements("Degree\r\nCertification\nExperience") == ["Degree", "Certification", "Experience"]
    assert split_requirements("") == []


def test_join_requirements_lowercases():
    assert join_requirements(["Degree in Biology", "SCUBA"]) == "degree in biology, scuba"
    assert join_requirements([]) == ""


def test_cleanup_old_exports(tmp_path):
    old_file = tmp_path / "Employment_Plan_Old.pdf"
    new_file = tmp_path / "Employment_Plan_New.pdf"
    old_file.write_bytes(b"%PDF")
    new_file.write_bytes(b"%PDF")
    forty_days_ago = time.time() - 40 * 24 * 3600
    os.utime(old_file, (forty_days_ago, forty_days_ago))

    cleanup_old_exports(str(tmp_path), days=30)

    assert not old_file.exists()
    assert new_file.exists()


def test_cleanup_missing_directory_is_noop(tmp_path):
    cleanup_old_exports(str(tmp_path / "missing"))
