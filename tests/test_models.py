"""Model helper tests"""

import datetime

import pytest

from release_notes.errors import InvalidFormatError
from release_notes.models import CommitCategory, CommitStats, OutputFormat, parse_date


def test_every_category_has_an_emoji():
    assert CommitCategory.BREAKING.emoji == "⚠️"
    assert CommitCategory.OTHER.emoji == "🔧"
    assert all(category.emoji for category in CommitCategory)


def test_category_order():
    assert [c.value for c in CommitCategory] == [
        "breaking", "feature", "fix", "docs", "perf", "refactor", "test", "build", "other",
    ]


@pytest.mark.parametrize("value,expected", [
    ("markdown", OutputFormat.MARKDOWN),
    ("JSON", OutputFormat.JSON),
    (OutputFormat.TEXT, OutputFormat.TEXT),
])
def test_output_format_parse(value, expected):
    assert OutputFormat.parse(value) is expected


def test_output_format_parse_rejects_unknown():
    with pytest.raises(InvalidFormatError) as exc_info:
        OutputFormat.parse("yaml")
    assert exc_info.value.requested == "yaml"
    assert str(exc_info.value) == "Unsupported format: yaml"


def test_parse_date_handles_zulu_and_naive():
    assert parse_date("2024-01-02T03:04:05Z") == datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
    assert parse_date("2024-01-02").tzinfo is not None


def test_stats_from_dict_fills_missing_categories():
    stats = CommitStats.from_dict({"total_commits": 1, "by_category": {"fix": 1}, "breaking_changes": 0})
    assert stats.by_category[CommitCategory.FIX] == 1
    assert stats.by_category[CommitCategory.DOCS] == 0
    assert len(stats.by_category) == 9
