"""
Data models for the release notes generator.

This module contains the shared data structures used across all modules.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import InvalidFormatError


class CommitCategory(str, Enum):
    """Closed set of change categories, in rendering order."""

    BREAKING = "breaking"
    FEATURE = "feature"
    FIX = "fix"
    DOCS = "docs"
    PERF = "perf"
    REFACTOR = "refactor"
    TEST = "test"
    BUILD = "build"
    OTHER = "other"

    @property
    def emoji(self) -> str:
        return CATEGORY_EMOJI[self]

    @property
    def heading(self) -> str:
        return self.value.capitalize()


CATEGORY_EMOJI: Dict[CommitCategory, str] = {
    CommitCategory.BREAKING: "⚠️",
    CommitCategory.FEATURE: "🚀",
    CommitCategory.FIX: "🐛",
    CommitCategory.DOCS: "📚",
    CommitCategory.PERF: "⚡",
    CommitCategory.REFACTOR: "♻️",
    CommitCategory.TEST: "🧪",
    CommitCategory.BUILD: "🏗️",
    CommitCategory.OTHER: "🔧",
}

SCOPE_EMOJI = "📦"
AUTHOR_EMOJI = "👤"
STATS_EMOJI = "📊"


class GroupBy(str, Enum):
    CATEGORY = "category"
    SCOPE = "scope"
    AUTHOR = "author"


class OutputFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    TEXT = "text"

    @classmethod
    def parse(cls, value: Any) -> "OutputFormat":
        """Resolve a requested encoding, raising InvalidFormatError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidFormatError(str(value)) from None


def parse_date(value: str) -> datetime.datetime:
    """Parse an ISO-8601 timestamp; values without an offset are taken as UTC."""
    # fromisoformat() on older interpreters does not accept a trailing "Z"
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


@dataclass
class RawCommit:
    """A commit as delivered by the retrieval layer, before classification."""
    sha: str
    message: str
    author: str
    date: datetime.datetime
    url: str


@dataclass
class ParsedMessage:
    """Classification of a single commit message."""
    category: CommitCategory
    title: str
    scope: Optional[str] = None
    body: Optional[str] = None
    breaking: bool = False


@dataclass
class Commit:
    """Canonical commit record flowing through the pipeline."""
    sha: str
    category: CommitCategory
    title: str
    author: str
    date: datetime.datetime
    url: str
    scope: Optional[str] = None
    body: Optional[str] = None
    breaking: bool = False
    pr_number: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sha": self.sha,
            "category": self.category.value,
            "scope": self.scope,
            "title": self.title,
            "body": self.body,
            "breaking": self.breaking,
            "author": self.author,
            "date": self.date.isoformat(),
            "pr_number": self.pr_number,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        return cls(
            sha=data["sha"],
            category=CommitCategory(data["category"]),
            scope=data.get("scope"),
            title=data["title"],
            body=data.get("body"),
            breaking=bool(data.get("breaking", False)),
            author=data["author"],
            date=parse_date(data["date"]),
            pr_number=data.get("pr_number"),
            url=data["url"],
        )


@dataclass
class LinkedRequest:
    """Metadata of a pull request referenced by a commit."""
    number: int
    title: str
    labels: List[str] = field(default_factory=list)
    body: Optional[str] = None


def _empty_category_counts() -> Dict[CommitCategory, int]:
    return {category: 0 for category in CommitCategory}


@dataclass
class CommitStats:
    """
    Summary statistics over a commit collection.

    ``by_category`` always carries all nine categories, while ``by_author``
    and ``by_scope`` only hold keys that were actually seen.
    """
    total_commits: int = 0
    by_category: Dict[CommitCategory, int] = field(default_factory=_empty_category_counts)
    by_author: Dict[str, int] = field(default_factory=dict)
    by_scope: Dict[str, int] = field(default_factory=dict)
    breaking_changes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_commits": self.total_commits,
            "by_category": {category.value: count for category, count in self.by_category.items()},
            "by_author": dict(self.by_author),
            "by_scope": dict(self.by_scope),
            "breaking_changes": self.breaking_changes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommitStats":
        by_category = _empty_category_counts()
        for key, count in data.get("by_category", {}).items():
            by_category[CommitCategory(key)] = count
        return cls(
            total_commits=data["total_commits"],
            by_category=by_category,
            by_author=dict(data.get("by_author", {})),
            by_scope=dict(data.get("by_scope", {})),
            breaking_changes=data["breaking_changes"],
        )


@dataclass
class ReleaseNotes:
    """Aggregated document ready for rendering."""
    generated_at: datetime.datetime
    breaking_changes: List[Commit] = field(default_factory=list)
    commits: List[Commit] = field(default_factory=list)
    version: Optional[str] = None
    stats: Optional[CommitStats] = None
    # Full input in caller order; not serialized
    all_commits: List[Commit] = field(default_factory=list, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "generated_at": self.generated_at.isoformat(),
            "breaking_changes": [c.to_dict() for c in self.breaking_changes],
            "commits": [c.to_dict() for c in self.commits],
            "stats": self.stats.to_dict() if self.stats else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseNotes":
        stats = data.get("stats")
        return cls(
            version=data.get("version"),
            generated_at=parse_date(data["generated_at"]),
            breaking_changes=[Commit.from_dict(c) for c in data.get("breaking_changes", [])],
            commits=[Commit.from_dict(c) for c in data.get("commits", [])],
            stats=CommitStats.from_dict(stats) if stats else None,
        )


@dataclass
class RenderOptions:
    """Options controlling how release notes are rendered."""
    group_by: GroupBy = GroupBy.CATEGORY
    output_format: OutputFormat = OutputFormat.MARKDOWN
    include_stats: bool = False
    version: Optional[str] = None
    template: Optional[str] = None
