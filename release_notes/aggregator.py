"""
Commit aggregation module.

Splits commits into breaking and regular changes, groups them for rendering
and computes summary statistics. All functions are pure: inputs are never
modified and input order is preserved within every bucket.
"""

import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Commit, CommitCategory, CommitStats, GroupBy, ReleaseNotes

NO_SCOPE_BUCKET = "other"


def split_breaking(commits: Sequence[Commit]) -> Tuple[List[Commit], List[Commit]]:
    """Return (breaking, non_breaking), each in input order."""
    breaking = [c for c in commits if c.breaking]
    regular = [c for c in commits if not c.breaking]
    return breaking, regular


def calculate_stats(commits: Sequence[Commit]) -> CommitStats:
    """Compute category, author and scope counts over the full collection."""
    stats = CommitStats(total_commits=len(commits))
    for commit in commits:
        stats.by_category[commit.category] += 1
        stats.by_author[commit.author] = stats.by_author.get(commit.author, 0) + 1
        if commit.scope:
            stats.by_scope[commit.scope] = stats.by_scope.get(commit.scope, 0) + 1
        if commit.breaking:
            stats.breaking_changes += 1
    return stats


def group_by_category(commits: Sequence[Commit]) -> Dict[CommitCategory, List[Commit]]:
    """
    Bucket commits by category, in enumeration order.

    Breaking commits go to the ``breaking`` bucket regardless of their own
    category.
    """
    grouped: Dict[CommitCategory, List[Commit]] = {category: [] for category in CommitCategory}
    for commit in commits:
        key = CommitCategory.BREAKING if commit.breaking else commit.category
        grouped[key].append(commit)
    return grouped


def group_by_scope(commits: Sequence[Commit]) -> Dict[str, List[Commit]]:
    """Bucket commits by scope in first-seen order; unscoped commits land in "other"."""
    grouped: Dict[str, List[Commit]] = {}
    for commit in commits:
        grouped.setdefault(commit.scope or NO_SCOPE_BUCKET, []).append(commit)
    return grouped


def group_by_author(commits: Sequence[Commit]) -> Dict[str, List[Commit]]:
    grouped: Dict[str, List[Commit]] = {}
    for commit in commits:
        grouped.setdefault(commit.author, []).append(commit)
    return grouped


def group_commits(commits: Sequence[Commit], group_by: GroupBy) -> Dict[str, List[Commit]]:
    """Dispatch to the grouping for ``group_by``; category keys become their string values."""
    if group_by is GroupBy.SCOPE:
        return group_by_scope(commits)
    if group_by is GroupBy.AUTHOR:
        return group_by_author(commits)
    return {category.value: members for category, members in group_by_category(commits).items()}


def build_release_notes(
    commits: Sequence[Commit],
    include_stats: bool = False,
    version: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> ReleaseNotes:
    """
    Assemble the release notes document for an ordered commit collection.

    Args:
        commits: Commits in the order they should appear (newest first from GitHub)
        include_stats: Whether to attach statistics over all commits
        version: Optional version label for the title
        now: Generation timestamp, defaults to the current UTC time

    Returns:
        ReleaseNotes with breaking and regular commits separated
    """
    breaking, regular = split_breaking(commits)
    return ReleaseNotes(
        version=version,
        generated_at=now or datetime.datetime.now(datetime.timezone.utc),
        breaking_changes=breaking,
        commits=regular,
        all_commits=list(commits),
        stats=calculate_stats(commits) if include_stats else None,
    )
