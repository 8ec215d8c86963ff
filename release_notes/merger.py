"""
Merge pull request metadata into parsed commits.

A commit whose message could not be classified (category ``other``) is
refined from the labels of its linked pull request. The pull request title
and body also fill in a terse commit title or a missing body.
"""

import dataclasses
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .models import Commit, CommitCategory, LinkedRequest

logger = logging.getLogger("release-notes.merger")

# First matching label wins.
LABEL_RULES: Tuple[Tuple[Tuple[str, ...], CommitCategory], ...] = (
    (("feature",), CommitCategory.FEATURE),
    (("bug", "fix"), CommitCategory.FIX),
    (("doc",), CommitCategory.DOCS),
    (("perf",), CommitCategory.PERF),
    (("refactor",), CommitCategory.REFACTOR),
    (("test",), CommitCategory.TEST),
    (("build",), CommitCategory.BUILD),
)


def _category_from_labels(labels: List[str]) -> Optional[CommitCategory]:
    for keywords, category in LABEL_RULES:
        if any(keyword in label for label in labels for keyword in keywords):
            return category
    return None


def merge_linked_request(commit: Commit, request: Optional[LinkedRequest]) -> Commit:
    """
    Return ``commit`` refined with the metadata of its linked pull request.

    The input is not modified. A missing request leaves the commit unchanged.
    """
    if request is None:
        return commit

    changes = {}
    if commit.category is CommitCategory.OTHER:
        labels = [label.lower() for label in request.labels]
        if any("breaking" in label for label in labels):
            changes["breaking"] = True
        category = _category_from_labels(labels)
        if category is not None:
            changes["category"] = category

    if len(request.title) > len(commit.title):
        changes["title"] = request.title

    if not commit.body and request.body:
        changes["body"] = request.body

    if not changes:
        return commit
    logger.debug("Enriched %s from #%d: %s", commit.sha[:7], request.number, sorted(changes))
    return dataclasses.replace(commit, **changes)


def enrich_commits(
    commits: Iterable[Commit],
    lookup: Callable[[int], Optional[LinkedRequest]],
) -> List[Commit]:
    """
    Apply merge_linked_request across a collection, preserving order.

    Args:
        commits: Parsed commits
        lookup: Returns the pull request for a number, or None when not found

    Returns:
        New list of commits; commits without a linked request pass through
    """
    enriched: List[Commit] = []
    for commit in commits:
        if commit.pr_number is None:
            enriched.append(commit)
            continue
        enriched.append(merge_linked_request(commit, lookup(commit.pr_number)))
    return enriched
