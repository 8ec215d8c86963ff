"""Shared pytest fixtures for the release notes tests"""

import datetime
from typing import Callable, List, Optional

import pytest

from release_notes.models import Commit, CommitCategory

UTC = datetime.timezone.utc


@pytest.fixture
def now() -> datetime.datetime:
    return datetime.datetime(2024, 5, 1, 9, 30, tzinfo=UTC)


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    """Factory for Commit records with sensible defaults."""
    counter = {"n": 0}

    def _make(
        title: str = "do something",
        category: CommitCategory = CommitCategory.OTHER,
        scope: Optional[str] = None,
        body: Optional[str] = None,
        breaking: bool = False,
        author: str = "alice",
        pr_number: Optional[int] = None,
        sha: Optional[str] = None,
    ) -> Commit:
        counter["n"] += 1
        sha = sha or f"{counter['n']:040x}"
        return Commit(
            sha=sha,
            category=category,
            scope=scope,
            title=title,
            body=body,
            breaking=breaking,
            author=author,
            date=datetime.datetime(2024, 4, counter["n"] % 28 + 1, tzinfo=UTC),
            pr_number=pr_number,
            url=f"https://github.com/octo/demo/commit/{sha}",
        )

    return _make


class FakeFetcher:
    """Stands in for GitHubFetcher; records calls and returns canned commits."""

    def __init__(self, commits: List[Commit]) -> None:
        self.commits = commits
        self.fetch_calls = []
        self.enrich_calls = []
        self.error: Optional[Exception] = None

    def fetch_commits(self, owner, repo_name, since=None, until=None, from_commit=None, to_commit=None):
        self.fetch_calls.append({
            "owner": owner,
            "repo": repo_name,
            "since": since,
            "until": until,
            "from_commit": from_commit,
            "to_commit": to_commit,
        })
        if self.error:
            raise self.error
        return list(self.commits)

    def enrich(self, owner, repo_name, commits):
        self.enrich_calls.append((owner, repo_name))
        return commits


@pytest.fixture
def sample_commits(make_commit) -> List[Commit]:
    return [
        make_commit(
            "patch auth bypass",
            category=CommitCategory.FIX,
            body="BREAKING CHANGE: tokens invalidated",
            breaking=True,
            author="bob",
        ),
        make_commit("add search endpoint", category=CommitCategory.FEATURE, scope="api", pr_number=12),
        make_commit("fix pagination", category=CommitCategory.FIX, scope="api"),
        make_commit("update readme", category=CommitCategory.DOCS),
    ]


@pytest.fixture
def fake_fetcher(sample_commits) -> FakeFetcher:
    return FakeFetcher(sample_commits)
