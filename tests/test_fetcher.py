"""GitHubFetcher tests with a mocked PyGithub client"""

import datetime
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from github import GithubException, UnknownObjectException

from release_notes.fetcher import GitHubFetcher, detect_version
from release_notes.models import CommitCategory

UTC = datetime.timezone.utc


def gh_commit(sha, message, name="Alice", day=1, login="alice-gh"):
    return SimpleNamespace(
        sha=sha,
        html_url=f"https://github.com/octo/demo/commit/{sha}",
        author=SimpleNamespace(login=login),
        commit=SimpleNamespace(
            message=message,
            author=SimpleNamespace(name=name, date=datetime.datetime(2024, 1, day, tzinfo=UTC)),
        ),
    )


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def repo(client):
    return client.get_repo.return_value


@pytest.fixture
def fetcher(client):
    return GitHubFetcher(client=client)


class TestFetchCommits:

    def test_commits_are_parsed(self, fetcher, repo, client):
        repo.get_commits.return_value = [
            gh_commit("c2", "feat(api): add search (#4)\n", day=2),
            gh_commit("c1", "updated the docs", name=None, day=1),
        ]
        commits = fetcher.fetch_commits("octo", "demo")

        client.get_repo.assert_called_once_with("octo/demo")
        repo.get_commits.assert_called_once_with()
        assert [c.sha for c in commits] == ["c2", "c1"]
        assert commits[0].category is CommitCategory.FEATURE
        assert commits[0].scope == "api"
        assert commits[0].pr_number == 4
        assert commits[0].author == "Alice"
        assert commits[1].category is CommitCategory.DOCS
        assert commits[1].author == "alice-gh"

    def test_range_parameters(self, fetcher, repo):
        repo.get_commits.return_value = []
        fetcher.fetch_commits("octo", "demo", since="2024-01-01T00:00:00Z", to_commit="release")
        repo.get_commits.assert_called_once_with(
            sha="release", since=datetime.datetime(2024, 1, 1, tzinfo=UTC)
        )

    def test_until_filters_newer_commits(self, fetcher, repo):
        repo.get_commits.return_value = [gh_commit("c3", "fix: c", day=3), gh_commit("c2", "fix: b", day=2)]
        commits = fetcher.fetch_commits("octo", "demo", until="2024-01-02T12:00:00Z")
        assert [c.sha for c in commits] == ["c2"]

    def test_from_commit_date_becomes_since(self, fetcher, repo):
        start = datetime.datetime(2023, 12, 24, tzinfo=UTC)
        repo.get_commit.return_value = SimpleNamespace(commit=SimpleNamespace(author=SimpleNamespace(date=start)))
        repo.get_commits.return_value = []
        fetcher.fetch_commits("octo", "demo", from_commit="abc123")
        repo.get_commit.assert_called_once_with("abc123")
        repo.get_commits.assert_called_once_with(since=start)

    def test_from_commit_falls_back_to_sha_filtering(self, fetcher, repo):
        repo.get_commit.side_effect = GithubException(404, {"message": "Not Found"}, None)
        repo.get_commits.return_value = [
            gh_commit("c3", "fix: newest", day=3),
            gh_commit("c2abcdef", "fix: start", day=2),
            gh_commit("c1", "fix: older", day=1),
        ]
        commits = fetcher.fetch_commits("octo", "demo", from_commit="c2abc")
        assert [c.sha for c in commits] == ["c3", "c2abcdef"]

    def test_api_failure_is_wrapped(self, fetcher, repo):
        repo.get_commits.side_effect = GithubException(500, {"message": "boom"}, None)
        with pytest.raises(RuntimeError, match="Failed to fetch commits for octo/demo"):
            fetcher.fetch_commits("octo", "demo")

    def test_repository_is_cached(self, fetcher, repo, client):
        repo.get_commits.return_value = []
        fetcher.fetch_commits("octo", "demo")
        fetcher.fetch_commits("octo", "demo")
        assert client.get_repo.call_count == 1


class TestPullRequests:

    def test_fetch_pull_request(self, fetcher, repo):
        repo.get_pull.return_value = SimpleNamespace(
            number=5, title="Add export", labels=[SimpleNamespace(name="feature")], body="Details"
        )
        request = fetcher.fetch_pull_request("octo", "demo", 5)
        repo.get_pull.assert_called_once_with(5)
        assert request.number == 5
        assert request.title == "Add export"
        assert request.labels == ["feature"]
        assert request.body == "Details"

    def test_missing_pull_request(self, fetcher, repo):
        repo.get_pull.side_effect = UnknownObjectException(404, {"message": "Not Found"}, None)
        assert fetcher.fetch_pull_request("octo", "demo", 5) is None

    def test_other_errors_propagate(self, fetcher, repo):
        repo.get_pull.side_effect = GithubException(403, {"message": "rate limited"}, None)
        with pytest.raises(RuntimeError, match="pull request #5"):
            fetcher.fetch_pull_request("octo", "demo", 5)

    def test_enrich(self, fetcher, repo, make_commit):
        repo.get_pull.return_value = SimpleNamespace(
            number=7, title="Speed up the importer", labels=[SimpleNamespace(name="Performance")], body=None
        )
        commits = [make_commit("tweak", pr_number=7), make_commit("other thing")]
        enriched = fetcher.enrich("octo", "demo", commits)
        assert enriched[0].category is CommitCategory.PERF
        assert enriched[0].title == "Speed up the importer"
        assert enriched[1] is commits[1]
        repo.get_pull.assert_called_once_with(7)


class TestDetectVersion:

    def test_package_json(self, tmp_path):
        checkout = tmp_path / "octo" / "demo"
        checkout.mkdir(parents=True)
        (checkout / "package.json").write_text(json.dumps({"version": "1.4.0"}), encoding="utf-8")
        assert detect_version("octo", "demo", tmp_path) == "1.4.0"

    def test_pyproject(self, tmp_path):
        checkout = tmp_path / "octo" / "demo"
        checkout.mkdir(parents=True)
        (checkout / "pyproject.toml").write_text('[project]\nname = "demo"\nversion = "0.9.1"\n', encoding="utf-8")
        assert detect_version("octo", "demo", tmp_path) == "0.9.1"

    def test_missing_checkout(self, tmp_path):
        assert detect_version("octo", "demo", tmp_path) is None

    def test_invalid_package_json(self, tmp_path):
        checkout = tmp_path / "octo" / "demo"
        checkout.mkdir(parents=True)
        (checkout / "package.json").write_text("{not json", encoding="utf-8")
        assert detect_version("octo", "demo", tmp_path) is None
