"""
GitHub data fetching module.

This module handles all GitHub API interactions for fetching commit history
and pull request metadata using PyGithub.
"""

import datetime
import json
import logging
import tomllib
from pathlib import Path
from typing import Dict, List, Optional

from .merger import enrich_commits
from .models import Commit, LinkedRequest, RawCommit, parse_date
from .parser import CommitParser

# External libs
try:
    from github import Auth, Github, GithubException, UnknownObjectException
    from github.Repository import Repository
except Exception as e:
    raise RuntimeError("PyGithub is required. Install with: pip install PyGithub") from e

# Set up logging
logger = logging.getLogger("release-notes.fetcher")


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


class GitHubFetcher:
    """
    Fetch commits and pull requests from GitHub using PyGithub.

    Args:
        token: Personal access token (or None for unauthenticated, but rate-limited).
    """

    def __init__(self, token: Optional[str] = None, client: Optional[Github] = None) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: GitHub personal access token for authentication.
                  If None, uses unauthenticated access (rate limited).
            client: Pre-built PyGithub client, used instead of ``token``.
        """
        self._repos: Dict[str, Repository] = {}
        if client is not None:
            self._g = client
            return
        try:
            self._g = Github(auth=Auth.Token(token)) if token else Github()
            logger.debug("GitHub client initialized (authenticated=%s)", bool(token))
        except Exception as e:
            logger.error("Failed to initialize GitHub client: %s", e)
            raise RuntimeError(f"GitHub client initialization failed: {e}") from e

    def _repo(self, owner: str, repo_name: str) -> Repository:
        full_name = f"{owner}/{repo_name}"
        if full_name not in self._repos:
            self._repos[full_name] = self._g.get_repo(full_name)
        return self._repos[full_name]

    def fetch_commits(
        self,
        owner: str,
        repo_name: str,
        since: Optional[str] = None,
        until: Optional[str] = None,
        from_commit: Optional[str] = None,
        to_commit: Optional[str] = None,
    ) -> List[Commit]:
        """
        Fetch and classify the commits of a range, newest first.

        Args:
            owner: Repository owner username
            repo_name: Repository name
            since: ISO-8601 lower bound on the author date
            until: ISO-8601 upper bound on the author date
            from_commit: Oldest commit SHA to include; its date replaces ``since``
            to_commit: SHA or branch to start listing from (default branch if None)

        Returns:
            List of parsed Commit records

        Raises:
            RuntimeError: If commits cannot be fetched
        """
        try:
            repo = self._repo(owner, repo_name)
            since_date = parse_date(since) if since else None
            until_date = parse_date(until) if until else None

            sha_filter = None
            if from_commit:
                try:
                    since_date = _as_utc(repo.get_commit(from_commit).commit.author.date)
                    logger.info("Using date from %s: %s", from_commit[:7], since_date.isoformat())
                except GithubException as e:
                    logger.warning(
                        "Failed to get date for %s (%s), falling back to SHA-based filtering",
                        from_commit, e,
                    )
                    sha_filter = from_commit

            params = {}
            if to_commit:
                params["sha"] = to_commit
            if since_date:
                params["since"] = since_date

            logger.info("Fetching commits from %s/%s", owner, repo_name)
            result: List[Commit] = []
            for c in repo.get_commits(**params):
                commit_obj = c.commit
                author = commit_obj.author
                date = _as_utc(author.date) if author and author.date else datetime.datetime.now(datetime.timezone.utc)

                if until_date and date > until_date:
                    continue

                name = author.name if author and author.name else (c.author.login if c.author else "unknown")
                raw = RawCommit(
                    sha=c.sha,
                    message=commit_obj.message.strip(),
                    author=name,
                    date=date,
                    url=c.html_url,
                )
                logger.debug("Processing commit %s: %s", c.sha[:7], raw.message.split("\n")[0])
                result.append(CommitParser.to_commit(raw))

                # Newest first: the range ends at from_commit.
                if sha_filter and c.sha.startswith(sha_filter):
                    break

            logger.info("Successfully fetched %d commits from %s/%s", len(result), owner, repo_name)
            return result

        except Exception as e:
            error_msg = f"Failed to fetch commits for {owner}/{repo_name}: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e

    def fetch_pull_request(self, owner: str, repo_name: str, number: int) -> Optional[LinkedRequest]:
        """
        Fetch a pull request's title, labels and body.

        Returns:
            LinkedRequest, or None if the pull request does not exist

        Raises:
            RuntimeError: For any failure other than "not found"
        """
        try:
            pr = self._repo(owner, repo_name).get_pull(number)
        except UnknownObjectException:
            logger.debug("Pull request #%d not found in %s/%s", number, owner, repo_name)
            return None
        except Exception as e:
            error_msg = f"Failed to fetch pull request #{number} for {owner}/{repo_name}: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e

        return LinkedRequest(
            number=pr.number,
            title=pr.title or "",
            labels=[label.name for label in pr.labels],
            body=pr.body,
        )

    def enrich(self, owner: str, repo_name: str, commits: List[Commit]) -> List[Commit]:
        """Merge linked pull request metadata into ``commits``."""
        linked = sum(1 for c in commits if c.pr_number is not None)
        logger.info("Enriching %d commits with pull request data", linked)
        return enrich_commits(commits, lambda number: self.fetch_pull_request(owner, repo_name, number))


def detect_version(owner: str, repo_name: str, root: Optional[Path] = None) -> Optional[str]:
    """
    Read the version of a local checkout at ``<root>/<owner>/<repo>``.

    Looks at package.json first, then pyproject.toml. Returns None if neither
    yields a version.
    """
    checkout = (root or Path.cwd()) / owner / repo_name

    try:
        with open(checkout / "package.json", encoding="utf-8") as f:
            version = json.load(f).get("version")
        if version:
            return str(version)
    except (OSError, ValueError, AttributeError) as e:
        logger.debug("No version in package.json for %s/%s: %s", owner, repo_name, e)

    try:
        with open(checkout / "pyproject.toml", "rb") as f:
            version = tomllib.load(f).get("project", {}).get("version")
        if version:
            return str(version)
    except (OSError, ValueError, AttributeError) as e:
        logger.debug("No version in pyproject.toml for %s/%s: %s", owner, repo_name, e)

    return None
