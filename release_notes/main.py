#!/usr/bin/env python3
"""
Main driver script for the release notes generator.

This script provides the command-line interface and routes each subcommand
through the same tool dispatch used by programmatic callers.

Usage (example):
    python -m release_notes.main generate --owner octocat --repo Hello-World --from 2024-01-01 --stats
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ReleaseNotesError
from .fetcher import GitHubFetcher
from .models import GroupBy, OutputFormat
from .templates import TemplateStore
from .tools import ReleaseNotesTools

logger = logging.getLogger("release-notes")

TEMPLATE_NAME = "cli"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-notes",
        description="Generate release notes from GitHub commit history.",
    )
    parser.add_argument("--token", "-t", default=os.environ.get("GITHUB_TOKEN"),
                        help="GitHub token (defaults to $GITHUB_TOKEN)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_range_arguments(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--owner", "-u", required=True, help="GitHub owner/username")
        sub.add_argument("--repo", "-r", required=True, help="Repository name")
        sub.add_argument("--from", dest="since", help="Start date (ISO-8601)")
        sub.add_argument("--to", dest="until", help="End date (ISO-8601)")
        sub.add_argument("--from-commit", help="Oldest commit SHA to include")
        sub.add_argument("--to-commit", help="Commit SHA or branch to start from")
        sub.add_argument("--output", "-o", help="Write the result to this file instead of stdout")

    generate = subparsers.add_parser("generate", help="Render release notes")
    add_range_arguments(generate)
    generate.add_argument("--format", "-f", default=OutputFormat.MARKDOWN.value,
                          help="Output format: markdown, json or text")
    generate.add_argument("--group-by", "-g", default=GroupBy.CATEGORY.value,
                          choices=[g.value for g in GroupBy], help="Section grouping")
    generate.add_argument("--stats", action="store_true", help="Include commit statistics")
    generate.add_argument("--version", dest="release_version", help="Version label for the title")
    generate.add_argument("--template-file", type=Path, help="Template to register for this run")

    analyze = subparsers.add_parser("analyze", help="Print commit statistics as JSON")
    add_range_arguments(analyze)
    return parser


def build_arguments(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate parsed CLI flags into tool arguments."""
    arguments: Dict[str, Any] = {
        "owner": args.owner,
        "repo": args.repo,
        "timeRange": {"from": args.since, "to": args.until},
        "commitRange": {"fromCommit": args.from_commit, "toCommit": args.to_commit},
    }
    if args.command == "generate":
        arguments["format"] = {
            "type": args.format,
            "groupBy": args.group_by,
            "includeStats": args.stats,
            "version": args.release_version,
            "template": TEMPLATE_NAME if args.template_file else None,
        }
    return arguments


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the release notes generator.

    Parses command line arguments, runs the matching tool and writes its
    output to stdout or the requested file.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        if not args.token:
            logger.warning("No GitHub token supplied; unauthenticated requests are rate limited")

        tools = ReleaseNotesTools(GitHubFetcher(token=args.token), TemplateStore())
        if getattr(args, "template_file", None):
            tools.call("configure_template", {
                "name": TEMPLATE_NAME,
                "template": args.template_file.read_text(encoding="utf-8"),
            })

        tool_name = "generate_release_notes" if args.command == "generate" else "analyze_commits"
        logger.info("Running %s for %s/%s", tool_name, args.owner, args.repo)
        output = tools.call(tool_name, build_arguments(args))

        if args.output:
            logger.info("Writing result to %s", args.output)
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output)
        else:
            print(output)

    except KeyboardInterrupt:
        logger.info("Release notes generation interrupted by user")
        print("\nOperation cancelled by user")
        sys.exit(1)
    except (ReleaseNotesError, RuntimeError, OSError) as e:
        logger.error("Release notes generation failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
