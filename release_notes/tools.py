"""
Tool-call dispatch for the release notes generator.

Each tool takes a JSON-like argument mapping, validates it against its
schema and returns a single text payload.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from .errors import InvalidArgumentsError, ReleaseNotesError, ToolError, UnknownToolError
from .fetcher import detect_version
from .models import Commit, GroupBy, OutputFormat, RenderOptions
from .renderer import generate_release_notes
from .schemas import AnalyzeCommitsArgs, ConfigureTemplateArgs, GenerateNotesArgs
from .templates import TemplateStore

logger = logging.getLogger("release-notes.tools")


class ReleaseNotesTools:
    """
    Dispatch tool calls to the fetch, enrich and render pipeline.

    Args:
        fetcher: Object providing ``fetch_commits`` and ``enrich`` (see GitHubFetcher)
        templates: Store for configured templates, owned by the caller
        checkout_root: Directory holding local checkouts used for version detection
    """

    def __init__(self, fetcher: Any, templates: Optional[TemplateStore] = None,
                 checkout_root: Optional[Path] = None) -> None:
        self.fetcher = fetcher
        self.templates = templates if templates is not None else TemplateStore()
        self.checkout_root = checkout_root
        self._handlers: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "generate_release_notes": self.generate,
            "analyze_commits": self.analyze,
            "configure_template": self.configure_template,
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": "generate_release_notes",
                "description": "Generate release notes from commits in a given timeframe or commit range",
                "inputSchema": GenerateNotesArgs.model_json_schema(),
            },
            {
                "name": "analyze_commits",
                "description": "Analyze commits and provide statistics",
                "inputSchema": AnalyzeCommitsArgs.model_json_schema(),
            },
            {
                "name": "configure_template",
                "description": "Configure a custom template for release notes",
                "inputSchema": ConfigureTemplateArgs.model_json_schema(),
            },
        ]

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """
        Run the tool ``name``.

        Raises:
            UnknownToolError: If no tool has that name
            InvalidArgumentsError: If the arguments fail validation
            InvalidFormatError: If an unknown output encoding was requested
            ToolError: For any other failure, carrying its message
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownToolError(f"Unknown tool: {name}")

        try:
            return handler(arguments or {})
        except ValidationError as e:
            raise InvalidArgumentsError(f"Invalid arguments for {name}: {e}") from e
        except ReleaseNotesError:
            raise
        except Exception as e:
            logger.error("Tool %s failed: %s", name, e)
            raise ToolError(str(e) or "Unknown error") from e

    def _fetch(self, args: AnalyzeCommitsArgs) -> List[Commit]:
        time_range = args.time_range
        commit_range = args.commit_range
        commits = self.fetcher.fetch_commits(
            args.owner,
            args.repo,
            since=time_range.since if time_range else None,
            until=time_range.until if time_range else None,
            from_commit=commit_range.from_commit if commit_range else None,
            to_commit=commit_range.to_commit if commit_range else None,
        )
        return self.fetcher.enrich(args.owner, args.repo, commits)

    def generate(self, arguments: Dict[str, Any]) -> str:
        args = GenerateNotesArgs.model_validate(arguments)
        # Reject unknown encodings before touching the network
        output_format = OutputFormat.parse(args.format.type)

        template = None
        if args.format.template:
            template = self.templates.get(args.format.template)
            if template is None:
                logger.warning("Template '%s' is not configured", args.format.template)

        version = args.format.version or detect_version(args.owner, args.repo, self.checkout_root)
        commits = self._fetch(args)
        options = RenderOptions(
            group_by=GroupBy(args.format.group_by),
            output_format=output_format,
            include_stats=args.format.include_stats,
            version=version,
            template=template,
        )
        return generate_release_notes(commits, options)

    def analyze(self, arguments: Dict[str, Any]) -> str:
        args = AnalyzeCommitsArgs.model_validate(arguments)
        commits = self._fetch(args)
        return generate_release_notes(
            commits, RenderOptions(output_format=OutputFormat.JSON, include_stats=True)
        )

    def configure_template(self, arguments: Dict[str, Any]) -> str:
        args = ConfigureTemplateArgs.model_validate(arguments)
        self.templates.set(args.name, args.template)
        logger.info("Configured template '%s'", args.name)
        return json.dumps({"message": f"Template '{args.name}' configured successfully"})
