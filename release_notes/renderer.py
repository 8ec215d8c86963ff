"""
Release notes rendering module.

This module contains the ReleaseNotesRenderer class responsible for turning
an aggregated ReleaseNotes document into markdown, JSON or plain text.
"""

import datetime
import json
import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .aggregator import build_release_notes, group_commits
from .models import (
    AUTHOR_EMOJI,
    SCOPE_EMOJI,
    STATS_EMOJI,
    Commit,
    CommitCategory,
    GroupBy,
    OutputFormat,
    ReleaseNotes,
    RenderOptions,
)

logger = logging.getLogger("release-notes.renderer")

HEADING_RE = re.compile(r"^#+\s*", re.MULTILINE)
BULLET_RE = re.compile(r"^[-*]\s*", re.MULTILINE)


class ReleaseNotesRenderer:
    """
    Render a ReleaseNotes document in one of the supported encodings.

    Markdown is the primary encoding; plain text is derived from it and JSON
    is a lossless dump of the document.
    """

    def render(
        self,
        notes: ReleaseNotes,
        group_by: GroupBy = GroupBy.CATEGORY,
        output_format: Union[OutputFormat, str] = OutputFormat.MARKDOWN,
    ) -> str:
        """
        Render ``notes``.

        Raises:
            InvalidFormatError: If ``output_format`` is not a known encoding
        """
        fmt = OutputFormat.parse(output_format)
        group_by = GroupBy(group_by)
        if fmt is OutputFormat.JSON:
            return self.to_json(notes)
        if fmt is OutputFormat.TEXT:
            return self.to_text(notes, group_by)
        return self.to_markdown(notes, group_by)

    def to_markdown(self, notes: ReleaseNotes, group_by: GroupBy = GroupBy.CATEGORY) -> str:
        lines: List[str] = []

        # Header
        title = "# Release Notes"
        if notes.version:
            title += f" ({notes.version})"
        lines.append(title)
        generated = f"> Generated on {notes.generated_at.strftime('%Y-%m-%d')}"
        if notes.stats:
            generated += (
                f" | Total Commits: {notes.stats.total_commits}"
                f" | Breaking Changes: {notes.stats.breaking_changes}"
            )
        lines.append(generated)
        lines.append("")

        if notes.breaking_changes:
            lines.append(f"## {CommitCategory.BREAKING.emoji} Breaking Changes\n")
            self._append_entries(lines, notes.breaking_changes, include_scope=True)
            lines.append("")

        # Breaking commits already have their own section in category mode only.
        if group_by is GroupBy.CATEGORY:
            members_to_group: Sequence[Commit] = notes.commits
        else:
            # Decoded documents lose the interleaving; breaking commits then come first
            members_to_group = notes.all_commits or notes.breaking_changes + notes.commits

        for group, members in group_commits(members_to_group, group_by).items():
            if not members:
                continue
            if group_by is GroupBy.CATEGORY and group == CommitCategory.BREAKING.value:
                continue
            lines.append(self._section_title(group, group_by) + "\n")
            self._append_entries(lines, members, include_scope=group_by is not GroupBy.SCOPE)
            lines.append("")

        if notes.stats:
            lines.extend(self._stats_lines(notes))

        return "\n".join(lines)

    def to_text(self, notes: ReleaseNotes, group_by: GroupBy = GroupBy.CATEGORY) -> str:
        """Markdown with heading and bullet markers stripped; emoji are kept."""
        text = HEADING_RE.sub("", self.to_markdown(notes, group_by))
        text = BULLET_RE.sub("", text)
        return text.strip()

    def to_json(self, notes: ReleaseNotes) -> str:
        return json.dumps(notes.to_dict(), indent=2, ensure_ascii=False)

    @staticmethod
    def format_commit(commit: Commit, include_scope: bool = True) -> str:
        """Single-line entry: emoji, optional scope, title, breaking tag, PR link."""
        scope = f"({commit.scope}) " if commit.scope and include_scope else ""
        breaking = " [BREAKING]" if commit.breaking else ""
        pr_link = f" (#{commit.pr_number})" if commit.pr_number is not None else ""
        return f"{commit.category.emoji} {scope}{commit.title}{breaking}{pr_link}"

    def _append_entries(self, lines: List[str], commits: Sequence[Commit], include_scope: bool) -> None:
        for commit in commits:
            lines.append(f"- {self.format_commit(commit, include_scope)}")
            if commit.body:
                lines.append("  - " + commit.body.replace("\n", "\n  - "))

    @staticmethod
    def _section_title(group: str, group_by: GroupBy) -> str:
        if group_by is GroupBy.SCOPE:
            return f"## {SCOPE_EMOJI} {group}"
        if group_by is GroupBy.AUTHOR:
            return f"## {AUTHOR_EMOJI} {group}"
        category = CommitCategory(group)
        return f"## {category.emoji} {category.heading}"

    @staticmethod
    def _stats_lines(notes: ReleaseNotes) -> List[str]:
        stats = notes.stats
        lines = [f"## {STATS_EMOJI} Detailed Statistics\n", "### Commits by Type"]
        for category, count in stats.by_category.items():
            if count > 0:
                lines.append(f"- {category.emoji} {category.value}: {count}")

        if stats.by_scope:
            lines.append("\n### Commits by Scope")
            for scope, count in _by_count_desc(stats.by_scope):
                lines.append(f"- {SCOPE_EMOJI} {scope}: {count}")

        lines.append("\n### Commits by Author")
        for author, count in _by_count_desc(stats.by_author):
            lines.append(f"- {AUTHOR_EMOJI} {author}: {count}")
        return lines


def _by_count_desc(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    # sorted() is stable, so ties keep first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def generate_release_notes(
    commits: Sequence[Commit],
    options: Optional[RenderOptions] = None,
    now: Optional[datetime.datetime] = None,
) -> str:
    """
    Aggregate and render commits in one step.

    Args:
        commits: Parsed (and optionally enriched) commits, in display order
        options: Rendering options; defaults to category-grouped markdown
        now: Generation timestamp override

    Returns:
        The rendered document

    Raises:
        InvalidFormatError: If the requested encoding is unknown; nothing is rendered
    """
    options = options or RenderOptions()
    fmt = OutputFormat.parse(options.output_format)
    group_by = GroupBy(options.group_by)
    if options.template:
        logger.debug("Template supplied (%d chars); rendering with built-in layout", len(options.template))
    notes = build_release_notes(
        commits,
        include_stats=options.include_stats,
        version=options.version,
        now=now,
    )
    logger.debug(
        "Rendering %d commits (%d breaking) as %s grouped by %s",
        len(commits), len(notes.breaking_changes), fmt.value, group_by.value,
    )
    return ReleaseNotesRenderer().render(notes, group_by, fmt)
