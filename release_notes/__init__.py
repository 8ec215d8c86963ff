"""
Release Notes Generator - classify GitHub commits and render release notes.
"""

from .models import (
    Commit,
    CommitCategory,
    CommitStats,
    GroupBy,
    LinkedRequest,
    OutputFormat,
    ParsedMessage,
    RawCommit,
    ReleaseNotes,
    RenderOptions,
)
from .errors import InvalidFormatError, ReleaseNotesError, ToolError
from .parser import CommitParser
from .merger import enrich_commits, merge_linked_request
from .aggregator import build_release_notes, calculate_stats
from .renderer import ReleaseNotesRenderer, generate_release_notes
from .templates import TemplateStore

__all__ = [
    'Commit',
    'CommitCategory',
    'CommitStats',
    'GroupBy',
    'LinkedRequest',
    'OutputFormat',
    'ParsedMessage',
    'RawCommit',
    'ReleaseNotes',
    'RenderOptions',
    'InvalidFormatError',
    'ReleaseNotesError',
    'ToolError',
    'CommitParser',
    'enrich_commits',
    'merge_linked_request',
    'build_release_notes',
    'calculate_stats',
    'ReleaseNotesRenderer',
    'generate_release_notes',
    'TemplateStore',
]
