"""
Exception types raised by the release notes generator.
"""


class ReleaseNotesError(Exception):
    """Base class for all errors surfaced to callers."""


class InvalidFormatError(ReleaseNotesError, ValueError):
    """An unrecognized output encoding was requested."""

    def __init__(self, requested: str) -> None:
        self.requested = requested
        super().__init__(f"Unsupported format: {requested}")


class ToolError(ReleaseNotesError):
    """A tool call failed; the message is meant for the caller."""


class UnknownToolError(ToolError):
    """The requested tool name is not registered."""


class InvalidArgumentsError(ToolError):
    """Tool arguments did not pass schema validation."""
