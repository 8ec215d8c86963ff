"""
Commit message parsing module.

This module classifies raw commit messages using the Conventional Commits
grammar, falling back to keyword inference for free-form messages.
"""

import re
from typing import Dict, Optional, Tuple

from .models import Commit, CommitCategory, ParsedMessage, RawCommit

BREAKING_MARKER = "BREAKING CHANGE:"


class CommitParser:
    """
    Parse commit messages into a ParsedMessage.

    Structured form: ``<type>[(<scope>)][!]: <title>`` optionally followed by a
    blank line and a body. Anything else is classified by keyword search.
    """

    TYPE_TOKENS: Dict[str, CommitCategory] = {
        "feat": CommitCategory.FEATURE,
        "fix": CommitCategory.FIX,
        "docs": CommitCategory.DOCS,
        "perf": CommitCategory.PERF,
        "refactor": CommitCategory.REFACTOR,
        "test": CommitCategory.TEST,
        "build": CommitCategory.BUILD,
        "chore": CommitCategory.OTHER,
    }

    # Checked in order, first hit wins.
    KEYWORD_RULES: Tuple[Tuple[Tuple[str, ...], CommitCategory], ...] = (
        (("fix", "bug"), CommitCategory.FIX),
        (("feat",), CommitCategory.FEATURE),
        (("doc",), CommitCategory.DOCS),
        (("perf",), CommitCategory.PERF),
        (("test",), CommitCategory.TEST),
        (("build", "deps"), CommitCategory.BUILD),
        (("refactor",), CommitCategory.REFACTOR),
    )

    PR_PARENTHESIZED_RE = re.compile(r"\(#(\d+)\)")
    PR_PARAGRAPH_RE = re.compile(r"\n\n#(\d+)")

    @staticmethod
    def parse(message: str) -> ParsedMessage:
        """
        Classify a commit message. Never raises.

        Returns:
            ParsedMessage with category, scope, title, body and breaking flag
        """
        parsed = CommitParser._match_structured(message)
        if parsed is not None:
            return parsed
        return CommitParser._infer(message)

    @classmethod
    def _match_structured(cls, message: str) -> Optional[ParsedMessage]:
        length = len(message)
        pos = 0
        while pos < length and message[pos].isascii() and message[pos].isalpha():
            pos += 1
        category = cls.TYPE_TOKENS.get(message[:pos].lower())
        if category is None:
            return None

        scope = None
        if pos < length and message[pos] == "(":
            close = message.find(")", pos + 1)
            if close <= pos + 1:
                return None
            scope = message[pos + 1:close]
            pos = close + 1

        bang = pos < length and message[pos] == "!"
        if bang:
            pos += 1

        if pos >= length or message[pos] != ":":
            return None
        pos += 1
        while pos < length and message[pos].isspace():
            pos += 1

        line_end = message.find("\n", pos)
        if line_end == -1:
            line_end = length
        title = message[pos:line_end].strip()
        if not title:
            return None

        # The title line either ends the message or is followed by a blank line.
        rest = message[line_end:]
        if rest and not rest.startswith("\n\n"):
            return None

        return ParsedMessage(
            category=category,
            scope=scope,
            title=title,
            body=rest[2:].strip() or None,
            breaking=bang or BREAKING_MARKER in message,
        )

    @classmethod
    def _infer(cls, message: str) -> ParsedMessage:
        breaking = BREAKING_MARKER in message
        category = CommitCategory.OTHER
        if breaking:
            category = CommitCategory.BREAKING
        else:
            lowered = message.lower()
            for keywords, candidate in cls.KEYWORD_RULES:
                if any(keyword in lowered for keyword in keywords):
                    category = candidate
                    break

        title, _, remainder = message.partition("\n")
        return ParsedMessage(
            category=category,
            title=title.strip(),
            body=remainder.strip() or None,
            breaking=breaking,
        )

    @classmethod
    def extract_pr_number(cls, message: str) -> Optional[int]:
        """
        Find the pull request number referenced by a commit message.

        ``(#123)`` anywhere in the message wins over a paragraph that starts
        with ``#123``.
        """
        m = cls.PR_PARENTHESIZED_RE.search(message) or cls.PR_PARAGRAPH_RE.search(message)
        return int(m.group(1)) if m else None

    @staticmethod
    def to_commit(raw: RawCommit) -> Commit:
        """Build the canonical Commit record for a fetched commit."""
        parsed = CommitParser.parse(raw.message)
        return Commit(
            sha=raw.sha,
            category=parsed.category,
            scope=parsed.scope,
            title=parsed.title,
            body=parsed.body,
            breaking=parsed.breaking,
            author=raw.author,
            date=raw.date,
            pr_number=CommitParser.extract_pr_number(raw.message),
            url=raw.url,
        )
