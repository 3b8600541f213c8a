"""
Text normalization. The single-line form feeds label-window and single-line
regex scans; line-oriented extractors (lot items) work on split_lines instead.
"""
from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def normalize(text: str | None) -> str:
    """Collapse every whitespace run, newlines included, into one space."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def split_lines(text: str | None) -> list[str]:
    """Raw lines, tolerant of CRLF and bare CR line endings."""
    if not text:
        return []
    return _LINE_BREAK.split(text)
