"""
Text normalization.

Canonicalizes whitespace in extracted text before chunking.

Dependencies: re (stdlib)
System role: First transformation applied to every extractor output
"""

import re

_CARRIAGE_RETURN = re.compile(r"\r")
_TRAILING_SPACE = re.compile(r"[ \t]+\n")
_BLANK_LINES = re.compile(r"\n{3,}")
_SPACE_RUN = re.compile(r"[ \t]+")


def normalize(raw: str) -> str:
    """
    Collapse line-ending and whitespace noise.

    Each carriage return becomes a newline, so CRLF turns into a paragraph
    break. Spaces before a newline are dropped, three or more newlines
    shrink to a paragraph break, runs of spaces and tabs shrink to one
    space, and the result is trimmed. Idempotent.

    Args:
        raw: Text as produced by an extractor

    Returns:
        str: Canonical text (possibly empty)
    """
    text = _CARRIAGE_RETURN.sub("\n", raw)
    text = _TRAILING_SPACE.sub("\n", text)
    text = _BLANK_LINES.sub("\n\n", text)
    text = _SPACE_RUN.sub(" ", text)
    return text.strip()
