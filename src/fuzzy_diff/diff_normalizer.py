"""Line normalization used for every content comparison."""

import re
from typing import List


_WHITESPACE_RUN = re.compile(r'\s+')
_PUNCTUATION_SPACING = re.compile(r'\s*([{}();,])\s*')


def normalize_line(line: str) -> str:
    """
    Map a line of text to a whitespace-insensitive matching key.

    Leading and trailing whitespace is dropped, internal whitespace runs collapse
    to a single space, and whitespace next to any of `{ } ( ) ; ,` is removed.

    Args:
        line: Line of source text

    Returns:
        Matching key; empty string for blank lines
    """
    stripped = line.strip()
    if not stripped:
        return ''

    collapsed = _WHITESPACE_RUN.sub(' ', stripped)
    return _PUNCTUATION_SPACING.sub(r'\1', collapsed)


def normalize_lines(lines: List[str]) -> List[str]:
    """Normalize each line in a sequence."""
    return [normalize_line(line) for line in lines]
