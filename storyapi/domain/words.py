"""Word counting used as input to the story word-count rules."""
from __future__ import annotations

import re

# ASCII \W: anything outside [A-Za-z0-9_] separates words.
NON_WORD_PATTERN = re.compile(r"\W", re.ASCII)


def count_words(text: str | None) -> int:
    """Return the number of words in text.

    Every non-word character becomes a space before splitting on whitespace,
    so "well-formed, text!" counts as 3 and punctuation-only text as 0.
    """
    if not text:
        return 0
    return len(NON_WORD_PATTERN.sub(" ", text).split())
