"""Reading-time estimates for post bodies.

Words are maximal runs of ASCII letters and digits, so scripts without such
runs (CJK, for instance) undercount.
"""

import math
import re

DEFAULT_WORDS_PER_MINUTE = 200

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"[A-Za-z0-9]+")
_TAG_RE = re.compile(r"<[^>]*>")


def count_words(text: str) -> int:
    clean = _WHITESPACE_RE.sub(" ", text).strip()
    return len(_WORD_RE.findall(clean))


def estimate_read_minutes(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Estimate reading time in whole minutes, never less than one.

    Examples:
        >>> estimate_read_minutes("")
        1
        >>> estimate_read_minutes("word " * 201)
        2

    """
    if words_per_minute <= 0:
        msg = "words_per_minute must be positive"
        raise ValueError(msg)
    return max(1, math.ceil(count_words(text) / words_per_minute))


def estimate_read_minutes_from_html(html: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Estimate reading time from rendered markup."""
    text = _TAG_RE.sub(" ", html)
    return estimate_read_minutes(text, words_per_minute)
