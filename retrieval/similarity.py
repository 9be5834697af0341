"""
Lexical similarity between short texts.

Texts are normalized (lower-cased, punctuation stripped), split into sets of unique
tokens, and compared with the Jaccard index. All functions here are pure.
"""
import re
from typing import Set

_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9\s]")


def normalize(text: str) -> str:
    """
    Lower-cases `text`, removes every character that is not a lowercase letter,
    a digit or whitespace, and trims surrounding whitespace.

    >>> normalize("  Log-in, NOW!  ")
    'login now'
    """
    return _NON_TOKEN_CHARS.sub("", text.lower()).strip()


def token_set(text: str) -> Set[str]:
    """Splits the normalized text on runs of whitespace into a set of unique tokens."""
    return set(normalize(text).split())


def similarity(a: str, b: str) -> float:
    """
    Returns the Jaccard index of the token sets of `a` and `b`, in [0.0, 1.0].

    Two texts without any tokens score 0.0 rather than 1.0, so empty content is
    never treated as identical to anything.
    """
    tokens_a = token_set(a)
    tokens_b = token_set(b)
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)
