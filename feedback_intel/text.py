"""Text normalisation and lexical overlap scoring."""
import re
from typing import AbstractSet, Iterable, List, Optional

from feedback_intel.utils.config import DEFAULT_STOPWORDS

MIN_TOKEN_LENGTH = 3

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, turn punctuation into spaces and collapse whitespace."""
    if not text:
        return ""
    clean_text = _NON_ALNUM.sub(" ", str(text).lower())
    return _WHITESPACE.sub(" ", clean_text).strip()


def tokenize(text: Optional[str], stopwords: AbstractSet[str] = DEFAULT_STOPWORDS) -> List[str]:
    """
    Split free text into normalised tokens.

    Tokens shorter than three characters and stopwords are dropped. Order and
    duplicates are preserved.

    Args:
        text: Free text, may be None or empty
        stopwords: Words to drop

    Returns:
        List of tokens, empty for empty input
    """
    normalised = normalize_text(text)
    if not normalised:
        return []
    return [
        token for token in normalised.split(" ")
        if len(token) >= MIN_TOKEN_LENGTH and token not in stopwords
    ]


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """
    Jaccard similarity of two token collections, treated as sets.

    Two empty collections score 0.0, so textless documents never match.
    """
    set_a = set(a)
    set_b = set(b)
    if not set_a and not set_b:
        return 0.0
    intersection = len(set_a & set_b)
    union = len(set_a) + len(set_b) - intersection
    return intersection / union if union else 0.0
