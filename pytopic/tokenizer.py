"""Topic and filter tokenization."""

from typing import Iterable, List


DEFAULT_DELIMITER = "/"
SINGLE_LEVEL_WILDCARD = "+"
MULTI_LEVEL_WILDCARD = "#"
WILDCARD_TOKENS = frozenset((SINGLE_LEVEL_WILDCARD, MULTI_LEVEL_WILDCARD))


def tokenize(path: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    """Split a topic or filter string into levels.

    Empty levels are kept, so "a//b" gives ["a", "", "b"] and "/a" gives ["", "a"].
    """
    return path.split(delimiter)


def join_tokens(tokens: Iterable[str], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Join levels back into a topic or filter string."""
    return delimiter.join(tokens)
