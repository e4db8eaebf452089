"""Wildcard filter validation and single-filter matching."""

from typing import List, Optional

from .tokenizer import (DEFAULT_DELIMITER, MULTI_LEVEL_WILDCARD, SINGLE_LEVEL_WILDCARD,
                        tokenize)


class WildcardMatcher:
    """Validates filters and topics, and matches one topic against one filter."""

    @staticmethod
    def match(topic_filter: str, topic: str, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """Match topic against a single filter. Supports + and # wildcards.

        + matches one level (e.g., sensors/+/temp matches sensors/k1/temp but not sensors/temp)
        # matches the parent level and any levels below it (e.g., sensors/# matches sensors and sensors/k1/temp)
        """
        if topic_filter == topic:
            return True

        return WildcardMatcher.match_tokens(tokenize(topic_filter, delimiter),
                                            tokenize(topic, delimiter))

    @staticmethod
    def match_tokens(filter_tokens: List[str], topic_tokens: List[str]) -> bool:
        """Match already tokenized levels."""
        for i, level in enumerate(filter_tokens):
            if level == MULTI_LEVEL_WILDCARD:
                return True
            if i >= len(topic_tokens):
                return False
            if level != SINGLE_LEVEL_WILDCARD and level != topic_tokens[i]:
                return False

        return len(filter_tokens) == len(topic_tokens)

    @staticmethod
    def filter_problem(topic_filter: str, delimiter: str = DEFAULT_DELIMITER) -> Optional[str]:
        """Describe what is wrong with a filter, or return None if it is valid."""
        if not topic_filter:
            return "empty filter"

        levels = tokenize(topic_filter, delimiter)
        for i, level in enumerate(levels):
            if level == MULTI_LEVEL_WILDCARD:
                if i != len(levels) - 1:
                    return "multi-level wildcard must be the last level"
            elif level == SINGLE_LEVEL_WILDCARD:
                continue
            elif MULTI_LEVEL_WILDCARD in level or SINGLE_LEVEL_WILDCARD in level:
                return "wildcard must occupy a whole level"

        return None

    @staticmethod
    def validate_filter(topic_filter: str, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """Validate wildcard filter syntax."""
        return WildcardMatcher.filter_problem(topic_filter, delimiter) is None

    @staticmethod
    def topic_problem(topic: str) -> Optional[str]:
        """Describe what is wrong with a published topic, or return None if it is valid."""
        if not topic:
            return "empty topic"

        if SINGLE_LEVEL_WILDCARD in topic or MULTI_LEVEL_WILDCARD in topic:
            return "wildcards are not allowed in published topics"

        return None

    @staticmethod
    def validate_topic(topic: str) -> bool:
        """Validate a published topic name."""
        return WildcardMatcher.topic_problem(topic) is None
