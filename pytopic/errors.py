"""Exceptions raised by PyTopic."""


class PyTopicError(Exception):
    """Base class for PyTopic errors."""


class InvalidFilterError(PyTopicError, ValueError):
    """Raised when a subscription filter is empty or malformed."""

    def __init__(self, topic_filter, reason: str = "invalid filter"):
        self.topic_filter = topic_filter
        self.reason = reason
        super().__init__(f"{reason}: {topic_filter!r}")


class InvalidTopicError(PyTopicError, ValueError):
    """Raised when a published topic is empty or contains wildcards."""

    def __init__(self, topic, reason: str = "invalid topic"):
        self.topic = topic
        self.reason = reason
        super().__init__(f"{reason}: {topic!r}")
