"""Subscription index: string-level front end to the filter trie."""

import time
from typing import Hashable, Iterable, List, Optional, Set, Union

from .config import Config
from .errors import InvalidFilterError, InvalidTopicError
from .logger import Logger
from .metrics import Metrics
from .prometheus_metrics import PrometheusMetrics
from .tokenizer import join_tokens, tokenize
from .trie import FilterTrie
from .wildcard import WildcardMatcher


class Subscription:
    """A subscriber bound to a topic filter. Read-only, so it can be hashed."""

    __slots__ = ("_subscriber_id", "_topic_filter")

    def __init__(self, subscriber_id: Hashable, topic_filter: str):
        self._subscriber_id = subscriber_id
        self._topic_filter = topic_filter

    @property
    def subscriber_id(self) -> Hashable:
        return self._subscriber_id

    @property
    def topic_filter(self) -> str:
        return self._topic_filter

    def __eq__(self, other):
        if not isinstance(other, Subscription):
            return NotImplemented
        return (self.subscriber_id, self.topic_filter) == (other.subscriber_id, other.topic_filter)

    def __hash__(self):
        return hash((self.subscriber_id, self.topic_filter))

    def __str__(self):
        return f"({self.subscriber_id}, {self.topic_filter})"

    def __repr__(self):
        return f"Subscription({self.subscriber_id!r}, {self.topic_filter!r})"


class SubscriptionIndex:
    """Maps topic filters to subscribers and finds the subscribers for a topic.

    Not thread-safe. Wrap it with pytopic.locking when several threads or
    tasks share one index.
    """

    def __init__(self, config_file: Optional[str] = None, delimiter: Optional[str] = None,
                 config: Optional[Config] = None, logger: Optional[Logger] = None):
        self.config = config or Config(config_file)
        if delimiter is not None:
            self.config.set("index", "delimiter", delimiter)

        self.logger = logger or Logger(self.config.get("logging", "component", "index"),
                                       level=self.config.get("logging", "level", "INFO"))

        is_valid, errors = self.config.validate()
        if not is_valid:
            self.logger.error("Configuration validation failed", errors=errors)
            raise ValueError(f"Invalid configuration: {errors}")

        self.delimiter = self.config.get("index", "delimiter", "/")
        self.strict_topics = self.config.get("index", "strict_topics", True)
        self.unique_matches = self.config.get("index", "unique_matches", False)

        self.trie = FilterTrie()
        self.metrics = Metrics()

        if self.config.get("monitoring", "prometheus_enabled", False):
            prometheus_port = self.config.get("monitoring", "prometheus_port", 9090)
            self.prometheus_metrics = PrometheusMetrics(prometheus_port)
            self.prometheus_metrics.start()
            self.logger.info("Prometheus metrics enabled", port=self.prometheus_metrics.port)
        else:
            self.prometheus_metrics = None

    def subscribe(self, subscriber_id: Hashable, topic_filter: str):
        """Bind a subscriber to a filter. Subscribing twice is a no-op.

        Raises:
            InvalidFilterError: the filter is empty or uses wildcards incorrectly.
        """
        problem = WildcardMatcher.filter_problem(topic_filter, self.delimiter)
        if problem:
            self._reject("filter", problem, topic_filter=topic_filter)
            raise InvalidFilterError(topic_filter, problem)

        self.trie.insert(subscriber_id, tokenize(topic_filter, self.delimiter))

        self.metrics.record_subscribe(subscriber_id, topic_filter)
        if self.prometheus_metrics:
            self.prometheus_metrics.record_subscribe()
        self.logger.info("Subscription added", subscriber=subscriber_id, filter=topic_filter)

    def unsubscribe(self, subscriber_id: Hashable, topic_filter: str) -> bool:
        """Unbind a subscriber from a filter. Returns False if it was not bound."""
        removed = self.trie.remove(subscriber_id, tokenize(topic_filter, self.delimiter))

        self.metrics.record_unsubscribe(subscriber_id, topic_filter, removed)
        if self.prometheus_metrics:
            self.prometheus_metrics.record_unsubscribe(removed)

        if removed:
            self.logger.info("Subscription removed", subscriber=subscriber_id, filter=topic_filter)
        else:
            self.logger.debug("Unsubscribe for unknown subscription",
                              subscriber=subscriber_id, filter=topic_filter)
        return removed

    def unsubscribe_all(self, subscriber_id: Hashable) -> int:
        """Unbind a subscriber from every filter. Returns the number of filters removed."""
        removed = self.trie.remove_subscriber(subscriber_id)
        self.logger.info("Subscriber removed", subscriber=subscriber_id, filters=removed)
        return removed

    def publish(self, topic: str, unique: Optional[bool] = None) -> Union[List[Hashable], Set[Hashable]]:
        """Find the subscribers whose filters match topic.

        Returns a list with one entry per matching (subscriber, filter) binding,
        or a set when unique is true (defaults to the index.unique_matches setting).

        Raises:
            InvalidTopicError: strict topics are on and the topic is empty or has wildcards.
        """
        if self.strict_topics:
            problem = WildcardMatcher.topic_problem(topic)
            if problem:
                self._reject("topic", problem, topic=topic)
                raise InvalidTopicError(topic, problem)

        start = time.perf_counter()
        matches = self.trie.match(tokenize(topic, self.delimiter))
        duration = time.perf_counter() - start

        self.metrics.record_publish(topic, len(matches), duration)
        if self.prometheus_metrics:
            self.prometheus_metrics.record_publish(len(matches), duration)
        self.logger.debug("Topic matched", topic=topic, matches=len(matches))

        if unique is None:
            unique = self.unique_matches
        return set(matches) if unique else matches

    def add_subscription(self, subscription: Subscription):
        self.subscribe(subscription.subscriber_id, subscription.topic_filter)

    def remove_subscription(self, subscription: Subscription) -> bool:
        return self.unsubscribe(subscription.subscriber_id, subscription.topic_filter)

    def load(self, subscriptions: Iterable[Subscription]) -> int:
        """Add many subscriptions. Stops at the first invalid filter."""
        count = 0
        for subscription in subscriptions:
            self.add_subscription(subscription)
            count += 1
        return count

    def subscriptions(self, subscriber_id: Optional[Hashable] = None) -> List[Subscription]:
        """List stored subscriptions, optionally for one subscriber."""
        result = []
        for tokens, subscribers in self.trie.filters():
            topic_filter = join_tokens(tokens, self.delimiter)
            for sub_id in sorted(subscribers, key=str):
                if subscriber_id is None or sub_id == subscriber_id:
                    result.append(Subscription(sub_id, topic_filter))
        return result

    def stats(self) -> dict:
        """Get index statistics."""
        node_count = self.trie.node_count()
        subscription_count = len(self.trie)
        if self.prometheus_metrics:
            self.prometheus_metrics.update_trie_size(node_count, subscription_count)
        return self.metrics.get_stats(node_count, subscription_count)

    def _reject(self, kind: str, reason: str, **fields):
        self.metrics.record_rejection()
        if self.prometheus_metrics:
            self.prometheus_metrics.record_rejection(kind)
        self.logger.warn(f"Invalid {kind} rejected", reason=reason, **fields)

    def __contains__(self, subscription: Subscription) -> bool:
        return self.trie.contains(subscription.subscriber_id,
                                  tokenize(subscription.topic_filter, self.delimiter))

    def __len__(self):
        return len(self.trie)
