"""Operation statistics for a subscription index."""

import time
from typing import Dict
from collections import deque


class Metrics:
    """Track and report index activity."""

    def __init__(self):
        self.start_time = time.time()

        self.subscribes = 0
        self.unsubscribes = 0
        self.unsubscribe_misses = 0
        self.publishes = 0
        self.matches_returned = 0
        self.rejected = 0

        self.recent_operations = deque(maxlen=100)
        self.publish_times = deque(maxlen=100)

    def record_subscribe(self, subscriber_id, topic_filter: str):
        """Record a subscription."""
        self.subscribes += 1
        self.recent_operations.append(("subscribe", subscriber_id, topic_filter, time.time()))

    def record_unsubscribe(self, subscriber_id, topic_filter: str, removed: bool):
        """Record an unsubscribe attempt."""
        if removed:
            self.unsubscribes += 1
        else:
            self.unsubscribe_misses += 1
        self.recent_operations.append(("unsubscribe", subscriber_id, topic_filter, time.time()))

    def record_publish(self, topic: str, match_count: int, duration: float):
        """Record a topic lookup."""
        self.publishes += 1
        self.matches_returned += match_count
        self.publish_times.append(duration)
        self.recent_operations.append(("publish", None, topic, time.time()))

    def record_rejection(self):
        """Record an invalid filter or topic."""
        self.rejected += 1

    def get_stats(self, node_count: int, subscription_count: int) -> Dict:
        """Get current statistics."""
        uptime = time.time() - self.start_time

        avg_publish_time = 0.0
        if self.publish_times:
            avg_publish_time = sum(self.publish_times) / len(self.publish_times)

        avg_matches = 0.0
        if self.publishes:
            avg_matches = self.matches_returned / self.publishes

        return {
            "uptime_seconds": round(uptime, 2),
            "subscribes": self.subscribes,
            "unsubscribes": self.unsubscribes,
            "unsubscribe_misses": self.unsubscribe_misses,
            "publishes": self.publishes,
            "rejected": self.rejected,
            "node_count": node_count,
            "subscription_count": subscription_count,
            "avg_matches_per_publish": round(avg_matches, 2),
            "avg_publish_time_ms": round(avg_publish_time * 1000, 3)
        }
