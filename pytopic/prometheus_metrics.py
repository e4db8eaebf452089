"""Prometheus metrics export for PyTopic."""

from prometheus_client import Counter, Gauge, Histogram, start_http_server


# Module-level metrics (singleton pattern to avoid duplicate registration)
_metrics_initialized = False
_subscribes = None
_unsubscribes = None
_publishes = None
_matches = None
_rejected = None
_trie_nodes = None
_subscriptions = None
_match_time = None


def _init_metrics():
    """Initialize metrics only once."""
    global _metrics_initialized, _subscribes, _unsubscribes, _publishes, _matches
    global _rejected, _trie_nodes, _subscriptions, _match_time

    if _metrics_initialized:
        return

    _subscribes = Counter('pytopic_subscribes_total', 'Total subscribe calls')
    _unsubscribes = Counter('pytopic_unsubscribes_total', 'Total unsubscribe calls', ['result'])
    _publishes = Counter('pytopic_publishes_total', 'Total topic lookups')
    _matches = Counter('pytopic_matches_total', 'Total subscribers returned by lookups')
    _rejected = Counter('pytopic_rejected_total', 'Invalid filters or topics', ['kind'])

    _trie_nodes = Gauge('pytopic_trie_nodes', 'Nodes in the filter trie')
    _subscriptions = Gauge('pytopic_subscriptions', 'Active (subscriber, filter) bindings')

    _match_time = Histogram('pytopic_match_time_seconds', 'Topic lookup time',
                            buckets=[0.00001, 0.0001, 0.001, 0.01, 0.1])

    _metrics_initialized = True


class PrometheusMetrics:
    """Prometheus metrics collector."""

    _server_started = False

    def __init__(self, port: int = 9090):
        self.port = port
        _init_metrics()

        self.subscribes = _subscribes
        self.unsubscribes = _unsubscribes
        self.publishes = _publishes
        self.matches = _matches
        self.rejected = _rejected
        self.trie_nodes = _trie_nodes
        self.subscriptions = _subscriptions
        self.match_time = _match_time

    def start(self):
        """Start Prometheus metrics server."""
        if not PrometheusMetrics._server_started:
            start_http_server(self.port)
            PrometheusMetrics._server_started = True

    def record_subscribe(self):
        """Record a subscription."""
        self.subscribes.inc()

    def record_unsubscribe(self, removed: bool):
        """Record an unsubscribe attempt."""
        self.unsubscribes.labels(result="removed" if removed else "missing").inc()

    def record_publish(self, match_count: int, duration: float):
        """Record a topic lookup."""
        self.publishes.inc()
        self.matches.inc(match_count)
        self.match_time.observe(duration)

    def record_rejection(self, kind: str):
        """Record an invalid filter or topic."""
        self.rejected.labels(kind=kind).inc()

    def update_trie_size(self, node_count: int, subscription_count: int):
        """Update trie size gauges."""
        self.trie_nodes.set(node_count)
        self.subscriptions.set(subscription_count)
