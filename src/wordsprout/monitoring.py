"""Monitoring configuration for the vocabulary engine."""
from prometheus_client import Counter, Histogram, start_http_server

# Ingestion metrics
words_ingested = Counter(
    "wordsprout_words_ingested_total",
    "Total number of candidate words processed by ingestion",
)

new_words = Counter(
    "wordsprout_new_words_total",
    "Total number of words seen by a learner for the first time",
)

reading_sessions = Counter(
    "wordsprout_reading_sessions_total",
    "Total number of ingested reading sessions",
)

# Mastery metrics
practice_results = Counter(
    "wordsprout_practice_results_total",
    "Total number of recorded practice results",
    ["outcome"],
)

status_transitions = Counter(
    "wordsprout_status_transitions_total",
    "Total number of word status transitions",
    ["from_status", "to_status"],
)

# Global statistics metrics
resync_runs = Counter(
    "wordsprout_resync_runs_total",
    "Total number of global word statistics resyncs",
)

resync_failures = Counter(
    "wordsprout_resync_failures_total",
    "Total number of failed global word statistics resyncs",
)

resync_duration = Histogram(
    "wordsprout_resync_duration_seconds",
    "Duration of global word statistics resyncs in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# Prioritization metrics
prioritization_requests = Counter(
    "wordsprout_prioritization_requests_total",
    "Total number of prioritized word list requests",
)

# Database metrics
db_errors = Counter(
    "wordsprout_db_errors_total",
    "Total number of database errors",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
