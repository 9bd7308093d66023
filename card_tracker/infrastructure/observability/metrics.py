"""Prometheus metrics for backend calls and workflow outcomes"""

from prometheus_client import Counter, Histogram

# Backend API metrics
api_request_latency_histogram = Histogram(
    "card_tracker_api_request_seconds",
    "Tracker backend response time",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

api_failure_counter = Counter(
    "card_tracker_api_failures_total",
    "Failed tracker backend calls",
    ["operation", "kind"],  # network | http | decode
)

# Workflow metrics
workflow_outcome_counter = Counter(
    "card_tracker_workflow_outcomes_total",
    "Workflow submissions by result",
    ["workflow", "outcome"],  # invalid | failed | succeeded
)


def record_workflow_outcome(workflow: str, outcome: str) -> None:
    workflow_outcome_counter.labels(workflow=workflow, outcome=outcome).inc()
