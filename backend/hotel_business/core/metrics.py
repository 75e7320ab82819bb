"""
Prometheus metrics for the booking path, payment sync, logins and the cache.
Exposed at /metrics.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking creation attempts',
    ['status']  # success, unavailable, rejected, error
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking creation latency, retries included',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_transitions = Counter(
    'booking_status_transitions_total',
    'Booking status changes applied by businesses',
    ['status']
)

payment_syncs = Counter(
    'payment_sync_total',
    'Payment writes caused by booking or settlement changes',
    ['action']  # created, updated, refunded, settled
)

# Database metrics
db_operations = Counter(
    'db_operations_total',
    'Database operations on the booking path',
    ['operation']  # read, write, retry
)

db_retries = Counter(
    'db_retry_attempts_total',
    'Booking retries caused by a concurrent claim on the same room'
)

# Auth metrics
business_login_failures = Counter(
    'business_login_failures_total',
    'Rejected business logins',
    ['reason']  # bad_password, locked
)

# Review moderation metrics
review_actions = Counter(
    'review_actions_total',
    'Review writes and moderation actions',
    ['action']  # created, reported, blocked
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Room list cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Status: success, unavailable, rejected, error"""
    booking_attempts.labels(status=status).inc()


def record_status_transition(status: str):
    booking_transitions.labels(status=status).inc()


def record_payment_sync(action: str):
    payment_syncs.labels(action=action).inc()


def record_login_failure(reason: str):
    business_login_failures.labels(reason=reason).inc()


def record_db_operation(operation: str):
    """Operation: read, write, retry"""
    db_operations.labels(operation=operation).inc()
    if operation == "retry":
        db_retries.inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()


def record_review_action(action: str):
    review_actions.labels(action=action).inc()
