"""
Prometheus metrics registration and helpers.

Exports:
- observe_request(...): record HTTP request metrics
- observe_order_created(...): count placed orders
- observe_payment_verification(...): record gateway verification outcomes
- observe_email(...): count transactional email attempts
- metrics_latest(): return text exposition from correct registry (handles multiprocess)
- CONTENT_TYPE_LATEST: correct Prometheus content type
"""

import os
from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess


REQUEST_COUNTER = Counter(
    'sf_http_requests_total', 'Total HTTP requests', ['endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'sf_http_request_latency_seconds', 'HTTP request latency seconds', ['endpoint']
)

ORDERS_CREATED = Counter(
    'sf_orders_created_total', 'Orders placed at checkout'
)

ORDER_VALUE = Histogram(
    'sf_order_value', 'Order totals in store currency', buckets=[
        50, 100, 250, 500, 1000, 2500, 5000, 10000
    ]
)

PAYMENT_VERIFICATIONS = Counter(
    'sf_payment_verifications_total', 'Payment gateway verification outcomes', ['result']
)

PAYMENT_GATEWAY_LATENCY = Histogram(
    'sf_payment_gateway_latency_seconds', 'Payment gateway call latency seconds', ['operation']
)

EMAILS_SENT = Counter(
    'sf_emails_total', 'Transactional email attempts', ['kind', 'result']
)


def observe_request(endpoint: str, status: int, latency_seconds: float) -> None:
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency_seconds)


def observe_order_created(total_amount) -> None:
    ORDERS_CREATED.inc()
    ORDER_VALUE.observe(float(total_amount))


def observe_payment_verification(result: str) -> None:
    PAYMENT_VERIFICATIONS.labels(result=result).inc()


def observe_gateway_call(operation: str, latency_seconds: float) -> None:
    PAYMENT_GATEWAY_LATENCY.labels(operation=operation).observe(latency_seconds)


def observe_email(kind: str, sent: bool) -> None:
    EMAILS_SENT.labels(kind=kind, result='sent' if sent else 'failed').inc()


def metrics_latest() -> bytes:
    """Return the Prometheus text exposition, multiprocess-aware if configured."""
    prom_mp_dir = os.getenv('PROMETHEUS_MULTIPROC_DIR')
    if prom_mp_dir:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return generate_latest(registry)
    # Default registry
    return generate_latest()
