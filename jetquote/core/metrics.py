"""Prometheus metrics for the quoting service"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest
import time
from functools import wraps
from typing import Callable

registry = CollectorRegistry()

# HTTP layer
request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

# Airport directory and fleet store
store_queries = Counter(
    'store_queries_total',
    'Queries against the airport directory and fleet store',
    ['operation', 'table', 'status'],
    registry=registry
)

store_query_duration = Histogram(
    'store_query_duration_seconds',
    'Store query duration in seconds',
    ['table', 'operation'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=registry
)

# Caches: "quote" is the Redis response cache, "airport_resolution" the in-process one
cache_hits = Counter(
    'cache_hits_total',
    'Total cache hits',
    ['cache_key'],
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Total cache misses',
    ['cache_key'],
    registry=registry
)

# Quoting
airport_resolutions = Counter(
    'airport_resolutions_total',
    'Airport resolutions by the tier that produced them',
    ['matched_by'],
    registry=registry
)

quotes_generated = Counter(
    'quotes_generated_total',
    'Aircraft offers returned, by trip type',
    ['trip_type'],
    registry=registry
)

unpriceable_aircraft = Counter(
    'unpriceable_aircraft_total',
    'Aircraft listed without a price',
    ['reason'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)

db_connected = Gauge(
    'db_connected',
    'Database connection status (1=connected, 0=disconnected)',
    registry=registry
)


def track_db_operation(operation: str, table: str):
    """Count and time an async store query, labelled by outcome"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            status = 'error'
            try:
                result = await func(*args, **kwargs)
                status = 'success'
                return result
            finally:
                store_queries.labels(operation=operation, table=table, status=status).inc()
                store_query_duration.labels(table=table, operation=operation).observe(time.time() - start_time)
        return wrapper
    return decorator


def get_metrics_text() -> str:
    return generate_latest(registry).decode('utf-8')
