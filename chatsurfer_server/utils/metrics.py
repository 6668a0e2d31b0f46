"""
Metrics tracking utilities
"""
from prometheus_client import Counter, Histogram, Gauge
import structlog

logger = structlog.get_logger()

# Define metrics
request_counter = Counter(
    'chatsurfer_requests_total',
    'Total number of requests',
    ['method', 'endpoint', 'status']
)

request_duration = Histogram(
    'chatsurfer_request_duration_seconds',
    'Request duration',
    ['method', 'endpoint']
)

active_connections = Gauge(
    'chatsurfer_active_connections',
    'Number of active HTTP requests'
)

messages_served = Counter(
    'chatsurfer_messages_served_total',
    'Canned messages returned by the message routes',
    ['route']
)

search_counter = Counter(
    'chatsurfer_searches_total',
    'Search requests by outcome',
    ['outcome']
)

sent_messages = Counter(
    'chatsurfer_sent_messages_total',
    'Send-message requests accepted and discarded'
)

websocket_frames = Counter(
    'chatsurfer_websocket_frames_total',
    'Frames written to WebSocket peers',
    ['route']
)

websocket_sessions = Gauge(
    'chatsurfer_websocket_sessions',
    'Open WebSocket sessions',
    ['route']
)


def track_messages_served(count: int, route: str):
    """Track canned messages returned"""
    messages_served.labels(route=route).inc(count)
    logger.debug(
        "Messages served",
        count=count,
        route=route
    )


def track_search(outcome: str):
    """Track a search outcome ("ok" or "rejected")"""
    search_counter.labels(outcome=outcome).inc()
