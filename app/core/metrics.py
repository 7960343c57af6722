"""
Prometheus metrics shared by the API and background tasks
"""

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
ACTIVE_CONNECTIONS = Gauge('http_active_connections', 'Number of active HTTP connections')
WEBHOOK_COUNT = Counter('webhook_requests_total', 'Total webhook requests', ['status'])
DEPOSIT_COUNT = Counter('deposits_total', 'Total deposits processed', ['status'])
HABIT_COMPLETION_COUNT = Counter('habit_completions_total', 'Total habit check-ins', ['outcome'])
