from prometheus_client import Counter, Histogram, generate_latest
from fastapi import Response

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

sessions_created_total = Counter('sessions_created_total', 'Total sessions issued')
sessions_extended_total = Counter('sessions_extended_total', 'Total sliding session extensions')

media_uploads_total = Counter(
    'media_uploads_total',
    'Blob uploads by bucket and outcome',
    ['bucket', 'outcome']
)

blob_deletes_total = Counter(
    'blob_deletes_total',
    'Blob deletions by bucket and outcome',
    ['bucket', 'outcome']
)


def metrics_endpoint():
    """Prometheus scrape endpoint"""
    return Response(content=generate_latest(), media_type="text/plain")
