"""
Middleware for request correlation, audit logging and metrics
"""
import logging
import json
import hashlib
import uuid
from django.utils.deprecation import MiddlewareMixin
from django.utils import timezone

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('audit')


class RequestIdMiddleware(MiddlewareMixin):
    """Attach a request id for correlation across logs."""

    HEADER = 'X-Request-ID'

    def process_request(self, request):
        rid = request.META.get('HTTP_X_REQUEST_ID')
        if not rid:
            rid = str(uuid.uuid4())
        request.request_id = rid
        return None

    def process_response(self, request, response):
        rid = getattr(request, 'request_id', None)
        if rid:
            response.headers.setdefault(self.HEADER, rid)
        return response


class AuditLoggingMiddleware(MiddlewareMixin):
    """
    Middleware to log all API requests for audit trail
    """

    # Endpoints to exclude from logging (noisy/frequent)
    EXCLUDED_PATHS = [
        '/api/schema/',
        '/api/docs/',
        '/static/',
    ]

    def should_log(self, path):
        """Check if this path should be logged"""
        for excluded in self.EXCLUDED_PATHS:
            if path.startswith(excluded):
                return False
        return path.startswith('/api/')

    def get_request_hash(self, request):
        """Hash method, path and arrival time so a log line can be referenced."""
        data = {
            'method': request.method,
            'path': request.path,
            'timestamp': timezone.now().isoformat(),
        }
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()

    def process_request(self, request):
        """Store request info for later logging"""
        if self.should_log(request.path):
            user = getattr(request, 'user', None)
            request._audit_log_data = {
                'method': request.method,
                'path': request.path,
                'remote_addr': self.get_client_ip(request),
                'user_id': getattr(user, 'id', None) if user is not None and user.is_authenticated else None,
                'request_hash': self.get_request_hash(request),
                'request_id': getattr(request, 'request_id', None),
            }
        return None

    def process_response(self, request, response):
        """Log the API response"""
        audit_data = getattr(request, '_audit_log_data', None)
        if audit_data is None:
            return response

        audit_logger.info(
            f"API_CALL|method={audit_data['method']}|endpoint={audit_data['path']}|"
            f"status={response.status_code}|user_id={audit_data['user_id']}|"
            f"ip={audit_data['remote_addr']}|"
            f"request_id={audit_data.get('request_id')}|hash={audit_data['request_hash']}"
        )

        if response.status_code >= 400:
            logger.warning(
                f"API Error: {audit_data['method']} {audit_data['path']} - "
                f"Status: {response.status_code} - User: {audit_data['user_id']}"
            )
        return response

    @staticmethod
    def get_client_ip(request):
        """Extract client IP address from request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            ip = x_forwarded_for.split(',')[0].strip()
        else:
            ip = request.META.get('REMOTE_ADDR')
        return ip


API_REQUEST_COUNT = Counter(
    'zafira_api_requests_total',
    'Total API requests',
    ['method', 'path', 'status'],
)
API_REQUEST_LATENCY = Histogram(
    'zafira_api_request_latency_seconds',
    'API request latency (seconds)',
    ['method', 'path'],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)


class MetricsMiddleware(MiddlewareMixin):
    """Prometheus request metrics for /api/* routes."""

    def process_request(self, request):
        request._metrics_start_ts = timezone.now()
        return None

    def process_response(self, request, response):
        if not getattr(request, 'path', '').startswith('/api/'):
            return response

        start = getattr(request, '_metrics_start_ts', None)
        if start is None:
            return response
        duration = (timezone.now() - start).total_seconds()

        method = getattr(request, 'method', 'GET')
        # Label by URL pattern; access keys and ids would make every path unique.
        match = getattr(request, 'resolver_match', None)
        path = getattr(match, 'route', None) or getattr(request, 'path', '')[:120]

        API_REQUEST_COUNT.labels(method=method, path=path, status=str(response.status_code)).inc()
        API_REQUEST_LATENCY.labels(method=method, path=path).observe(duration)
        return response
