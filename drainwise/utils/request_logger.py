"""
Request logging with timing and process memory
"""
import time
import logging
import json
from flask import request, g
import psutil
from drainwise.utils.owner import get_current_owner_id
from drainwise.utils.timezone_utils import utc_now, format_datetime_for_api

logger = logging.getLogger(__name__)

# URL parameters of the configuration routes worth carrying into the log line
_ROUTE_FIELDS = (
    ('config_id', 'config_id'),
    ('section', 'section'),
    ('key', 'option_key'),
    ('pipe_size_key', 'pipe_size_key'),
    ('category_id', 'category_id'),
)


class RequestLogger:
    """Request logging with performance metrics"""

    @staticmethod
    def before_request():
        """Record request start time and initial memory"""
        g.start_time = time.time()
        g.request_id = f"{int(time.time() * 1000000)}"  # Microsecond precision

        try:
            g.initial_memory = psutil.Process().memory_info().rss
        except psutil.Error as e:
            logger.debug(f"Could not collect initial process memory: {e}")
            g.initial_memory = 0

    @staticmethod
    def after_request(response):
        """Log one line per request; WARNING for 4xx, ERROR for 5xx"""
        if not hasattr(g, 'start_time'):
            return response

        duration_ms = (time.time() - g.start_time) * 1000

        memory_diff = 0
        try:
            if getattr(g, 'initial_memory', 0) > 0:
                memory_diff = psutil.Process().memory_info().rss - g.initial_memory
        except psutil.Error as e:
            logger.debug(f"Could not collect final process memory: {e}")

        log_data = {
            'timestamp': format_datetime_for_api(utc_now()),
            'request_id': getattr(g, 'request_id', 'unknown'),
            'method': request.method,
            'path': request.path,
            'endpoint': request.endpoint,
            'owner_id': get_current_owner_id(),
            'duration_ms': round(duration_ms, 2),
            'status_code': response.status_code,
            'memory_delta_mb': round(memory_diff / (1024 * 1024), 3) if memory_diff > 0 else 0,
        }

        view_args = request.view_args or {}
        for arg, field in _ROUTE_FIELDS:
            if arg in view_args:
                log_data[field] = view_args[arg]

        if request.args:
            log_data['query_params'] = dict(request.args)

        log_level = logging.INFO
        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400:
            log_level = logging.WARNING

        logger.log(log_level, f"REQUEST_LOG: {json.dumps(log_data, default=str)}")

        return response
