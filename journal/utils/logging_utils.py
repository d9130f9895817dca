"""
Structured Logging with Analysis Correlation IDs.

Provides utilities for production-ready logging of insight runs:
- Analysis ID correlation across every log line of one invocation
- Structured JSON logging format
- Function timing
"""
import json
import logging
import time
import uuid
import threading
from functools import wraps

logger = logging.getLogger(__name__)

# Thread-local storage for analysis context
_analysis_context = threading.local()

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno',
    'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info',
    'thread', 'threadName', 'exc_info', 'exc_text',
    'message', 'taskName',
))


# ============================================================================
# ANALYSIS ID MANAGEMENT
# ============================================================================

def new_analysis_id() -> str:
    return str(uuid.uuid4())[:8]


def get_analysis_id():
    """Get current analysis ID, or None outside an analysis run."""
    return getattr(_analysis_context, 'analysis_id', None)


def set_analysis_id(analysis_id: str = None) -> str:
    """Set analysis ID in thread-local storage (generated when omitted)."""
    analysis_id = analysis_id or new_analysis_id()
    _analysis_context.analysis_id = analysis_id
    return analysis_id


def clear_analysis_context():
    """Clear all analysis context."""
    if hasattr(_analysis_context, 'analysis_id'):
        delattr(_analysis_context, 'analysis_id')


# ============================================================================
# STRUCTURED LOG FORMATTER
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in format:
    {"timestamp": "...", "level": "INFO", "analysis_id": "abc123", "message": "..."}
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'analysis_id': get_analysis_id(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


# ============================================================================
# LOGGING UTILITIES
# ============================================================================

def log_with_context(level: str, message: str, **extra):
    """
    Log with current analysis context and extra fields.

    Usage:
        log_with_context('info', 'Patterns extracted', field='energy', count=2)
    """
    log_func = getattr(logger, level.lower(), logger.info)
    log_func(message, extra=extra)


def log_function_call(log_args: bool = False, log_result: bool = False):
    """
    Decorator to log function entry/exit with timing.

    Usage:
        @log_function_call(log_args=True)
        def my_function(arg1, arg2):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            func_name = f"{func.__module__}.{func.__name__}"

            if log_args:
                log_with_context('debug', f'Entering {func_name}',
                                 func_args=str(args)[:200], func_kwargs=str(kwargs)[:200])

            start = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = (time.time() - start) * 1000
                log_with_context('error', f'Error in {func_name}: {e}',
                                 duration_ms=round(duration, 2),
                                 error_type=type(e).__name__)
                raise

            duration = (time.time() - start) * 1000
            if log_result:
                log_with_context('debug', f'Exited {func_name}',
                                 duration_ms=round(duration, 2),
                                 result=str(result)[:200])
            else:
                log_with_context('debug', f'Exited {func_name}',
                                 duration_ms=round(duration, 2))
            return result

        return wrapper
    return decorator
