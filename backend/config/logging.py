# backend/config/logging.py
import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from config.settings import get_settings

settings = get_settings()

# Custom formatter with colors for console output
class ColoredFormatter(logging.Formatter):
    """Custom formatter with color coding for different log levels."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        levelname = record.levelname
        record.levelname = f"{color}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname

# JSON formatter for structured logging
class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        for attr in ('user', 'request_id', 'duration', 'ip_address', 'row_count'):
            if hasattr(record, attr):
                log_entry[attr] = getattr(record, attr)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def build_logging_config(log_file: Optional[str] = None) -> Dict[str, Any]:
    """Build the dictConfig mapping; file handlers are added only when a log file is configured."""
    log_file = settings.LOG_FILE if log_file is None else log_file
    console_handlers = ['console']
    file_handlers = []

    handlers: Dict[str, Any] = {
        'console': {
            'level': 'DEBUG' if settings.DEBUG else 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'colored' if settings.DEBUG else 'standard',
            'stream': 'ext://sys.stdout'
        },
    }

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers['file'] = {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'detailed',
            'filename': log_file,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 5,
            'encoding': 'utf8'
        }
        handlers['security_file'] = {
            'level': 'WARNING',
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'json' if not settings.DEBUG else 'detailed',
            'filename': os.path.join(log_dir, 'security.log'),
            'maxBytes': 10485760,  # 10MB
            'backupCount': 10,
            'encoding': 'utf8'
        }
        handlers['api_file'] = {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'json' if not settings.DEBUG else 'detailed',
            'filename': os.path.join(log_dir, 'api.log'),
            'maxBytes': 20971520,  # 20MB
            'backupCount': 7,
            'encoding': 'utf8'
        }
        file_handlers = ['file']

    def with_file(name: str) -> list:
        return [name] if name in handlers else []

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'detailed': {
                'format': '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(funcName)s(): %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'colored': {
                '()': ColoredFormatter,
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'json': {
                '()': JSONFormatter
            }
        },
        'handlers': handlers,
        'loggers': {
            '': {  # Root logger
                'handlers': console_handlers + file_handlers,
                'level': settings.LOG_LEVEL,
            },
            'uvicorn': {
                'handlers': console_handlers + with_file('api_file'),
                'level': 'INFO',
                'propagate': False
            },
            'uvicorn.access': {
                'handlers': with_file('api_file') or console_handlers,
                'level': 'INFO',
                'propagate': False
            },
            'sqlalchemy.engine': {
                'handlers': file_handlers or console_handlers,
                'level': 'INFO' if settings.DEBUG else 'WARNING',
                'propagate': False
            },
            'security': {
                'handlers': console_handlers + with_file('security_file'),
                'level': 'INFO',
                'propagate': False
            },
            'api': {
                'handlers': console_handlers + with_file('api_file'),
                'level': 'INFO',
                'propagate': False
            },
            'services': {
                'handlers': console_handlers + file_handlers,
                'level': 'DEBUG' if settings.DEBUG else 'INFO',
                'propagate': False
            },
            'database': {
                'handlers': console_handlers + file_handlers,
                'level': 'DEBUG' if settings.DEBUG else 'INFO',
                'propagate': False
            },
        }
    }

def setup_logging(log_file: Optional[str] = None):
    """Setup logging configuration."""
    logging.config.dictConfig(build_logging_config(log_file))

    # Set up specific loggers
    logging.getLogger("passlib").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)

def log_api_request(request_id: str, method: str, path: str, user: str = None):
    """Log API request information."""
    logger = get_logger("api")
    extra = {'request_id': request_id}
    if user:
        extra['user'] = user
    logger.info(f"{method} {path}", extra=extra)

def log_api_response(request_id: str, status_code: int, duration: float):
    """Log API response information."""
    logger = get_logger("api")
    extra = {'request_id': request_id, 'duration': duration}
    logger.info(f"Response: {status_code} ({duration:.3f}s)", extra=extra)

def log_security_event(event_type: str, user: str = None, details: str = None, ip_address: str = None):
    """Log security-related events. Failures are warnings, everything else is info."""
    logger = get_logger("security")
    extra = {}
    if user:
        extra['user'] = user
    if ip_address:
        extra['ip_address'] = ip_address

    message = f"Security Event: {event_type}"
    if details:
        message += f" - {details}"

    if "FAILURE" in event_type or "UNAUTHORIZED" in event_type or "INVALID" in event_type:
        logger.warning(message, extra=extra)
    else:
        logger.info(message, extra=extra)

def log_database_operation(operation: str, table: str, duration: float = None, row_count: int = None):
    """Log database operations."""
    logger = get_logger("database")
    extra = {}
    if duration:
        extra['duration'] = duration
    if row_count:
        extra['row_count'] = row_count

    message = f"DB Operation: {operation} - Table: {table}"
    if row_count:
        message += f" - Rows: {row_count}"

    logger.info(message, extra=extra)

# Export commonly used functions
__all__ = [
    "setup_logging",
    "build_logging_config",
    "get_logger",
    "log_api_request",
    "log_api_response",
    "log_security_event",
    "log_database_operation",
]
