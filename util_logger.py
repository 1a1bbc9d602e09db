# ============================================================================
# MODULE CONTEXT - LOGGING
# ============================================================================
# STATUS: Shared Foundation - used by every API area
# PURPOSE: JSON-only structured logging for Azure Functions with Application Insights
# EXPORTS: ComponentType, LogLevel, LogContext, ContextLogger, JSONFormatter, LoggerFactory, log_exceptions
# INTERFACES: Enums, request context dataclass, logger adapter, factory, exception decorator
# DEPENDENCIES: enum, dataclasses, typing, datetime, logging, json, traceback (stdlib only!)
# SCOPE: All logging in the application
# PATTERNS: JSON-only output, per-request context adapter, Exception decorator pattern
# ENTRY_POINTS: LoggerFactory.create_logger(), LoggerFactory.with_context(), @log_exceptions
# ============================================================================

"""
Unified Logger System

Component loggers emit one JSON object per line on stdout. Application
Insights parses the `customDimensions` key, so every record carries the
component type and name. Triggers wrap their logger in a ContextLogger for
the duration of a request, which adds the request id, HTTP method and the
collection/feature the route targets.

Component loggers are module-level singletons shared by concurrent
invocations; request context lives only on the adapter.

Date: 19 OCT 2026
"""

from enum import Enum
from typing import Optional, Dict, Any, MutableMapping, Tuple
from datetime import datetime, timezone
from dataclasses import dataclass, asdict
import logging
import os
import sys
import json
import traceback
from functools import wraps


# ============================================================================
# COMPONENT TYPES - Aligned with the request pipeline
# ============================================================================

class ComponentType(Enum):
    """Layers of the request pipeline that own a logger."""
    TRIGGER = "trigger"    # HTTP entry point layer
    SERVICE = "service"    # Orchestration and writes
    ENGINE = "engine"      # Query translation and pagination


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)


# ============================================================================
# LOG CONTEXT - Request correlation
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """
    Correlation fields for a single HTTP request.
    """
    request_id: Optional[str] = None       # Caller-supplied or generated request ID
    method: Optional[str] = None           # HTTP verb
    collection_id: Optional[str] = None    # Collection the route targets
    feature_id: Optional[str] = None       # Feature the route targets

    def to_dict(self) -> Dict[str, Any]:
        """Non-empty fields, for customDimensions."""
        return {k: v for k, v in asdict(self).items() if v is not None}


class ContextLogger(logging.LoggerAdapter):
    """
    Adds a LogContext to every record of the wrapped component logger.

    Dimensions passed explicitly through `extra={'custom_dimensions': ...}`
    win over the context.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = kwargs.get('extra') or {}
        dims = dict(self.extra)
        dims.update(extra.get('custom_dimensions', {}))
        kwargs['extra'] = {**extra, 'custom_dimensions': dims}
        return msg, kwargs


# ============================================================================
# JSON FORMATTER - Structured logging for Azure Functions
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging in Azure Functions.
    Outputs logs in a format that Application Insights can automatically parse.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

class LoggerFactory:
    """
    Factory for component loggers.

    Example:
        logger = LoggerFactory.create_logger(ComponentType.SERVICE, "FeatureService")
        logger.info("Query returned 2/5 features")

        log = LoggerFactory.with_context(logger, LogContext(collection_id="parks"))
        log.warning("Rejected bbox")
    """

    # DEBUG_LOGGING=true lowers every component to DEBUG
    default_level = LogLevel.DEBUG if os.getenv('DEBUG_LOGGING', '').lower() == 'true' else LogLevel.INFO

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        level: Optional[LogLevel] = None
    ) -> logging.Logger:
        """
        Create (or reconfigure) the logger for one component.

        Args:
            component_type: Pipeline layer
            name: Component name (e.g., "FeatureService")
            level: Overrides the factory default level

        Returns:
            Configured Python logger named "<type>.<name>"
        """
        log_level = (level or cls.default_level).to_python_level()

        logger = logging.getLogger(f"{component_type.value}.{name}")
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

        # Allow propagation to Azure's root logger for Application Insights
        logger.propagate = True

        # Loggers are cached by name; wrap the unwrapped method only once
        original_log = getattr(logger, '_unwrapped_log', logger._log)
        logger._unwrapped_log = original_log

        def log_with_component(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
            extra = dict(extra or {})
            custom_dims = {
                'component_type': component_type.value,
                'component_name': name
            }
            custom_dims.update(extra.get('custom_dimensions', {}))
            extra['custom_dimensions'] = custom_dims

            original_log(level, msg, args, exc_info=exc_info, extra=extra,
                         stack_info=stack_info, stacklevel=stacklevel)

        logger._log = log_with_component

        return logger

    @staticmethod
    def with_context(logger: logging.Logger, context: LogContext) -> ContextLogger:
        """Request-scoped view of a component logger."""
        return ContextLogger(logger, context.to_dict())


# ============================================================================
# EXCEPTION DECORATOR - Automatic exception logging with context
# ============================================================================

def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[logging.Logger] = None):
    """
    Decorator to log exceptions with full context, then re-raise them.

    Can be used in three ways:
    1. With existing logger: @log_exceptions(logger=my_logger)
    2. With component info: @log_exceptions(ComponentType.SERVICE, "FeatureService")
    3. Simple: @log_exceptions() - uses function module and name

    Example:
        @log_exceptions(ComponentType.SERVICE, "FeatureService")
        def delete_feature(collection_id, feature_id):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if logger:
                log = logger
            elif component_type and component_name:
                log = LoggerFactory.create_logger(component_type, component_name)
            else:
                log = LoggerFactory.create_logger(
                    ComponentType.SERVICE,
                    func.__module__ or "unknown"
                )

            try:
                return func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Exception in {func.__name__}",
                    exc_info=True,
                    extra={
                        'custom_dimensions': {
                            'function_name': func.__name__,
                            'function_module': func.__module__,
                            'exception_type': type(e).__name__,
                            'exception_message': str(e),
                            'function_args': str(args)[:500],
                            'function_kwargs': str(kwargs)[:500],
                            'traceback': traceback.format_exc()
                        }
                    }
                )
                # Re-raise the exception - don't swallow it
                raise
        return wrapper
    return decorator
