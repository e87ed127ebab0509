"""Sentry initialization and configuration."""

import logging
import os
from typing import Dict, Any, Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

def init_sentry(
    dsn: Optional[str] = None,
    environment: str = "development",
    traces_sample_rate: float = 0.0,
) -> bool:
    """Initialize Sentry SDK for an import run.

    Args:
        dsn: Sentry DSN. If not provided, will try to get from SENTRY_DSN env var
        environment: Environment name (development, production, etc.)
        traces_sample_rate: Sample rate for performance monitoring

    Returns:
        True if the SDK was initialized
    """
    if os.getenv('DISABLE_SENTRY', '').lower() in ('true', '1', 'yes'):
        logger.info("Sentry is disabled via DISABLE_SENTRY environment variable")
        return False

    dsn = dsn or os.getenv('SENTRY_DSN')
    if not dsn:
        logger.debug("Sentry DSN not provided, skipping Sentry initialization")
        return False

    logging_integration = LoggingIntegration(
        level=logging.INFO,        # Capture info and above as breadcrumbs
        event_level=logging.ERROR  # Send errors as events
    )

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        integrations=[logging_integration],
        traces_sample_rate=traces_sample_rate,
        send_default_pii=False,
        max_breadcrumbs=50,
        attach_stacktrace=True,
        release=os.getenv('RELEASE_VERSION', 'development'),
    )

    logger.info(f"Sentry initialized for environment: {environment}")
    return True

def capture_error(error: Exception, extra_data: Optional[Dict[str, Any]] = None) -> None:
    """Capture an error with additional context.

    Args:
        error: The exception to capture
        extra_data: Additional context data to attach to the error
    """
    if extra_data:
        with sentry_sdk.new_scope() as scope:
            for key, value in extra_data.items():
                scope.set_extra(key, value)
            sentry_sdk.capture_exception(error)
    else:
        sentry_sdk.capture_exception(error)

def add_breadcrumb(
    message: str,
    category: Optional[str] = None,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None
) -> None:
    """Add a breadcrumb for debugging.

    Args:
        message: Breadcrumb message
        category: Category for grouping breadcrumbs
        level: Severity level (debug, info, warning, error)
        data: Additional structured data
    """
    sentry_sdk.add_breadcrumb(
        message=message,
        category=category,
        level=level,
        data=data
    )
