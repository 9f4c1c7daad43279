"""
Logging configuration for the Keymesh OAuth proxy.
Provides structured logging for social proof and prekey operations.
"""

import logging
import sys
from typing import Any, Dict

import structlog
from structlog.stdlib import LoggerFactory

from keymesh_proxy.core.config import settings


def setup_logging() -> None:
    """
    Configure structured logging for the application.
    Sets up different log formats for development and production environments.
    """

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _get_processor(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("motor").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)


def _get_processor():
    """Get the renderer for the current environment."""
    if settings.ENVIRONMENT == "production":
        return structlog.processors.JSONRenderer()
    else:
        return structlog.dev.ConsoleRenderer(colors=True)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog.stdlib.BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name)


def log_social_verification(
    platform: str,
    username: str,
    wallet_address: str = None,
    network_id: int = None,
    status: str = "success",
    **kwargs
) -> None:
    """
    Log social account verification operations.

    Args:
        platform: Social platform (twitter, facebook, github)
        username: Social account username
        wallet_address: Wallet address being linked
        network_id: Ethereum network partition
        status: Verification status
        **kwargs: Additional context
    """
    logger = get_logger("social.verification")
    logger.info(
        "Social verification",
        platform=platform,
        username=username,
        wallet_address=wallet_address,
        network_id=network_id,
        status=status,
        **kwargs
    )


def log_prekey_operation(
    operation: str,
    public_key: str,
    network_id: int = None,
    object_key: str = None,
    size: int = None,
    **kwargs
) -> None:
    """Log prekey uploads."""
    logger = get_logger("prekey.operation")
    logger.info(
        "Prekey operation",
        operation=operation,
        public_key=public_key,
        network_id=network_id,
        object_key=object_key,
        size=size,
        **kwargs
    )


def log_account_operation(
    operation: str,
    wallet_address: str = None,
    email: str = None,
    valid_sig: bool = None,
    **kwargs
) -> None:
    """Log account info writes."""
    logger = get_logger("account.operation")
    logger.info(
        "Account operation",
        operation=operation,
        wallet_address=wallet_address,
        email=email,
        valid_sig=valid_sig,
        **kwargs
    )


def log_error(error: Exception, context: Dict[str, Any] = None) -> None:
    """
    Log an error with context.

    Args:
        error: Exception instance
        context: Additional context information
    """
    logger = get_logger("error")
    logger.error(
        "An error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        exc_info=True
    )


def log_request(method: str, url: str, status_code: int, duration: float, **kwargs) -> None:
    """
    Log HTTP request details.

    Args:
        method: HTTP method
        url: Request URL
        status_code: Response status code
        duration: Request duration in seconds
        **kwargs: Additional context to log
    """
    logger = get_logger("http.request")
    logger.info(
        "HTTP request completed",
        method=method,
        url=url,
        status_code=status_code,
        duration=duration,
        **kwargs
    )
