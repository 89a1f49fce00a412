"""
Centralized timeout configuration for remote operations.

Timeout values are configurable via environment variables, with sensible
defaults for each operation category.

Usage:
    from pgfirewall.timeout_config import Timeouts

    context = OperationContext(timeout=Timeouts.OPERATION)

Environment Variables:
    - PGFW_TIMEOUT_OPERATION: Create/delete including completion polling (default: 1800s)
    - PGFW_TIMEOUT_AZURE_SDK_CONNECTION: HTTP connection timeout (default: 30s)
    - PGFW_TIMEOUT_AZURE_SDK_READ: HTTP read timeout (default: 60s)
    - PGFW_POLL_INTERVAL: Seconds between completion polls (default: 5s)
"""

import logging
import os
from typing import Final, Optional

logger = logging.getLogger(__name__)


def _get_timeout(env_var: str, default: int) -> int:
    """Get timeout value from environment variable or use default.

    Args:
        env_var: Environment variable name
        default: Default timeout in seconds

    Returns:
        Timeout value in seconds
    """
    value = os.environ.get(env_var)
    if value is not None:
        try:
            timeout = int(value)
            if timeout <= 0:
                logger.warning(
                    f"Invalid timeout value for {env_var}: {value}. "
                    f"Must be positive. Using default: {default}s"
                )
                return default
            return timeout
        except ValueError:
            logger.warning(
                f"Invalid timeout value for {env_var}: {value}. "
                f"Must be integer. Using default: {default}s"
            )
            return default
    return default


class Timeouts:
    """Centralized timeout constants for remote operations.

    All values are in seconds and configurable via environment variables.
    """

    # Whole create/delete operation, including the long-running poll
    OPERATION: Final[int] = _get_timeout("PGFW_TIMEOUT_OPERATION", 1800)

    # Azure SDK transport timeouts
    AZURE_SDK_CONNECTION: Final[int] = _get_timeout(
        "PGFW_TIMEOUT_AZURE_SDK_CONNECTION", 30
    )
    AZURE_SDK_READ: Final[int] = _get_timeout("PGFW_TIMEOUT_AZURE_SDK_READ", 60)

    # Interval between completion polls
    POLL_INTERVAL: Final[int] = _get_timeout("PGFW_POLL_INTERVAL", 5)


def log_timeout_event(
    operation: str,
    timeout_value: Optional[float],
    level: str = "warning",
) -> None:
    """Log a timeout event with consistent formatting.

    Args:
        operation: Name of the operation that timed out
        timeout_value: Timeout value that was exceeded
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level, logger.warning)
    log_func(f"Operation '{operation}' timed out after {timeout_value} seconds")
