"""
Configuration Management for pgfirewall

This module provides centralized configuration management with validation
and environment variable handling. Values may also come from a ``.env`` file.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import colorlog
from dotenv import find_dotenv, load_dotenv

from .exceptions import InvalidConfigurationError, MissingConfigurationError
from .timeout_config import Timeouts, _get_timeout


def _set_azure_http_log_level(log_level: str) -> None:
    """Set log levels for HTTP-related loggers to reduce noise."""
    http_loggers = [
        "azure.core.pipeline.policies.http_logging_policy",
        "azure.core.pipeline",
        "azure.identity",
        "azure.mgmt",
        "azure",
        "urllib3",
        "urllib3.connectionpool",
        "http.client",
    ]
    # HTTP logging should only appear at DEBUG level
    target_level = logging.DEBUG if log_level == "DEBUG" else logging.WARNING
    for name in http_loggers:
        logging.getLogger(name).setLevel(target_level)


logger = logging.getLogger(__name__)


def _mask(value: Optional[str]) -> str:
    if not value:
        return "Not configured"
    return value[:8] + "..." if len(value) > 8 else value


@dataclass
class AzureConfig:
    """Configuration for the Azure management plane connection."""

    subscription_id: str = field(
        default_factory=lambda: os.getenv("AZURE_SUBSCRIPTION_ID", "")
    )
    tenant_id: str = field(default_factory=lambda: os.getenv("AZURE_TENANT_ID", ""))
    client_id: str = field(default_factory=lambda: os.getenv("AZURE_CLIENT_ID", ""))
    client_secret: str = field(
        default_factory=lambda: os.getenv("AZURE_CLIENT_SECRET", "")
    )
    connection_timeout: int = field(
        default_factory=lambda: _get_timeout(
            "PGFW_TIMEOUT_AZURE_SDK_CONNECTION", Timeouts.AZURE_SDK_CONNECTION
        )
    )
    read_timeout: int = field(
        default_factory=lambda: _get_timeout(
            "PGFW_TIMEOUT_AZURE_SDK_READ", Timeouts.AZURE_SDK_READ
        )
    )

    def uses_service_principal(self) -> bool:
        """Check if explicit service principal credentials are configured."""
        return bool(self.tenant_id and self.client_id and self.client_secret)

    def validate(self) -> None:
        """Validate Azure configuration."""
        if not self.subscription_id:
            raise MissingConfigurationError(
                "Azure subscription ID is required",
                missing_keys=["AZURE_SUBSCRIPTION_ID"],
            )
        partial = [
            name
            for name, value in (
                ("AZURE_TENANT_ID", self.tenant_id),
                ("AZURE_CLIENT_ID", self.client_id),
                ("AZURE_CLIENT_SECRET", self.client_secret),
            )
            if not value
        ]
        # Either all three service principal values or none of them
        if self.client_id and partial:
            raise MissingConfigurationError(
                "Service principal configuration is incomplete",
                missing_keys=partial,
            )


@dataclass
class PollingConfig:
    """Configuration for long-running operation polling."""

    poll_interval: int = field(
        default_factory=lambda: _get_timeout(
            "PGFW_POLL_INTERVAL", Timeouts.POLL_INTERVAL
        )
    )
    operation_timeout: int = field(
        default_factory=lambda: _get_timeout(
            "PGFW_TIMEOUT_OPERATION", Timeouts.OPERATION
        )
    )

    def __post_init__(self) -> None:
        """Validate polling configuration."""
        if self.poll_interval < 1:
            raise InvalidConfigurationError(
                "Poll interval must be at least 1 second", config_section="polling"
            )
        if self.operation_timeout < 1:
            raise InvalidConfigurationError(
                "Operation timeout must be at least 1 second",
                config_section="polling",
            )


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(log_color)s%(levelname)s:%(name)s:%(message)s"
        )
    )
    file_output: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise InvalidConfigurationError(
                f"Log level must be one of: {valid_levels}", config_section="logging"
            )
        self.level = self.level.upper()

    def get_log_level(self) -> int:
        """Convert string log level to logging constant."""
        return int(getattr(logging, self.level))


@dataclass
class PgFirewallConfig:
    """Main configuration class that aggregates all configuration sections."""

    azure: AzureConfig = field(default_factory=AzureConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate_all(self) -> None:
        """Validate all configuration sections."""
        try:
            self.azure.validate()
            self.polling.__post_init__()
            self.logging.__post_init__()
            logger.debug("Configuration validation successful")
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def log_configuration_summary(self) -> None:
        """Log a summary of the current configuration (without sensitive data)."""
        logger.info("=" * 60)
        logger.info("PGFIREWALL CONFIGURATION")
        logger.info("=" * 60)
        logger.info(f"Subscription: {_mask(self.azure.subscription_id)}")
        if self.azure.uses_service_principal():
            logger.info(
                f"Credential: service principal {_mask(self.azure.client_id)} "
                f"(tenant {_mask(self.azure.tenant_id)})"
            )
        else:
            logger.info("Credential: DefaultAzureCredential")
        logger.info(f"Poll interval: {self.polling.poll_interval}s")
        logger.info(f"Operation timeout: {self.polling.operation_timeout}s")
        logger.info(f"Logging Level: {self.logging.level}")
        if self.logging.file_output:
            logger.info(f"Log File: {self.logging.file_output}")
        logger.info("=" * 60)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "azure": {
                "subscription_id": self.azure.subscription_id,
                "tenant_id": self.azure.tenant_id,
                "client_id": self.azure.client_id,
                "uses_service_principal": self.azure.uses_service_principal(),
                # Don't include client secret in serialization
            },
            "polling": {
                "poll_interval": self.polling.poll_interval,
                "operation_timeout": self.polling.operation_timeout,
            },
            "logging": {
                "level": self.logging.level,
                "file_output": self.logging.file_output,
            },
        }


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup logging configuration based on config.
    """
    _set_azure_http_log_level(config.level.upper())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(config.get_log_level())

    console_handler = colorlog.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(config.format))
    root_logger.addHandler(console_handler)

    if config.file_output:
        file_handler = logging.FileHandler(config.file_output)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s:%(name)s:%(message)s")
        )
        root_logger.addHandler(file_handler)

    # Specifically suppress Azure HTTP logging policy verbose output
    if config.level != "DEBUG":
        logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(
            logging.WARNING
        )

    logger.debug(
        f"Logging configured: level={config.level}, file={config.file_output or 'console'}"
    )


def create_config_from_env(
    poll_interval: Optional[int] = None,
    operation_timeout: Optional[int] = None,
    log_level: Optional[str] = None,
) -> PgFirewallConfig:
    """
    Factory function to create and validate configuration from environment.

    Args:
        poll_interval: Optional override of the poll interval
        operation_timeout: Optional override of the operation timeout
        log_level: Optional override of the log level

    Returns:
        PgFirewallConfig: Validated configuration instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    load_dotenv(find_dotenv(usecwd=True))

    config = PgFirewallConfig()
    if poll_interval is not None:
        config.polling.poll_interval = poll_interval
    if operation_timeout is not None:
        config.polling.operation_timeout = operation_timeout
    if log_level is not None:
        config.logging.level = log_level

    config.validate_all()
    return config
