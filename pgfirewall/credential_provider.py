"""
Credential and management client construction.

Selects an explicit service principal when one is configured and falls back
to ``DefaultAzureCredential`` otherwise, then builds the PostgreSQL
management client that the firewall rule resource is handed explicitly.
"""

import logging
from typing import Union

from azure.identity import ClientSecretCredential, DefaultAzureCredential
from azure.mgmt.rdbms.postgresql import PostgreSQLManagementClient

from .config_manager import AzureConfig

logger = logging.getLogger(__name__)

AzureCredential = Union[ClientSecretCredential, DefaultAzureCredential]


def get_credential(config: AzureConfig) -> AzureCredential:
    """
    Get the credential for the configured identity.

    Args:
        config: Azure configuration section

    Returns:
        ClientSecretCredential for a service principal, else DefaultAzureCredential
    """
    if config.uses_service_principal():
        masked = config.client_id[:8] + "..." if len(config.client_id) > 8 else config.client_id
        logger.debug(f"Using service principal {masked} for management operations")
        return ClientSecretCredential(
            tenant_id=config.tenant_id,
            client_id=config.client_id,
            client_secret=config.client_secret,
        )

    logger.debug("No service principal configured, using DefaultAzureCredential")
    return DefaultAzureCredential()


def create_postgresql_client(config: AzureConfig) -> PostgreSQLManagementClient:
    """
    Build the PostgreSQL management client for the configured subscription.

    Transport timeouts come from ``AzureConfig``; retries are left to the SDK
    pipeline's default retry policy.
    """
    return PostgreSQLManagementClient(
        credential=get_credential(config),
        subscription_id=config.subscription_id,
        connection_timeout=config.connection_timeout,
        read_timeout=config.read_timeout,
    )
