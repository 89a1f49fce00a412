"""Azure Resource Manager identifier parsing.

Identifiers are hierarchical paths of key/value segment pairs:

    /subscriptions/{sub}/resourceGroups/{rg}/providers/{namespace}/servers/{server}/firewallRules/{name}

Parsing is purely local; nothing here talks to Azure.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, NamedTuple

from .exceptions import MalformedIdentifierError

logger = logging.getLogger(__name__)

POSTGRESQL_PROVIDER = "Microsoft.DBforPostgreSQL"


@dataclass
class ResourceId:
    """Components of a parsed Azure resource identifier."""

    subscription_id: str
    resource_group: str
    provider: str = ""
    path: Dict[str, str] = field(default_factory=dict)


class FirewallRuleAddress(NamedTuple):
    """The three components needed to address a firewall rule remotely."""

    resource_group: str
    server_name: str
    name: str


def parse_resource_id(resource_id: str) -> ResourceId:
    """
    Parse an Azure resource ID into subscription, resource group and path.

    Args:
        resource_id: Full Azure resource ID

    Returns:
        ResourceId with the remaining key/value pairs in ``path``

    Raises:
        MalformedIdentifierError: If the identifier is not a well-formed ARM path
    """
    if not resource_id or not isinstance(resource_id, str):
        raise MalformedIdentifierError(
            "Resource ID cannot be empty", resource_id=resource_id or ""
        )

    segments = resource_id.strip("/").split("/")
    if len(segments) % 2 != 0:
        raise MalformedIdentifierError(
            "The number of path segments is not divisible by 2",
            resource_id=resource_id,
        )

    components: Dict[str, str] = {}
    for key, value in zip(segments[0::2], segments[1::2]):
        if not key or not value:
            raise MalformedIdentifierError(
                f"Key/value cannot be empty strings (key: '{key}', value: '{value}')",
                resource_id=resource_id,
            )
        components[key] = value

    missing = [k for k in ("subscriptions", "resourceGroups") if k not in components]
    if missing:
        raise MalformedIdentifierError(
            f"No {' or '.join(missing)} found in resource ID",
            resource_id=resource_id,
            missing_segments=missing,
        )

    subscription_id = components.pop("subscriptions")
    resource_group = components.pop("resourceGroups")
    provider = components.pop("providers", "")

    return ResourceId(
        subscription_id=subscription_id,
        resource_group=resource_group,
        provider=provider,
        path=components,
    )


def parse_firewall_rule_id(resource_id: str) -> FirewallRuleAddress:
    """
    Decompose a firewall rule ID into (resource group, server, rule name).

    Raises:
        MalformedIdentifierError: If any of the three components is missing
    """
    parsed = parse_resource_id(resource_id)

    missing = [k for k in ("servers", "firewallRules") if k not in parsed.path]
    if missing:
        raise MalformedIdentifierError(
            f"Resource ID is not a firewall rule ID: missing {', '.join(missing)}",
            resource_id=resource_id,
            missing_segments=missing,
        )

    return FirewallRuleAddress(
        resource_group=parsed.resource_group,
        server_name=parsed.path["servers"],
        name=parsed.path["firewallRules"],
    )


def format_firewall_rule_id(
    subscription_id: str,
    resource_group: str,
    server_name: str,
    name: str,
    provider: str = POSTGRESQL_PROVIDER,
) -> str:
    """Build the canonical ARM identifier of a firewall rule."""
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{provider}/servers/{server_name}/firewallRules/{name}"
    )
