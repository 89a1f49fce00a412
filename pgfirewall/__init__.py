"""
pgfirewall

Lifecycle management (create, read, delete, import) of Azure Database for
PostgreSQL server firewall rules, driven by declarative configuration.
"""

from .exceptions import (
    InvariantViolationError,
    MalformedIdentifierError,
    OperationCancelledError,
    PgFirewallError,
    RemoteAPIError,
)
from .firewall_rule_resource import FirewallRuleResource
from .models import FirewallRule, FirewallRuleSpec
from .operation_context import OperationContext

__version__ = "0.1.0"

__all__ = [
    "FirewallRule",
    "FirewallRuleResource",
    "FirewallRuleSpec",
    "InvariantViolationError",
    "MalformedIdentifierError",
    "OperationCancelledError",
    "OperationContext",
    "PgFirewallError",
    "RemoteAPIError",
]
