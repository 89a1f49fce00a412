from types import SimpleNamespace
from typing import Any, Dict, Optional, Tuple
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import ResourceNotFoundError

from pgfirewall.firewall_rule_resource import FirewallRuleResource
from pgfirewall.models import FirewallRuleSpec
from pgfirewall.resource_id import format_firewall_rule_id

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"


# ============================================================================
# Azure SDK fakes
# ============================================================================


class FakePoller:
    """Stand-in for azure.core.polling.LROPoller."""

    def __init__(
        self,
        result: Any = None,
        error: Optional[BaseException] = None,
        pending_steps: int = 0,
    ):
        self._result = result
        self._error = error
        self._pending = pending_steps
        self.wait_calls: list = []

    def done(self) -> bool:
        return self._pending <= 0

    def wait(self, timeout: Optional[float] = None) -> None:
        self.wait_calls.append(timeout)
        self._pending -= 1
        if self._pending <= 0 and self._error is not None:
            raise self._error

    def result(self, timeout: Optional[float] = None) -> Any:
        if self._error is not None:
            raise self._error
        return self._result


def rule_response(
    resource_group: str,
    server_name: str,
    name: str,
    start_ip_address: str,
    end_ip_address: str,
    rule_id: Optional[str] = "",
) -> SimpleNamespace:
    """Shape of azure.mgmt.rdbms.postgresql.models.FirewallRule as returned by get."""
    if rule_id == "":
        rule_id = format_firewall_rule_id(
            SUBSCRIPTION_ID, resource_group, server_name, name
        )
    return SimpleNamespace(
        id=rule_id,
        name=name,
        type="Microsoft.DBforPostgreSQL/servers/firewallRules",
        start_ip_address=start_ip_address,
        end_ip_address=end_ip_address,
    )


class FakeFirewallRulesOperations:
    """In-memory firewall_rules operations group with the SDK's call shapes."""

    def __init__(self) -> None:
        self.rules: Dict[Tuple[str, str, str], SimpleNamespace] = {}
        self.calls: list = []

    def begin_create_or_update(
        self, resource_group_name, server_name, firewall_rule_name, parameters, **kwargs
    ):
        self.calls.append(("create", resource_group_name, server_name, firewall_rule_name))
        response = rule_response(
            resource_group_name,
            server_name,
            firewall_rule_name,
            parameters.start_ip_address,
            parameters.end_ip_address,
        )
        self.rules[(resource_group_name, server_name, firewall_rule_name)] = response
        return FakePoller(result=response)

    def get(self, resource_group_name, server_name, firewall_rule_name, **kwargs):
        self.calls.append(("get", resource_group_name, server_name, firewall_rule_name))
        key = (resource_group_name, server_name, firewall_rule_name)
        if key not in self.rules:
            raise ResourceNotFoundError(
                f"The requested resource of type 'firewallRules' with name "
                f"'{firewall_rule_name}' was not found."
            )
        return self.rules[key]

    def begin_delete(self, resource_group_name, server_name, firewall_rule_name, **kwargs):
        self.calls.append(("delete", resource_group_name, server_name, firewall_rule_name))
        key = (resource_group_name, server_name, firewall_rule_name)
        if key not in self.rules:
            raise ResourceNotFoundError("Resource not found")
        del self.rules[key]
        return FakePoller()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_operations() -> FakeFirewallRulesOperations:
    return FakeFirewallRulesOperations()


@pytest.fixture
def fake_client(fake_operations) -> SimpleNamespace:
    """Management client exposing the in-memory firewall_rules group."""
    return SimpleNamespace(firewall_rules=fake_operations)


@pytest.fixture
def mock_client() -> MagicMock:
    """Management client whose firewall_rules calls are configured per test."""
    return MagicMock()


@pytest.fixture
def resource(fake_client) -> FirewallRuleResource:
    return FirewallRuleResource(fake_client, poll_interval=1)


@pytest.fixture
def sample_spec() -> FirewallRuleSpec:
    return FirewallRuleSpec(
        name="rule1",
        resource_group_name="rg1",
        server_name="srv1",
        start_ip_address="0.0.0.0",
        end_ip_address="255.255.255.255",
    )


@pytest.fixture
def sample_rule_id() -> str:
    return format_firewall_rule_id(SUBSCRIPTION_ID, "rg1", "srv1", "rule1")


@pytest.fixture
def make_poller():
    """Factory for FakePoller instances."""
    return FakePoller


@pytest.fixture
def make_response():
    """Factory for remote firewall rule responses."""
    return rule_response
