"""Shared fixtures for CLI command testing.

Commands run against the in-memory firewall_rules operations from the root
conftest; credential and logging setup are patched out.
"""

import pytest
from click.testing import CliRunner

from pgfirewall.models import FirewallRule
from pgfirewall.resource_id import format_firewall_rule_id
from pgfirewall.state_store import StateStore

TEST_SUBSCRIPTION = "00000000-0000-0000-0000-000000000000"

RULES_YAML = """
firewall_rules:
  office:
    name: office-range
    resource_group_name: rg1
    server_name: srv1
    start_ip_address: 10.0.0.1
    end_ip_address: 10.0.0.254
"""


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def azure_env(monkeypatch):
    """Environment with a subscription and no service principal."""
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", TEST_SUBSCRIPTION)
    for var in (
        "AZURE_TENANT_ID",
        "AZURE_CLIENT_ID",
        "AZURE_CLIENT_SECRET",
        "LOG_LEVEL",
        "PGFW_POLL_INTERVAL",
        "PGFW_TIMEOUT_OPERATION",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(
        "pgfirewall.config_manager.load_dotenv", lambda *args, **kwargs: False
    )
    return monkeypatch


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    """Keep commands from reconfiguring the root logger during tests."""
    mocker.patch("pgfirewall.commands.base.setup_logging")
    mocker.patch("pgfirewall.commands.base.configure_logging")


@pytest.fixture(autouse=True)
def patched_client(mocker, fake_client):
    """Hand every command the in-memory management client."""
    return mocker.patch(
        "pgfirewall.commands.base.create_postgresql_client", return_value=fake_client
    )


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "pgfirewall.state.json"


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML)
    return path


@pytest.fixture
def office_rule():
    return FirewallRule(
        id=format_firewall_rule_id(TEST_SUBSCRIPTION, "rg1", "srv1", "office-range"),
        name="office-range",
        resource_group_name="rg1",
        server_name="srv1",
        start_ip_address="10.0.0.1",
        end_ip_address="10.0.0.254",
    )


@pytest.fixture
def seed(state_file, fake_operations, make_response):
    """Record a rule in the state file and, optionally, on the remote side."""

    def _seed(label, rule, remote=True, remote_end_ip=None):
        store = StateStore(state_file)
        store.put(label, rule)
        store.save()
        if remote:
            key = (rule.resource_group_name, rule.server_name, rule.name)
            fake_operations.rules[key] = make_response(
                rule.resource_group_name,
                rule.server_name,
                rule.name,
                rule.start_ip_address,
                remote_end_ip or rule.end_ip_address,
            )
        return rule

    return _seed
