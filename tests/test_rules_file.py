"""Tests for loading the declarative rules file."""

import pytest

from pgfirewall.exceptions import InvalidConfigurationError, ResourceValidationError
from pgfirewall.rules_file import load_rules_file

VALID_RULES = """
firewall_rules:
  office:
    name: office-range
    resource_group_name: rg1
    server_name: srv1
    start_ip_address: 10.0.0.1
    end_ip_address: 10.0.0.254
  vpn:
    name: vpn
    resource_group_name: rg1
    server_name: srv1
    start_ip_address: 192.168.1.1
    end_ip_address: 192.168.1.1
"""


def _write(tmp_path, content):
    path = tmp_path / "rules.yaml"
    path.write_text(content)
    return path


def test_load_rules_file(tmp_path):
    specs = load_rules_file(_write(tmp_path, VALID_RULES))

    assert list(specs) == ["office", "vpn"]
    assert specs["office"].name == "office-range"
    assert specs["vpn"].start_ip_address == "192.168.1.1"


def test_missing_file(tmp_path):
    with pytest.raises(InvalidConfigurationError, match="Cannot read rules file"):
        load_rules_file(tmp_path / "absent.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(InvalidConfigurationError, match="Invalid YAML"):
        load_rules_file(_write(tmp_path, "firewall_rules: [unclosed"))


@pytest.mark.parametrize("content", ["", "firewall_rules: {}\n", "other: 1\n"])
def test_requires_firewall_rules_mapping(tmp_path, content):
    with pytest.raises(InvalidConfigurationError, match="firewall_rules"):
        load_rules_file(_write(tmp_path, content))


def test_rule_must_be_mapping(tmp_path):
    with pytest.raises(InvalidConfigurationError, match="'office' must be a mapping"):
        load_rules_file(_write(tmp_path, "firewall_rules:\n  office: nope\n"))


def test_invalid_rule_carries_label(tmp_path):
    content = """
firewall_rules:
  office:
    name: office-range
    resource_group_name: rg1
    server_name: srv1
    start_ip_address: 10.0.0.1
"""
    with pytest.raises(ResourceValidationError) as exc_info:
        load_rules_file(_write(tmp_path, content))

    assert exc_info.value.context["label"] == "office"
    assert any(
        error.startswith("end_ip_address") for error in exc_info.value.validation_errors
    )


def test_top_level_must_be_mapping(tmp_path):
    with pytest.raises(InvalidConfigurationError, match="top level"):
        load_rules_file(_write(tmp_path, "- firewall_rules\n- office\n"))
