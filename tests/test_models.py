"""Tests for the firewall rule spec and state models."""

import pytest

from pgfirewall.exceptions import ResourceValidationError
from pgfirewall.models import SCHEMA, FirewallRule, FirewallRuleSpec, Plan, PlanAction

VALID_CONFIG = {
    "name": "rule1",
    "resource_group_name": "rg1",
    "server_name": "srv1",
    "start_ip_address": "0.0.0.0",
    "end_ip_address": "255.255.255.255",
}


class TestFirewallRuleSpec:
    def test_from_config(self):
        spec = FirewallRuleSpec.from_config(VALID_CONFIG)

        assert spec.name == "rule1"
        assert spec.end_ip_address == "255.255.255.255"

    def test_all_fields_required(self):
        with pytest.raises(ResourceValidationError) as exc_info:
            FirewallRuleSpec.from_config({})

        assert len(exc_info.value.validation_errors) == len(SCHEMA)

    @pytest.mark.parametrize("field", sorted(SCHEMA))
    def test_blank_field_rejected(self, field):
        config = dict(VALID_CONFIG, **{field: "   "})

        with pytest.raises(ResourceValidationError) as exc_info:
            FirewallRuleSpec.from_config(config)

        assert exc_info.value.validation_errors[0].startswith(field)

    def test_non_string_rejected(self):
        with pytest.raises(ResourceValidationError):
            FirewallRuleSpec.from_config(dict(VALID_CONFIG, server_name=42))

    def test_unknown_field_rejected(self):
        with pytest.raises(ResourceValidationError, match="error"):
            FirewallRuleSpec.from_config(dict(VALID_CONFIG, location="eastus"))

    def test_spec_is_immutable(self):
        spec = FirewallRuleSpec.from_config(VALID_CONFIG)

        with pytest.raises(Exception):
            spec.name = "other"


def test_every_field_forces_replacement():
    assert set(SCHEMA) == set(FirewallRuleSpec.model_fields)
    assert all(s.required and s.force_new for s in SCHEMA.values())


class TestFirewallRule:
    def test_round_trip_through_dict(self):
        rule = FirewallRule(id="/x", **VALID_CONFIG)

        assert FirewallRule.from_dict(rule.to_dict()) == rule

    def test_from_dict_ignores_unknown_keys(self):
        rule = FirewallRule.from_dict(dict(VALID_CONFIG, id="/x", etag="abc"))

        assert rule.id == "/x"

    def test_exists_tracks_identifier(self):
        assert FirewallRule(id="/x", **VALID_CONFIG).exists
        assert not FirewallRule(id="", **VALID_CONFIG).exists


def test_plan_requires_replacement():
    assert Plan(PlanAction.REPLACE, ["name"]).requires_replacement
    assert not Plan(PlanAction.CREATE).requires_replacement
