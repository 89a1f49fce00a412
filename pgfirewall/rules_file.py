"""
Loader for the declarative firewall rules file.

The file is YAML with a single ``firewall_rules`` mapping of labels to rule
configurations:

    firewall_rules:
      office:
        name: office-range
        resource_group_name: rg1
        server_name: srv1
        start_ip_address: 10.0.0.1
        end_ip_address: 10.0.0.254
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from .exceptions import InvalidConfigurationError, ResourceValidationError
from .models import FirewallRuleSpec


def _load_yaml(path: Path) -> Dict[str, Any]:
    """
    Load the rules file from YAML.

    Raises:
        InvalidConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(
            f"Invalid YAML in {path}: {e}", config_section="rules_file", cause=e
        ) from e
    except OSError as e:
        raise InvalidConfigurationError(
            f"Cannot read rules file {path}: {e}", config_section="rules_file", cause=e
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            f"{path} must contain a YAML mapping at the top level",
            config_section="rules_file",
        )
    return data


def load_rules_file(path: Path) -> Dict[str, FirewallRuleSpec]:
    """
    Load and validate every firewall rule declared in a rules file.

    Args:
        path: Path to the YAML rules file

    Returns:
        Mapping of rule label to validated spec, in file order

    Raises:
        InvalidConfigurationError: If the file is unreadable or badly shaped
        ResourceValidationError: If any rule fails validation
    """
    data = _load_yaml(path)

    rules = data.get("firewall_rules")
    if not isinstance(rules, dict) or not rules:
        raise InvalidConfigurationError(
            f"{path} must contain a non-empty 'firewall_rules' mapping",
            config_section="firewall_rules",
        )

    specs: Dict[str, FirewallRuleSpec] = {}
    for label, rule_config in rules.items():
        if not isinstance(rule_config, dict):
            raise InvalidConfigurationError(
                f"Firewall rule '{label}' must be a mapping",
                config_section=f"firewall_rules.{label}",
            )
        try:
            specs[str(label)] = FirewallRuleSpec.from_config(rule_config)
        except ResourceValidationError as e:
            e.context["label"] = label
            raise
    return specs
