"""Refresh command: re-read every known rule and overwrite local state.

Rules deleted outside of pgfirewall are dropped from the state file.
"""

from typing import Optional

import click

from pgfirewall.firewall_rule_resource import FirewallRuleResource
from pgfirewall.models import FirewallRule
from pgfirewall.operation_context import OperationContext
from pgfirewall.state_store import StateStore

from .base import (
    DEFAULT_STATE_FILE,
    command_context,
    console,
    handle_errors,
    open_state,
    rules_table,
)


def refresh_rule(
    resource: FirewallRuleResource,
    store: StateStore,
    label: str,
    rule: FirewallRule,
    context: OperationContext,
) -> Optional[FirewallRule]:
    """Read one rule and record the outcome; returns None if it is gone."""
    current = resource.read(rule.id, context)
    if current is None:
        store.remove(label)
        return None
    store.put(label, current)
    return current


@click.command("refresh")
@click.option(
    "--state",
    "-s",
    "state_path",
    default=DEFAULT_STATE_FILE,
    show_default=True,
    help="Path to the state file",
)
@click.pass_context
@handle_errors
def refresh(ctx: click.Context, state_path: str) -> None:
    """Re-read every rule in the state file from Azure.

    Examples:
        pgfw refresh --state pgfirewall.state.json
    """
    cmd = command_context(ctx)
    store = open_state(state_path)
    if not len(store):
        console.print("[dim]State is empty, nothing to refresh[/dim]")
        return

    resource = cmd.get_resource()
    rows = []
    for label, rule in store.items():
        current = refresh_rule(resource, store, label, rule, cmd.operation_context())
        rows.append((label, current or rule, "present" if current else "gone"))
        store.save()

    console.print(rules_table("Refreshed firewall rules", rows))
