"""Apply command: create or replace the firewall rules declared in a rules file.

Known rules are refreshed first so that rules deleted out-of-band are
recreated. Rules present in state but no longer declared are left alone and
reported; use ``pgfw destroy`` to remove them.
"""

from pathlib import Path

import click

from pgfirewall.models import PlanAction
from pgfirewall.rules_file import load_rules_file

from .base import (
    DEFAULT_STATE_FILE,
    command_context,
    console,
    handle_errors,
    open_state,
    rules_table,
)
from .refresh import refresh_rule


@click.command("apply")
@click.option(
    "--config",
    "-c",
    "config_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file declaring firewall_rules",
)
@click.option(
    "--state",
    "-s",
    "state_path",
    default=DEFAULT_STATE_FILE,
    show_default=True,
    help="Path to the state file",
)
@click.option(
    "--dry-run", is_flag=True, help="Show the plan without changing anything"
)
@click.pass_context
@handle_errors
def apply(ctx: click.Context, config_path: Path, state_path: str, dry_run: bool) -> None:
    """Create or replace firewall rules to match CONFIG.

    Examples:
        pgfw apply --config rules.yaml
        pgfw apply -c rules.yaml --dry-run
    """
    cmd = command_context(ctx)
    specs = load_rules_file(config_path)
    store = open_state(state_path)
    resource = cmd.get_resource()

    rows = []
    for label, spec in specs.items():
        state = store.get(label)
        if state is not None:
            state = refresh_rule(resource, store, label, state, cmd.operation_context())

        plan = resource.plan(spec, state)
        status = plan.action.value
        if plan.changed_fields:
            status += f" ({', '.join(plan.changed_fields)})"

        if dry_run or plan.action == PlanAction.NOOP:
            rows.append((label, state, status))
            continue

        if plan.requires_replacement and state is not None:
            # State never holds the identifier of a deleted rule
            resource.delete(state.id, cmd.operation_context())
            store.remove(label)
            store.save()
            state = None

        rule = resource.apply(spec, state, cmd.operation_context())
        store.put(label, rule)
        store.save()
        rows.append((label, rule, status))

    if not dry_run:
        store.save()

    undeclared = [label for label in store.labels() if label not in specs]
    for label in undeclared:
        console.print(
            f"[yellow]'{label}' is in state but not declared in {config_path}[/yellow]"
        )

    title = "Planned firewall rule changes" if dry_run else "Applied firewall rules"
    console.print(rules_table(title, rows))
