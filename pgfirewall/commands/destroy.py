"""Destroy command: delete firewall rules and drop them from state."""

from typing import Tuple

import click

from .base import (
    DEFAULT_STATE_FILE,
    command_context,
    console,
    exit_with_error,
    handle_errors,
    open_state,
    rules_table,
)


@click.command("destroy")
@click.argument("labels", nargs=-1)
@click.option(
    "--state",
    "-s",
    "state_path",
    default=DEFAULT_STATE_FILE,
    show_default=True,
    help="Path to the state file",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@handle_errors
def destroy(
    ctx: click.Context, labels: Tuple[str, ...], state_path: str, yes: bool
) -> None:
    """Delete LABELS (default: every rule in state).

    Rules that are already gone are treated as deleted.

    Examples:
        pgfw destroy office
        pgfw destroy --yes
    """
    cmd = command_context(ctx)
    store = open_state(state_path)

    targets = list(labels) or store.labels()
    unknown = [label for label in targets if label not in store]
    if unknown:
        exit_with_error(f"Not in state: {', '.join(unknown)}")
    if not targets:
        console.print("[dim]State is empty, nothing to destroy[/dim]")
        return

    if not yes:
        click.confirm(f"Delete {len(targets)} firewall rule(s)?", abort=True)

    resource = cmd.get_resource()
    rows = []
    for label in targets:
        rule = store.get(label)
        resource.delete(rule.id, cmd.operation_context())
        store.remove(label)
        store.save()
        rows.append((label, rule, "deleted"))

    console.print(rules_table("Destroyed firewall rules", rows))
