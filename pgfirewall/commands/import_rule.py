"""Import command: adopt an existing firewall rule into the state file."""

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


@click.command("import")
@click.argument("label")
@click.argument("resource_id")
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
def import_rule(
    ctx: click.Context, label: str, resource_id: str, state_path: str
) -> None:
    """Adopt the firewall rule RESOURCE_ID under LABEL.

    Examples:
        pgfw import office /subscriptions/.../servers/srv1/firewallRules/office
    """
    cmd = command_context(ctx)
    store = open_state(state_path)
    if label in store:
        exit_with_error(f"'{label}' is already managed; destroy or rename it first")

    rule = cmd.get_resource().import_state(resource_id, cmd.operation_context())
    store.put(label, rule)
    store.save()
    console.print(rules_table("Imported firewall rule", [(label, rule, "imported")]))
