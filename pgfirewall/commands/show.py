"""Show command: print the state file."""

import json

import click

from .base import DEFAULT_STATE_FILE, console, handle_errors, open_state, rules_table


@click.command("show")
@click.option(
    "--state",
    "-s",
    "state_path",
    default=DEFAULT_STATE_FILE,
    show_default=True,
    help="Path to the state file",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of a table")
@handle_errors
def show(state_path: str, as_json: bool) -> None:
    """Show the firewall rules recorded in the state file."""
    store = open_state(state_path)
    if as_json:
        click.echo(
            json.dumps({label: rule.to_dict() for label, rule in store.items()}, indent=2)
        )
        return
    if not len(store):
        console.print("[dim]No firewall rules in state[/dim]")
        return
    console.print(
        rules_table("Firewall rules", [(label, rule, rule.id) for label, rule in store.items()])
    )
