"""pgfw - manage Azure Database for PostgreSQL firewall rules declaratively."""

from typing import Optional

import click

from .commands import apply, destroy, import_rule, refresh, show


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: LOG_LEVEL or INFO)",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=None,
    help="Deadline in seconds for each create/read/delete operation",
)
@click.option("--json-logs", is_flag=True, help="Emit structured logs as JSON")
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: Optional[str],
    timeout: Optional[int],
    json_logs: bool,
) -> None:
    """Manage PostgreSQL server firewall rules on Azure."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None
    ctx.obj["timeout"] = timeout
    ctx.obj["json_logs"] = json_logs


cli.add_command(apply)
cli.add_command(refresh)
cli.add_command(destroy)
cli.add_command(import_rule, "import")
cli.add_command(show)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
