"""Base command infrastructure and shared utilities.

This module provides common utilities used across command modules:
- CommandContext for shared command execution context
- handle_errors for turning pgfirewall errors into a clean exit
- Rendering helpers for rule tables
"""

import functools
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from pgfirewall.config_manager import (
    PgFirewallConfig,
    create_config_from_env,
    setup_logging,
)
from pgfirewall.credential_provider import create_postgresql_client
from pgfirewall.exceptions import PgFirewallError
from pgfirewall.firewall_rule_resource import FirewallRuleResource
from pgfirewall.logging_config import configure_logging
from pgfirewall.models import FirewallRule
from pgfirewall.operation_context import OperationContext
from pgfirewall.state_store import StateStore

DEFAULT_STATE_FILE = "pgfirewall.state.json"

console = Console()
logger = logging.getLogger(__name__)


class CommandContext:
    """Shared context for command execution."""

    def __init__(
        self,
        ctx: click.Context,
        log_level: Optional[str] = None,
        timeout: Optional[int] = None,
        json_logs: bool = False,
    ):
        self.click_ctx = ctx
        self.log_level = log_level
        self.timeout = timeout
        self.json_logs = json_logs
        self._config: Optional[PgFirewallConfig] = None
        self._resource: Optional[FirewallRuleResource] = None

    def get_config(self) -> PgFirewallConfig:
        """Get configuration from environment (once per command)."""
        if self._config is None:
            config = create_config_from_env(
                operation_timeout=self.timeout, log_level=self.log_level
            )
            setup_logging(config.logging)
            configure_logging(json_output=self.json_logs)
            if config.logging.level == "DEBUG":
                config.log_configuration_summary()
            self._config = config
        return self._config

    def get_resource(self) -> FirewallRuleResource:
        """Build the firewall rule resource around a fresh management client."""
        if self._resource is None:
            config = self.get_config()
            self._resource = FirewallRuleResource(
                create_postgresql_client(config.azure),
                poll_interval=config.polling.poll_interval,
            )
        return self._resource

    def operation_context(self) -> OperationContext:
        """New cancellation context bounded by the configured operation timeout."""
        return OperationContext(timeout=self.get_config().polling.operation_timeout)


def command_context(ctx: click.Context) -> CommandContext:
    """Create CommandContext from click context."""
    obj = ctx.obj or {}
    return CommandContext(
        ctx=ctx,
        log_level=obj.get("log_level"),
        timeout=obj.get("timeout"),
        json_logs=obj.get("json_logs", False),
    )


def open_state(path: str) -> StateStore:
    return StateStore(Path(path))


def exit_with_error(message: str, code: int = 1) -> None:
    """Exit with error message."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def handle_errors(f: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator mapping pgfirewall errors and interrupts to exit codes."""

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except PgFirewallError as e:
            logger.debug(f"Command failed: {e.to_dict()}")
            exit_with_error(str(e))
        except KeyboardInterrupt:
            exit_with_error("Interrupted", code=130)

    return wrapper


def rules_table(
    title: str, rows: Iterable[Tuple[str, Optional[FirewallRule], str]]
) -> Table:
    """Render (label, rule, status) rows as a rich table."""
    table = Table(title=title, show_header=True)
    table.add_column("Label", style="cyan")
    table.add_column("Rule", style="green")
    table.add_column("Server")
    table.add_column("Range")
    table.add_column("Status", style="dim")
    for label, rule, status in rows:
        if rule is None:
            table.add_row(label, "-", "-", "-", status)
            continue
        table.add_row(
            label,
            rule.name,
            f"{rule.resource_group_name}/{rule.server_name}",
            f"{rule.start_ip_address} - {rule.end_ip_address}",
            status,
        )
    return table
