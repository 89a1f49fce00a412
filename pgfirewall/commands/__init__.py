"""CLI commands for pgfirewall."""

from .apply import apply
from .destroy import destroy
from .import_rule import import_rule
from .refresh import refresh
from .show import show

__all__ = ["apply", "destroy", "import_rule", "refresh", "show"]
