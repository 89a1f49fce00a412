"""Local state file for firewall rules.

The state file holds, per rule label, the last observed ``FirewallRule``.
A label present in the file means the rule is believed to exist remotely;
clearing the identifier after a not-found read removes the label.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

from .exceptions import StateFileError
from .models import FirewallRule

logger = logging.getLogger(__name__)

STATE_VERSION = 1


class StateStore:
    """Reads and writes the JSON state file."""

    def __init__(self, path: Path):
        """Initialize the state store.

        Args:
            path: Location of the JSON state file; created on first save
        """
        self.path = Path(path)
        self._rules: Dict[str, FirewallRule] = {}
        self._load()

    def _load(self) -> None:
        """Load the state from disk."""
        if not self.path.exists():
            return
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StateFileError(
                f"Failed to load state file: {e}", path=str(self.path), cause=e
            ) from e

        if not isinstance(data, dict):
            raise StateFileError(
                "State file must contain a JSON object", path=str(self.path)
            )
        if data.get("version") != STATE_VERSION:
            raise StateFileError(
                f"Unsupported state file version: {data.get('version')}",
                path=str(self.path),
            )
        rules = data.get("firewall_rules", {})
        if not isinstance(rules, dict):
            raise StateFileError(
                "'firewall_rules' in state file must be an object",
                path=str(self.path),
            )
        for label, record in rules.items():
            if not isinstance(record, dict):
                raise StateFileError(
                    f"State record for '{label}' must be an object",
                    path=str(self.path),
                )
            self._rules[label] = FirewallRule.from_dict(record)

    def save(self) -> None:
        """Save the state to disk."""
        data: Dict[str, Any] = {
            "version": STATE_VERSION,
            "updated_at": datetime.now(timezone.utc).isoformat(),
            "firewall_rules": {
                label: rule.to_dict() for label, rule in sorted(self._rules.items())
            },
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StateFileError(
                f"Failed to write state file: {e}", path=str(self.path), cause=e
            ) from e

    def get(self, label: str) -> Optional[FirewallRule]:
        return self._rules.get(label)

    def put(self, label: str, rule: FirewallRule) -> None:
        """Record a rule; a rule without an identifier is dropped instead."""
        if not rule.exists:
            self.remove(label)
            return
        self._rules[label] = rule

    def remove(self, label: str) -> bool:
        """Forget a rule. Returns True if it was known."""
        removed = self._rules.pop(label, None) is not None
        if removed:
            logger.debug(f"Removed '{label}' from state")
        return removed

    def labels(self) -> list[str]:
        return list(self._rules)

    def items(self) -> Iterator[Tuple[str, FirewallRule]]:
        return iter(list(self._rules.items()))

    def __contains__(self, label: object) -> bool:
        return label in self._rules

    def __len__(self) -> int:
        return len(self._rules)
