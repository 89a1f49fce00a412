"""
Firewall rule models.

``FirewallRuleSpec`` is the declarative input, validated with pydantic at the
boundary before any remote call. ``FirewallRule`` is the state observed
remotely; its ``id`` is set if and only if the rule is known to exist.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ResourceValidationError


class FieldSchema(NamedTuple):
    """Schema flags of one configuration field."""

    required: bool
    force_new: bool


# Every field is required and immutable once the rule exists
SCHEMA: Dict[str, FieldSchema] = {
    "name": FieldSchema(required=True, force_new=True),
    "resource_group_name": FieldSchema(required=True, force_new=True),
    "server_name": FieldSchema(required=True, force_new=True),
    "start_ip_address": FieldSchema(required=True, force_new=True),
    "end_ip_address": FieldSchema(required=True, force_new=True),
}


class FirewallRuleSpec(BaseModel):
    """Declarative configuration of a PostgreSQL server firewall rule."""

    name: str
    resource_group_name: str
    server_name: str
    start_ip_address: str
    end_ip_address: str

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    @field_validator(
        "name",
        "resource_group_name",
        "server_name",
        "start_ip_address",
        "end_ip_address",
    )
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> "FirewallRuleSpec":
        """
        Build a spec from a configuration mapping.

        Raises:
            ResourceValidationError: Listing every field that failed validation
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in e.errors()
            ]
            raise ResourceValidationError(
                f"Invalid firewall rule configuration ({len(errors)} error(s))",
                validation_errors=errors,
                cause=e,
            ) from e


@dataclass
class FirewallRule:
    """Firewall rule state as last observed on the remote API."""

    id: str
    name: str
    resource_group_name: str
    server_name: str
    start_ip_address: Optional[str] = None
    end_ip_address: Optional[str] = None

    @property
    def exists(self) -> bool:
        return bool(self.id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FirewallRule":
        """Create from dictionary, ignoring unknown keys."""
        known = {k: data.get(k) for k in ("id", *SCHEMA)}
        return cls(**known)


class PlanAction(str, Enum):
    """What applying a spec to known state requires."""

    CREATE = "create"
    REPLACE = "replace"
    NOOP = "noop"


@dataclass
class Plan:
    """Outcome of comparing a spec with the last known state."""

    action: PlanAction
    changed_fields: List[str] = field(default_factory=list)

    @property
    def requires_replacement(self) -> bool:
        return self.action == PlanAction.REPLACE
