"""Lifecycle of an Azure Database for PostgreSQL server firewall rule.

Maps a declarative ``FirewallRuleSpec`` onto the ``firewall_rules``
operations of the PostgreSQL management client:

    create  -> begin_create_or_update + completion poll + get
    read    -> get (not-found means absent, never an error)
    delete  -> begin_delete + completion poll (not-found means done)

Every field forces replacement, so there is no in-place update.
"""

from typing import Any, Mapping, Optional, Union

import structlog
from azure.core.exceptions import AzureError
from azure.mgmt.rdbms.postgresql import models as pg_models

from .exceptions import (
    ImportTargetNotFoundError,
    InvariantViolationError,
    is_not_found,
    wrap_azure_exception,
)
from .models import SCHEMA, FirewallRule, FirewallRuleSpec, Plan, PlanAction
from .operation_context import OperationContext, wait_for_completion
from .resource_id import parse_firewall_rule_id
from .timeout_config import Timeouts

logger = structlog.get_logger(__name__)

SpecInput = Union[FirewallRuleSpec, Mapping[str, Any]]


class FirewallRuleResource:
    """
    Create, read and delete firewall rules through a management client.

    The client is passed in explicitly; it must expose ``firewall_rules`` with
    ``begin_create_or_update``, ``get`` and ``begin_delete`` as
    ``PostgreSQLManagementClient`` does. Each operation takes its own
    ``OperationContext`` for cancellation and deadlines.
    """

    def __init__(self, client: Any, poll_interval: float = Timeouts.POLL_INTERVAL):
        self.client = client
        self.poll_interval = poll_interval

    @property
    def _operations(self) -> Any:
        return self.client.firewall_rules

    def create(
        self, spec: SpecInput, context: Optional[OperationContext] = None
    ) -> FirewallRule:
        """
        Create or update a firewall rule and return its canonical state.

        Args:
            spec: Validated spec, or a configuration mapping to validate
            context: Cancellation context for the calls and the completion poll

        Returns:
            FirewallRule with its remotely assigned ``id``

        Raises:
            ResourceValidationError: If the spec is invalid (no remote call made)
            RemoteAPIError: If the create call, its poll, or the canonical read fails
            InvariantViolationError: If the canonical read carries no identifier
            OperationCancelledError: If the context is cancelled or expires
        """
        if not isinstance(spec, FirewallRuleSpec):
            spec = FirewallRuleSpec.from_config(spec)
        context = context or OperationContext()
        log = logger.bind(
            rule_name=spec.name,
            resource_group=spec.resource_group_name,
            server_name=spec.server_name,
        )
        log.info("preparing arguments for firewall rule creation")

        parameters = pg_models.FirewallRule(
            start_ip_address=spec.start_ip_address,
            end_ip_address=spec.end_ip_address,
        )

        context.raise_if_cancelled("create")
        try:
            poller = self._operations.begin_create_or_update(
                resource_group_name=spec.resource_group_name,
                server_name=spec.server_name,
                firewall_rule_name=spec.name,
                parameters=parameters,
                polling_interval=self.poll_interval,
            )
            wait_for_completion(poller, context, self.poll_interval, "create")
        except AzureError as e:
            log.error("firewall rule creation failed", error=str(e))
            raise wrap_azure_exception(e, spec.name, "create") from e

        context.raise_if_cancelled("create")
        try:
            response = self._operations.get(
                resource_group_name=spec.resource_group_name,
                server_name=spec.server_name,
                firewall_rule_name=spec.name,
            )
        except AzureError as e:
            raise wrap_azure_exception(e, spec.name, "create") from e

        if not getattr(response, "id", None):
            raise InvariantViolationError(
                f"Cannot read PostgreSQL Firewall Rule {spec.name} "
                f"(resource group {spec.resource_group_name}) ID",
                context={
                    "rule_name": spec.name,
                    "resource_group": spec.resource_group_name,
                    "server_name": spec.server_name,
                },
            )

        rule = self._to_state(
            response, spec.resource_group_name, spec.server_name, spec.name
        )
        log.info("firewall rule created", id=rule.id)
        return rule

    def read(
        self, resource_id: str, context: Optional[OperationContext] = None
    ) -> Optional[FirewallRule]:
        """
        Read the current remote state of a firewall rule.

        Returns:
            The observed FirewallRule, or None when the rule no longer exists.
            On None the caller must clear its local identifier.

        Raises:
            MalformedIdentifierError: If ``resource_id`` cannot be decomposed
            RemoteAPIError: On any failure other than not-found
            OperationCancelledError: If the context is cancelled or expired
        """
        address = parse_firewall_rule_id(resource_id)
        context = context or OperationContext()

        context.raise_if_cancelled("read")
        try:
            response = self._operations.get(
                resource_group_name=address.resource_group,
                server_name=address.server_name,
                firewall_rule_name=address.name,
            )
        except AzureError as e:
            if is_not_found(e):
                logger.warning(
                    "firewall rule was not found",
                    rule_name=address.name,
                    resource_group=address.resource_group,
                )
                return None
            raise wrap_azure_exception(e, address.name, "read") from e

        return self._to_state(
            response,
            address.resource_group,
            address.server_name,
            address.name,
            resource_id=resource_id,
        )

    def delete(
        self, resource_id: str, context: Optional[OperationContext] = None
    ) -> None:
        """
        Delete a firewall rule; deleting an absent rule succeeds.

        Raises:
            MalformedIdentifierError: If ``resource_id`` cannot be decomposed
            RemoteAPIError: On any failure other than not-found
            OperationCancelledError: If the context is cancelled or expires
        """
        address = parse_firewall_rule_id(resource_id)
        context = context or OperationContext()
        log = logger.bind(
            rule_name=address.name, resource_group=address.resource_group
        )

        context.raise_if_cancelled("delete")
        try:
            poller = self._operations.begin_delete(
                resource_group_name=address.resource_group,
                server_name=address.server_name,
                firewall_rule_name=address.name,
                polling_interval=self.poll_interval,
            )
        except AzureError as e:
            if is_not_found(e):
                log.info("firewall rule already absent")
                return
            raise wrap_azure_exception(e, address.name, "delete") from e

        try:
            wait_for_completion(poller, context, self.poll_interval, "delete")
        except AzureError as e:
            if is_not_found(e):
                log.info("firewall rule disappeared while deleting")
                return
            raise wrap_azure_exception(e, address.name, "delete") from e

        log.info("firewall rule deleted")

    def import_state(
        self, resource_id: str, context: Optional[OperationContext] = None
    ) -> FirewallRule:
        """
        Adopt an existing rule given only its identifier.

        Raises:
            ImportTargetNotFoundError: If the rule does not exist remotely
        """
        rule = self.read(resource_id, context)
        if rule is None:
            raise ImportTargetNotFoundError(
                "Cannot import non-existent PostgreSQL Firewall Rule",
                resource_id=resource_id,
                operation="import",
            )
        logger.info("firewall rule imported", id=rule.id)
        return rule

    def plan(self, spec: FirewallRuleSpec, state: Optional[FirewallRule]) -> Plan:
        """Compare a spec with known state; any change forces replacement."""
        if state is None or not state.exists:
            return Plan(action=PlanAction.CREATE)

        changed = [
            name for name in SCHEMA if getattr(spec, name) != getattr(state, name)
        ]
        if any(SCHEMA[name].force_new for name in changed):
            return Plan(action=PlanAction.REPLACE, changed_fields=changed)
        return Plan(action=PlanAction.NOOP)

    def apply(
        self,
        spec: FirewallRuleSpec,
        state: Optional[FirewallRule],
        context: Optional[OperationContext] = None,
    ) -> FirewallRule:
        """Bring remote state in line with ``spec``, replacing when needed."""
        context = context or OperationContext()
        plan = self.plan(spec, state)

        if plan.action == PlanAction.NOOP and state is not None:
            return state
        if plan.requires_replacement and state is not None:
            logger.info(
                "firewall rule must be replaced",
                id=state.id,
                changed_fields=plan.changed_fields,
            )
            self.delete(state.id, context)
        return self.create(spec, context)

    @staticmethod
    def _to_state(
        response: Any,
        resource_group: str,
        server_name: str,
        name: str,
        resource_id: Optional[str] = None,
    ) -> FirewallRule:
        return FirewallRule(
            id=getattr(response, "id", None) or resource_id or "",
            name=getattr(response, "name", None) or name,
            resource_group_name=resource_group,
            server_name=server_name,
            start_ip_address=getattr(response, "start_ip_address", None),
            end_ip_address=getattr(response, "end_ip_address", None),
        )
