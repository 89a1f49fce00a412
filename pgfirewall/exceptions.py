"""
Custom Exception Hierarchy for pgfirewall

This module provides the exception hierarchy used by the firewall rule
resource, the configuration layer and the CLI. Every error carries an error
code, structured context and an optional recovery suggestion.

Not-found responses from the remote API have no class in this
hierarchy: they are successful outcomes signalling absence.
"""

from typing import Any, Dict, Optional

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)


class PgFirewallError(Exception):
    """
    Base exception class for all pgfirewall related errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


# Remote API exceptions
class RemoteAPIError(PgFirewallError):
    """Raised when the management API or a completion poll fails."""

    def __init__(
        self,
        message: str,
        rule_name: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context") or {}
        if rule_name:
            context["rule_name"] = rule_name
        if operation:
            context["operation"] = operation
        kwargs["context"] = context
        kwargs.setdefault("error_code", "REMOTE_API_ERROR")
        super().__init__(message, **kwargs)
        self.rule_name = rule_name
        self.operation = operation


class AzureAuthenticationError(RemoteAPIError):
    """Raised when Azure authentication fails."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "AZURE_AUTH_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Try running 'az login' or check AZURE_TENANT_ID, AZURE_CLIENT_ID "
            "and AZURE_CLIENT_SECRET",
        )
        super().__init__(message, **kwargs)


class ImportTargetNotFoundError(RemoteAPIError):
    """Raised when importing an identifier that does not exist remotely."""

    def __init__(self, message: str, resource_id: Optional[str] = None, **kwargs: Any):
        context = kwargs.get("context") or {}
        if resource_id:
            context["resource_id"] = resource_id
        kwargs["context"] = context
        kwargs.setdefault("error_code", "IMPORT_TARGET_NOT_FOUND")
        kwargs.setdefault(
            "recovery_suggestion",
            "Check the identifier; only existing firewall rules can be imported",
        )
        super().__init__(message, **kwargs)


# Identifier and state exceptions
class MalformedIdentifierError(PgFirewallError):
    """Raised when a resource identifier cannot be decomposed into its segments."""

    def __init__(
        self,
        message: str,
        resource_id: Optional[str] = None,
        missing_segments: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context") or {}
        if resource_id is not None:
            context["resource_id"] = resource_id
        if missing_segments:
            context["missing_segments"] = missing_segments
        kwargs["context"] = context
        kwargs.setdefault("error_code", "MALFORMED_IDENTIFIER")
        super().__init__(message, **kwargs)
        self.resource_id = resource_id


class InvariantViolationError(PgFirewallError):
    """Raised when the remote API returns a state that breaks a local invariant."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "INVARIANT_VIOLATION")
        super().__init__(message, **kwargs)


class OperationCancelledError(PgFirewallError):
    """Raised when an operation is cancelled or runs past its deadline."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        timeout_value: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context") or {}
        if operation:
            context["operation"] = operation
        if timeout_value:
            context["timeout"] = f"{timeout_value}s"
        kwargs["context"] = context
        kwargs.setdefault("error_code", "OPERATION_CANCELLED")
        super().__init__(message, **kwargs)
        self.operation = operation


class StateFileError(PgFirewallError):
    """Raised when the local state file cannot be read or written."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any):
        context = kwargs.get("context") or {}
        if path:
            context["path"] = path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "STATE_FILE_ERROR")
        super().__init__(message, **kwargs)


# Configuration-related exceptions
class ConfigurationError(PgFirewallError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration validation fails."""

    def __init__(
        self, message: str, config_section: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context") or {}
        if config_section:
            context["config_section"] = config_section
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        kwargs.setdefault(
            "recovery_suggestion", "Check configuration file and environment variables"
        )
        super().__init__(message, **kwargs)


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(
        self, message: str, missing_keys: Optional[list[str]] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context") or {}
        if missing_keys:
            context["missing_keys"] = missing_keys
        kwargs["context"] = context
        kwargs.setdefault("error_code", "MISSING_CONFIG")
        kwargs.setdefault(
            "recovery_suggestion",
            f"Set required configuration: {', '.join(missing_keys)}"
            if missing_keys
            else "Set required configuration",
        )
        super().__init__(message, **kwargs)


# Validation-related exceptions
class ResourceValidationError(PgFirewallError):
    """Raised when a firewall rule specification fails boundary validation."""

    def __init__(
        self,
        message: str,
        validation_errors: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context") or {}
        if validation_errors:
            context["validation_errors"] = validation_errors
        kwargs["context"] = context
        kwargs.setdefault("error_code", "RESOURCE_VALIDATION_FAILED")
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors or []


# Utility functions for exception handling
def is_not_found(exc: BaseException) -> bool:
    """Return True when an Azure SDK exception signals a missing resource."""
    if isinstance(exc, ResourceNotFoundError):
        return True
    return isinstance(exc, HttpResponseError) and exc.status_code == 404


def wrap_azure_exception(
    exc: BaseException,
    rule_name: Optional[str] = None,
    operation: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> RemoteAPIError:
    """
    Wrap an Azure SDK exception in our custom exception hierarchy.

    Args:
        exc: The original exception
        rule_name: Firewall rule the call was made for
        operation: Name of the failed operation (create, read, delete)
        context: Optional context information

    Returns:
        RemoteAPIError: Wrapped exception with enhanced context
    """
    error_message = str(exc)

    if isinstance(exc, ClientAuthenticationError) or (
        isinstance(exc, HttpResponseError) and exc.status_code in (401, 403)
    ):
        return AzureAuthenticationError(
            f"Azure authentication failed: {error_message}",
            rule_name=rule_name,
            operation=operation,
            context=context,
            cause=exc,
        )
    return RemoteAPIError(
        f"Error making {operation or 'remote'} request on Azure PostgreSQL "
        f"Firewall Rule {rule_name}: {error_message}",
        rule_name=rule_name,
        operation=operation,
        context=context,
        cause=exc,
    )
