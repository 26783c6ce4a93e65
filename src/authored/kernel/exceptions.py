"""Exception hierarchy for the authored plugin.

All plugin exceptions inherit from AuthoredException, so the host can catch
a single type for anything raised by this package.

Categories:
- BusinessException: registration rule violations, bad input
- InfrastructureException: collaborator lookup and persistence failures
- SecurityException: access denied by an access check
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class AuthoredException(Exception):
    """Base exception for all authored errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "DUPL_AUTHORED_MODULE_NAME").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(AuthoredException):
    """Domain rule violations and business logic errors."""


class ValidationException(BusinessException):
    """Input validation failures."""


class ResourceNotFoundException(BusinessException):
    """Requested resource does not exist."""


class ConflictException(BusinessException):
    """Operation conflicts with current state (e.g. duplicate registration)."""


class DuplicateRegistrationException(ConflictException):
    """A module was registered with the authored plugin more than once."""

    def __init__(self, module_name: str) -> None:
        super().__init__(
            f"Module '{module_name}' already registered with authored module",
            code="DUPL_AUTHORED_MODULE_NAME",
            context={"module": module_name},
        )


class InvalidModuleClassException(ValidationException):
    """A module without the API module capability tried to register."""

    def __init__(self, module_name: str) -> None:
        super().__init__(
            f"Module '{module_name}' must extend AbstractApiModule",
            code="API_MODULE_INVALID_CLASS",
            context={"module": module_name},
        )


class SchemaNotFoundException(ResourceNotFoundException):
    """A schema name is not known to the schema registry."""

    def __init__(self, schema_name: str) -> None:
        super().__init__(
            f"Schema '{schema_name}' is not registered",
            code="MISSING_SCHEMA",
            context={"schema": schema_name},
        )


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(AuthoredException):
    """Infrastructure failures: persistence, collaborator lookup."""


class ModuleNotFoundException(InfrastructureException):
    """A collaborator module was requested but never registered."""

    def __init__(self, module_name: str, suggestions: list[str] | None = None) -> None:
        self.suggestions = suggestions or []
        message = f"No module named '{module_name}' is registered"
        if self.suggestions:
            message += f" (similar: {', '.join(self.suggestions)})"
        super().__init__(message, code="MISSING_MODULE", context={"module": module_name})


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(AuthoredException):
    """Authentication and authorization errors."""


class ForbiddenException(SecurityException):
    """Authenticated caller lacks permission to perform the operation."""
