"""Domain exceptions for corrective/preventive action workflows.

Each rejection kind the engine can produce has one class here: invalid
payload, actor not permitted, action not valid from the current status,
store failure. app.core.exception_handlers turns them into JSON responses.
"""

from typing import Any


class HseException(Exception):
    """Root of every error raised by the workflow service.

    Carries a stable machine-readable code alongside the message so HTTP
    status mapping and client handling never parse message text.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(HseException):
    """Raised when input validation fails (e.g. blank required notes, past deadline)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(HseException):
    """Raised when the caller's identity cannot be established (e.g. invalid token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(HseException):
    """Raised when the actor lacks the permitted action for the workflow's current state."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'workflow').
            action: Optional action that was attempted (e.g. 'respond', 'validate').
            message: Human-readable message; default used when resource/action omitted.
            details_extra: Optional keys merged into details (e.g. workflow_id, status).
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        if details_extra:
            details.update(details_extra)
        super().__init__(message, "PERMISSION_DENIED", details)


class StateConflictException(HseException):
    """Raised when an action is not valid from the workflow's status, or the record changed concurrently."""

    def __init__(
        self,
        message: str,
        workflow_id: str | None = None,
        current_status: str | None = None,
        **details_extra: Any,
    ) -> None:
        """Initialize with message and conflict context.

        Args:
            message: Human-readable description.
            workflow_id: Workflow the action was attempted on.
            current_status: Status observed when the action was rejected.
            **details_extra: Optional keys merged into details (e.g. action, expected_version).
        """
        details: dict[str, Any] = {}
        if workflow_id:
            details["workflow_id"] = workflow_id
        if current_status:
            details["current_status"] = current_status
        details.update(details_extra)
        super().__init__(message, "STATE_CONFLICT", details)


class StoreException(HseException):
    """Raised when a record or history persistence call fails (backend fault)."""

    def __init__(
        self,
        operation: str,
        reason: str,
        error_code: str = "STORE_ERROR",
        **details_extra: Any,
    ) -> None:
        """Initialize with the failed operation and reason.

        Args:
            operation: Store operation that failed (e.g. 'append_history').
            reason: Underlying error text.
            error_code: Machine-readable code; subclasses override.
            **details_extra: Optional keys merged into details.
        """
        details = {"operation": operation, "reason": reason, **details_extra}
        super().__init__(f"Store operation failed: {operation}", error_code, details)


class ResourceNotFoundException(HseException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'workflow').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )
