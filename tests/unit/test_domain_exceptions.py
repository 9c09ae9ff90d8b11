"""Tests for domain exceptions (error_code, message, details)."""

from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    HseException,
    ResourceNotFoundException,
    StateConflictException,
    StoreException,
    ValidationException,
)
from app.infrastructure.exceptions import (
    DatabaseNotConfiguredError,
    StorageChecksumMismatchError,
    StorageUploadError,
)


def test_hse_exception_default_error_code() -> None:
    """Base HseException uses class name as error_code when not provided."""
    exc = HseException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "HseException"
    assert exc.details == {}


def test_to_dict_shape() -> None:
    exc = HseException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception_field() -> None:
    exc = ValidationException("Notes are required", field="notes")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "notes"}
    assert ValidationException("bad").details == {}


def test_authentication_exception() -> None:
    assert AuthenticationException().error_code == "AUTHENTICATION_ERROR"


def test_authorization_exception_message_and_details() -> None:
    exc = AuthorizationException(
        resource="workflow",
        action="validate",
        details_extra={"workflow_id": "wf-1"},
    )
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.message == "Permission denied: validate on workflow"
    assert exc.details == {
        "resource": "workflow",
        "action": "validate",
        "workflow_id": "wf-1",
    }


def test_state_conflict_details() -> None:
    exc = StateConflictException(
        "Cannot approve a workflow in status 'pending'",
        workflow_id="wf-1",
        current_status="pending",
        action="approve",
    )
    assert exc.error_code == "STATE_CONFLICT"
    assert exc.details == {
        "workflow_id": "wf-1",
        "current_status": "pending",
        "action": "approve",
    }


def test_store_exception_message() -> None:
    exc = StoreException("append_history", "timeout")
    assert exc.error_code == "STORE_ERROR"
    assert exc.message == "Store operation failed: append_history"
    assert exc.details == {"operation": "append_history", "reason": "timeout"}


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("workflow", "wf-9")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "workflow", "resource_id": "wf-9"}


def test_infrastructure_errors_are_store_exceptions() -> None:
    for exc in (
        DatabaseNotConfiguredError(),
        StorageUploadError("evidence/a.jpg", "disk full"),
        StorageChecksumMismatchError("evidence/a.jpg", "aa", "bb"),
    ):
        assert isinstance(exc, StoreException)
    assert DatabaseNotConfiguredError().error_code == "SERVICE_UNAVAILABLE"
