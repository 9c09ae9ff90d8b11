"""Domain enumerations for corrective/preventive action workflows.

Enums represent fixed sets of domain values (status, nature, history tags).
"""

from enum import Enum


class WorkflowStatus(str, Enum):
    """Lifecycle status of a workflow.

    pending -> submitted_completed | submitted_blocked -> approved | returned;
    returned loops back to the submitted states on resubmission.
    """

    PENDING = "pending"
    SUBMITTED_COMPLETED = "submitted_completed"
    SUBMITTED_BLOCKED = "submitted_blocked"
    APPROVED = "approved"
    RETURNED = "returned"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]

    @property
    def is_submitted(self) -> bool:
        """True for the two states awaiting validation."""
        return self in (WorkflowStatus.SUBMITTED_COMPLETED, WorkflowStatus.SUBMITTED_BLOCKED)

    @property
    def awaits_response(self) -> bool:
        """True for the states in which the responsible party must act."""
        return self in (WorkflowStatus.PENDING, WorkflowStatus.RETURNED)


class WorkflowNature(str, Enum):
    """Kind of remediation action."""

    CORRECTIVE = "corrective"
    PREVENTIVE = "preventive"

    @classmethod
    def values(cls) -> list[str]:
        return [nature.value for nature in cls]


class HistoryAction(str, Enum):
    """Tag recorded on each history entry."""

    CREATED = "created"
    SUBMITTED_COMPLETED = "submitted_completed"
    SUBMITTED_BLOCKED = "submitted_blocked"
    APPROVED = "approved"
    RETURNED = "returned"
    RESUBMITTED = "resubmitted"

    @classmethod
    def values(cls) -> list[str]:
        return [action.value for action in cls]


class ResponseOutcome(str, Enum):
    """Outcome chosen by the responsible party when responding."""

    COMPLETED = "completed"
    BLOCKED = "blocked"


class PermittedAction(str, Enum):
    """Action group an actor may perform on a workflow at its current status."""

    RESPOND = "respond"
    VALIDATE = "validate"
