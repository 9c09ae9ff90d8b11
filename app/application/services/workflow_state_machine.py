"""Workflow state machine: validates an action and decides the next status.

Pure transition logic. Given the current record, the acting user, the
requested action and its payload, returns a TransitionOutcome (record
changes + history entry) or raises. Nothing is persisted here; see
WorkflowService for the record update and history append.

Check order for every transition: status (StateConflictException), then
actor (AuthorizationException), then payload (ValidationException).
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.application.dtos.workflow import (
    HistoryEntryCreate,
    TransitionOutcome,
    WorkflowCreate,
)
from app.application.services.workflow_authorization import (
    RESPOND_STATUSES,
    VALIDATE_STATUSES,
    WorkflowAuthorizationGate,
)
from app.domain.enums import (
    HistoryAction,
    PermittedAction,
    ResponseOutcome,
    WorkflowNature,
    WorkflowStatus,
)
from app.domain.exceptions import StateConflictException, ValidationException
from app.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from app.application.dtos.workflow import WorkflowResult

_SUBMIT_STATUS: dict[ResponseOutcome, WorkflowStatus] = {
    ResponseOutcome.COMPLETED: WorkflowStatus.SUBMITTED_COMPLETED,
    ResponseOutcome.BLOCKED: WorkflowStatus.SUBMITTED_BLOCKED,
}
_SUBMIT_TAG: dict[ResponseOutcome, HistoryAction] = {
    ResponseOutcome.COMPLETED: HistoryAction.SUBMITTED_COMPLETED,
    ResponseOutcome.BLOCKED: HistoryAction.SUBMITTED_BLOCKED,
}


def _clean_text(value: str | None) -> str | None:
    """Strip whitespace; blank becomes None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _require_text(value: str | None, field: str, message: str) -> str:
    cleaned = _clean_text(value)
    if cleaned is None:
        raise ValidationException(message, field=field)
    return cleaned


class WorkflowStateMachine:
    """Transition rules for corrective/preventive action workflows."""

    def __init__(
        self,
        gate: WorkflowAuthorizationGate | None = None,
        *,
        max_evidence_photos: int | None = None,
    ) -> None:
        self.gate = gate or WorkflowAuthorizationGate()
        self.max_evidence_photos = max_evidence_photos

    def _ensure_status(
        self,
        workflow: WorkflowResult,
        allowed: frozenset[WorkflowStatus],
        action: str,
    ) -> WorkflowStatus:
        status = WorkflowStatus(workflow.status)
        if status not in allowed:
            raise StateConflictException(
                f"Cannot {action} a workflow in status '{status.value}'",
                workflow_id=workflow.id,
                current_status=status.value,
                action=action,
            )
        return status

    def _check_photos(self, photos: list[str] | None) -> list[str]:
        refs = [p for p in (photos or []) if p]
        if self.max_evidence_photos is not None and len(refs) > self.max_evidence_photos:
            raise ValidationException(
                f"At most {self.max_evidence_photos} evidence photos are allowed",
                field="evidence_photos",
            )
        return refs

    def validate_create(self, data: WorkflowCreate, now: datetime) -> WorkflowCreate:
        """Validate a new workflow and return it normalized with status pending.

        Raises:
            ValidationException: Missing required field or deadline not in the future.
        """
        deviation_id = _require_text(
            data.deviation_id, "deviation_id", "Deviation is required"
        )
        title = _require_text(data.title, "title", "Title is required")
        responsible_id = _require_text(
            data.responsible_id, "responsible_id", "Responsible party is required"
        )
        if data.deadline is None:
            raise ValidationException("Deadline is required", field="deadline")
        deadline = ensure_utc(data.deadline)
        if deadline <= ensure_utc(now):
            raise ValidationException("Deadline must be in the future", field="deadline")
        try:
            nature = WorkflowNature(data.nature)
        except ValueError as e:
            raise ValidationException(
                f"Nature must be one of {WorkflowNature.values()}", field="nature"
            ) from e
        return replace(
            data,
            deviation_id=deviation_id,
            title=title,
            description=_clean_text(data.description),
            responsible_id=responsible_id,
            nature=nature,
            deadline=deadline,
            status=WorkflowStatus.PENDING,
        )

    def created_entry(self, workflow_id: str, actor_id: str) -> HistoryEntryCreate:
        """History entry recorded right after a workflow is inserted."""
        return HistoryEntryCreate(
            workflow_id=workflow_id,
            action=HistoryAction.CREATED,
            performed_by=actor_id,
        )

    def check_evidence_upload(
        self, workflow: WorkflowResult, actor_id: str, count: int
    ) -> None:
        """Evidence may be uploaded only by the responsible party while a response is awaited."""
        self._ensure_status(workflow, RESPOND_STATUSES, "upload evidence for")
        self.gate.require(workflow, actor_id, PermittedAction.RESPOND)
        if count < 1:
            raise ValidationException("At least one file is required", field="files")
        if self.max_evidence_photos is not None and count > self.max_evidence_photos:
            raise ValidationException(
                f"At most {self.max_evidence_photos} evidence photos are allowed",
                field="files",
            )

    def respond(
        self,
        workflow: WorkflowResult,
        actor_id: str,
        outcome: ResponseOutcome,
        now: datetime,
        notes: str | None = None,
        photos: list[str] | None = None,
    ) -> TransitionOutcome:
        """Responsible party submits the workflow as completed or blocked.

        Notes are required when blocked. A response to a returned workflow is
        tagged 'resubmitted' in history; the resulting status is the same as a
        first submission.
        """
        outcome = ResponseOutcome(outcome)
        from_status = self._ensure_status(workflow, RESPOND_STATUSES, "respond to")
        self.gate.require(workflow, actor_id, PermittedAction.RESPOND)
        if outcome == ResponseOutcome.BLOCKED:
            cleaned_notes: str | None = _require_text(
                notes, "notes", "Notes are required when reporting a blocked action"
            )
        else:
            cleaned_notes = _clean_text(notes)
        refs = self._check_photos(photos)

        to_status = _SUBMIT_STATUS[outcome]
        tag = (
            HistoryAction.RESUBMITTED
            if from_status == WorkflowStatus.RETURNED
            else _SUBMIT_TAG[outcome]
        )
        changes: dict[str, Any] = {
            "status": to_status,
            "response_notes": cleaned_notes,
            "evidence_photos": refs,
            "completed_at": now,
        }
        if from_status == WorkflowStatus.RETURNED:
            changes["validator_notes"] = None
        return TransitionOutcome(
            from_status=from_status,
            to_status=to_status,
            changes=changes,
            history=HistoryEntryCreate(
                workflow_id=workflow.id,
                action=tag,
                performed_by=actor_id,
                notes=cleaned_notes,
                photos=refs,
            ),
        )

    def approve(
        self,
        workflow: WorkflowResult,
        actor_id: str,
        now: datetime,
        notes: str | None = None,
    ) -> TransitionOutcome:
        """Validator approves a submitted response. Approved is terminal."""
        from_status = self._ensure_status(workflow, VALIDATE_STATUSES, "approve")
        self.gate.require(workflow, actor_id, PermittedAction.VALIDATE)
        cleaned_notes = _clean_text(notes)
        return TransitionOutcome(
            from_status=from_status,
            to_status=WorkflowStatus.APPROVED,
            changes={
                "status": WorkflowStatus.APPROVED,
                "validator_notes": None,
                "validator_id": actor_id,
                "validated_at": now,
            },
            history=HistoryEntryCreate(
                workflow_id=workflow.id,
                action=HistoryAction.APPROVED,
                performed_by=actor_id,
                notes=cleaned_notes,
            ),
        )

    def return_for_rework(
        self,
        workflow: WorkflowResult,
        actor_id: str,
        validator_notes: str | None,
        now: datetime,
    ) -> TransitionOutcome:
        """Validator sends a submitted response back to the responsible party.

        Raises:
            ValidationException: validator_notes blank.
        """
        from_status = self._ensure_status(workflow, VALIDATE_STATUSES, "return")
        self.gate.require(workflow, actor_id, PermittedAction.VALIDATE)
        cleaned_notes = _require_text(
            validator_notes,
            "validator_notes",
            "Notes are required when returning an action for rework",
        )
        return TransitionOutcome(
            from_status=from_status,
            to_status=WorkflowStatus.RETURNED,
            changes={
                "status": WorkflowStatus.RETURNED,
                "validator_notes": cleaned_notes,
                "validator_id": actor_id,
                "validated_at": now,
            },
            history=HistoryEntryCreate(
                workflow_id=workflow.id,
                action=HistoryAction.RETURNED,
                performed_by=actor_id,
                notes=cleaned_notes,
            ),
        )
