"""Workflow API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.workflow import WorkflowView
from app.domain.enums import (
    HistoryAction,
    PermittedAction,
    ResponseOutcome,
    WorkflowNature,
    WorkflowStatus,
)


class WorkflowCreateRequest(BaseModel):
    """Request body for raising a corrective/preventive action on a deviation."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    responsible_id: str = Field(..., min_length=1, max_length=255)
    nature: WorkflowNature
    deadline: datetime = Field(..., description="Must be in the future (ISO8601)")


class RespondRequest(BaseModel):
    """Responsible party's submission: completed or blocked."""

    outcome: ResponseOutcome
    notes: str | None = Field(
        default=None, description="Required when outcome is 'blocked'"
    )
    evidence_photos: list[str] = Field(
        default_factory=list,
        description="References returned by POST /workflows/{id}/evidence",
    )


class ApproveRequest(BaseModel):
    """Validator approval; notes are kept in history only."""

    notes: str | None = None


class ReturnRequest(BaseModel):
    """Validator return for rework."""

    validator_notes: str = Field(..., description="Reason for returning (non-blank)")


class WorkflowResponse(BaseModel):
    """Workflow record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    sequence_id: int
    deviation_id: str
    title: str
    description: str | None
    responsible_id: str
    nature: WorkflowNature
    deadline: datetime
    status: WorkflowStatus
    response_notes: str | None
    evidence_photos: list[str]
    validator_notes: str | None
    validator_id: str | None
    validated_at: datetime | None
    completed_at: datetime | None
    version: int
    created_at: datetime | None
    updated_at: datetime | None


class WorkflowViewResponse(WorkflowResponse):
    """Workflow record as seen by the current actor."""

    permitted_actions: list[PermittedAction] = Field(default_factory=list)
    is_overdue: bool = False


class HistoryEntryResponse(BaseModel):
    """One audit trail entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    workflow_id: str
    action: HistoryAction
    notes: str | None
    photos: list[str]
    performed_by: str
    created_at: datetime | None


class EvidenceUploadResponse(BaseModel):
    """Stored evidence references, to be passed to POST /workflows/{id}/respond."""

    references: list[str]


def to_view_response(view: WorkflowView) -> WorkflowViewResponse:
    """Build the API view of a workflow for one actor."""
    base = WorkflowResponse.model_validate(view.workflow)
    return WorkflowViewResponse(
        **base.model_dump(),
        permitted_actions=sorted(view.permitted_actions, key=lambda a: a.value),
        is_overdue=view.is_overdue,
    )
