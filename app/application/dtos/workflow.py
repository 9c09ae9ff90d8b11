"""DTOs for corrective/preventive action workflows (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.enums import HistoryAction, PermittedAction, WorkflowNature, WorkflowStatus


@dataclass(frozen=True)
class WorkflowCreate:
    """Input for inserting a workflow record (write-model). Store assigns id, sequence_id and timestamps."""

    deviation_id: str
    title: str
    description: str | None
    responsible_id: str
    nature: WorkflowNature
    deadline: datetime
    status: WorkflowStatus = WorkflowStatus.PENDING


@dataclass(frozen=True)
class WorkflowResult:
    """Workflow read-model (result of get, list, insert, update)."""

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
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class WorkflowFilter:
    """Filters for listing workflows across deviations."""

    status: WorkflowStatus | None = None
    responsible_id: str | None = None
    deviation_id: str | None = None
    exclude_responsible_id: str | None = None


@dataclass(frozen=True)
class HistoryEntryCreate:
    """Input for appending one history entry."""

    workflow_id: str
    action: HistoryAction
    performed_by: str
    notes: str | None = None
    photos: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HistoryEntryResult:
    """History entry read-model. Entries are never updated or deleted."""

    id: str
    workflow_id: str
    action: HistoryAction
    notes: str | None
    photos: list[str]
    performed_by: str
    created_at: datetime


@dataclass(frozen=True)
class TransitionOutcome:
    """Decision of the state machine for one accepted action.

    changes holds the partial record fields to write; history is the entry
    to append once the record update succeeds.
    """

    from_status: WorkflowStatus
    to_status: WorkflowStatus
    changes: dict[str, Any]
    history: HistoryEntryCreate


@dataclass(frozen=True)
class WorkflowView:
    """Workflow as seen by one actor: record plus derived permissions and overdue flag."""

    workflow: WorkflowResult
    permitted_actions: frozenset[PermittedAction]
    is_overdue: bool
