"""Derived overdue flag for workflows. Display-only; never written back to the record."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.domain.enums import WorkflowStatus
from app.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from app.application.dtos.workflow import WorkflowResult


def is_overdue(workflow: WorkflowResult, now: datetime) -> bool:
    """Return True iff the deadline has passed and the workflow is still pending.

    Submitted, approved and returned workflows are never flagged, even past
    their deadline.
    """
    if WorkflowStatus(workflow.status) != WorkflowStatus.PENDING:
        return False
    deadline = ensure_utc(workflow.deadline)
    return deadline is not None and deadline < ensure_utc(now)
