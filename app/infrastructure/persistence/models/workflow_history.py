"""Workflow history ORM model. Append-only audit trail of workflow transitions."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Connection,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    event,
    text,
)
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from app.domain.enums import HistoryAction
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin

_ACTION_VALUES = ", ".join(f"'{v}'" for v in HistoryAction.values())


class WorkflowHistory(CuidMixin, Base):
    """One transition applied to a workflow. Table: workflow_history. No update/delete."""

    __tablename__ = "workflow_history"

    workflow_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow.id", ondelete="RESTRICT"), nullable=False
    )
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    photos: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    performed_by: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("clock_timestamp()"), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            f"action IN ({_ACTION_VALUES})", name="workflow_history_action_check"
        ),
        Index("ix_workflow_history_workflow_created", "workflow_id", "created_at"),
    )


@event.listens_for(WorkflowHistory, "before_update")
def _prevent_history_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: WorkflowHistory
) -> None:
    """History entries are append-only; updates are forbidden."""
    raise ValueError("Workflow history entries are immutable and cannot be updated.")


@event.listens_for(WorkflowHistory, "before_delete")
def _prevent_history_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: WorkflowHistory
) -> None:
    """History entries cannot be deleted."""
    raise ValueError("Workflow history entries cannot be deleted.")
