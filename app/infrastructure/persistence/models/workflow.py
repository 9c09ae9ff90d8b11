"""Workflow ORM model. One corrective/preventive action raised against a deviation."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Identity,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import WorkflowNature, WorkflowStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    VersionedMixin,
)

_STATUS_VALUES = ", ".join(f"'{v}'" for v in WorkflowStatus.values())
_NATURE_VALUES = ", ".join(f"'{v}'" for v in WorkflowNature.values())


class Workflow(CuidMixin, TimestampMixin, VersionedMixin, Base):
    """Current-state projection of a workflow. Table: workflow.

    deviation_id references a deviation owned by the surrounding application;
    access control for it is enforced outside this service.
    """

    __tablename__ = "workflow"

    sequence_id: Mapped[int] = mapped_column(
        Integer, Identity(always=True), nullable=False, unique=True
    )
    deviation_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    responsible_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    nature: Mapped[str] = mapped_column(
        String(32), nullable=False, default=WorkflowNature.CORRECTIVE.value
    )
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=WorkflowStatus.PENDING.value,
        server_default=WorkflowStatus.PENDING.value,
    )
    response_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_photos: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    validator_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    validator_id: Mapped[str | None] = mapped_column(String, nullable=True)
    validated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="workflow_status_check"),
        CheckConstraint(f"nature IN ({_NATURE_VALUES})", name="workflow_nature_check"),
        Index("ix_workflow_status_responsible", "status", "responsible_id"),
    )
