"""Workflow service dependencies (composition root).

Builds WorkflowService from SQLAlchemy repositories, the system clock and
local evidence storage. Read routes get a plain session; write routes get
a transactional session so the record update and history append commit
or roll back together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.workflow_state_machine import WorkflowStateMachine
from app.application.use_cases.workflows import WorkflowService
from app.core.config import Settings, get_settings
from app.infrastructure.external.storage import LocalEvidenceStorage
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    WorkflowHistoryRepository,
    WorkflowRepository,
)
from app.infrastructure.services import SystemClock


def get_evidence_storage(
    settings: Annotated[Settings, Depends(get_settings)],
) -> LocalEvidenceStorage:
    """Local evidence storage configured from settings."""
    return LocalEvidenceStorage(
        settings.storage_root,
        allowed_mime_types=settings.evidence_mime_types,
        max_file_size=settings.max_upload_size,
        base_url=settings.storage_base_url,
    )


def _build_service(
    db: AsyncSession,
    settings: Settings,
    evidence_storage: LocalEvidenceStorage | None,
) -> WorkflowService:
    return WorkflowService(
        WorkflowRepository(db),
        WorkflowHistoryRepository(db),
        SystemClock(),
        state_machine=WorkflowStateMachine(
            max_evidence_photos=settings.max_evidence_photos
        ),
        evidence_storage=evidence_storage,
        history_append_max_attempts=settings.history_append_max_attempts,
        history_append_retry_delay=settings.history_append_retry_delay_seconds,
    )


async def get_workflow_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkflowService:
    """WorkflowService for read operations (views, lists, history)."""
    return _build_service(db, settings, evidence_storage=None)


async def get_workflow_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    settings: Annotated[Settings, Depends(get_settings)],
    evidence_storage: Annotated[LocalEvidenceStorage, Depends(get_evidence_storage)],
) -> WorkflowService:
    """WorkflowService for transitions and evidence upload (transactional)."""
    return _build_service(db, settings, evidence_storage=evidence_storage)
