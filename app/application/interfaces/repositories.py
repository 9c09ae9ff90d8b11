"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.workflow import (
        HistoryEntryCreate,
        HistoryEntryResult,
        WorkflowCreate,
        WorkflowFilter,
        WorkflowResult,
    )


# Workflow record store interface
class IWorkflowRepository(Protocol):
    """Protocol for the workflow record store (current-state projection)."""

    async def get_workflow(self, workflow_id: str) -> WorkflowResult | None:
        """Return workflow by ID, or None."""

    async def list_workflows_by_deviation(self, deviation_id: str) -> list[WorkflowResult]:
        """Return workflows owned by the deviation ordered by sequence_id."""

    async def list_workflows(
        self,
        filters: WorkflowFilter,
        skip: int = 0,
        limit: int = 100,
    ) -> list[WorkflowResult]:
        """Return workflows matching filters, newest sequence first."""

    async def insert_workflow(self, data: WorkflowCreate) -> WorkflowResult:
        """Insert a workflow; the store assigns id, sequence_id, version and timestamps."""

    async def update_workflow(
        self,
        workflow_id: str,
        changes: dict[str, Any],
        *,
        expected_version: int | None = None,
    ) -> WorkflowResult:
        """Apply partial changes and bump version.

        When expected_version is given and does not match the stored version,
        raises StateConflictException. Raises ResourceNotFoundException if the
        workflow does not exist.
        """


# History log interface
class IWorkflowHistoryRepository(Protocol):
    """Protocol for the append-only workflow history log. No update or delete."""

    async def append_history(self, entry: HistoryEntryCreate) -> HistoryEntryResult:
        """Append one entry; the store assigns id and created_at."""

    async def list_history(self, workflow_id: str) -> list[HistoryEntryResult]:
        """Return entries for the workflow ordered by created_at ascending."""
