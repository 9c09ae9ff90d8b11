"""Workflow operations: create, respond, approve, return (write) and views/history (read).

Every transition goes through _apply_transition: record update (with
optimistic version check) then history append. The append is retried on
StoreException with bounded attempts; on exhaustion a reconciliation warning
is logged and the last error is re-raised. The actor id is always an
explicit argument.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from app.application.dtos.workflow import (
    HistoryEntryCreate,
    HistoryEntryResult,
    TransitionOutcome,
    WorkflowCreate,
    WorkflowFilter,
    WorkflowResult,
    WorkflowView,
)
from app.application.services.deadline_evaluator import is_overdue
from app.application.services.workflow_authorization import WorkflowAuthorizationGate
from app.application.services.workflow_state_machine import WorkflowStateMachine
from app.domain.enums import ResponseOutcome, WorkflowStatus
from app.domain.exceptions import ResourceNotFoundException, StoreException
from app.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from app.application.dtos.evidence import EvidenceFile
    from app.application.interfaces.repositories import (
        IWorkflowHistoryRepository,
        IWorkflowRepository,
    )
    from app.application.interfaces.services import IClock, IEvidenceStorage

logger = get_logger(__name__)

RESPOND_STATUSES_ORDERED = (WorkflowStatus.RETURNED, WorkflowStatus.PENDING)
VALIDATE_STATUSES_ORDERED = (
    WorkflowStatus.SUBMITTED_BLOCKED,
    WorkflowStatus.SUBMITTED_COMPLETED,
)


class WorkflowService:
    """Corrective/preventive action lifecycle over the record store and history log."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        history_repo: IWorkflowHistoryRepository,
        clock: IClock,
        *,
        state_machine: WorkflowStateMachine | None = None,
        evidence_storage: IEvidenceStorage | None = None,
        history_append_max_attempts: int = 3,
        history_append_retry_delay: float = 0.0,
    ) -> None:
        if history_append_max_attempts < 1:
            raise ValueError("history_append_max_attempts must be >= 1")
        self.workflow_repo = workflow_repo
        self.history_repo = history_repo
        self.clock = clock
        self.state_machine = state_machine or WorkflowStateMachine()
        self.evidence_storage = evidence_storage
        self.history_append_max_attempts = history_append_max_attempts
        self.history_append_retry_delay = history_append_retry_delay

    @property
    def gate(self) -> WorkflowAuthorizationGate:
        return self.state_machine.gate

    async def _load(self, workflow_id: str) -> WorkflowResult:
        workflow = await self.workflow_repo.get_workflow(workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", workflow_id)
        return workflow

    async def _append_history(self, entry: HistoryEntryCreate) -> HistoryEntryResult:
        """Append with bounded retries; re-raise the last StoreException on exhaustion."""
        last_error: StoreException | None = None
        for attempt in range(1, self.history_append_max_attempts + 1):
            try:
                return await self.history_repo.append_history(entry)
            except StoreException as e:
                last_error = e
                logger.warning(
                    "History append failed for workflow %s (%s), attempt %d/%d: %s",
                    entry.workflow_id,
                    entry.action.value,
                    attempt,
                    self.history_append_max_attempts,
                    e.details.get("reason", e.message),
                )
                if attempt < self.history_append_max_attempts and self.history_append_retry_delay:
                    await asyncio.sleep(self.history_append_retry_delay)
        logger.warning(
            "Reconciliation required: workflow %s has no history entry '%s' by %s "
            "after %d failed append attempts",
            entry.workflow_id,
            entry.action.value,
            entry.performed_by,
            self.history_append_max_attempts,
        )
        assert last_error is not None
        raise last_error

    async def _apply_transition(
        self, workflow: WorkflowResult, outcome: TransitionOutcome
    ) -> WorkflowResult:
        updated = await self.workflow_repo.update_workflow(
            workflow.id,
            outcome.changes,
            expected_version=workflow.version,
        )
        await self._append_history(outcome.history)
        logger.info(
            "Workflow %s: %s -> %s (%s by %s)",
            workflow.id,
            outcome.from_status.value,
            outcome.to_status.value,
            outcome.history.action.value,
            outcome.history.performed_by,
        )
        return updated

    # ---- Write operations ----

    async def create_workflow(self, data: WorkflowCreate, actor_id: str) -> WorkflowResult:
        """Create a pending workflow and record the 'created' history entry."""
        validated = self.state_machine.validate_create(data, self.clock.now())
        workflow = await self.workflow_repo.insert_workflow(validated)
        await self._append_history(
            self.state_machine.created_entry(workflow.id, actor_id)
        )
        logger.info(
            "Workflow %s (#%d) created for deviation %s by %s",
            workflow.id,
            workflow.sequence_id,
            workflow.deviation_id,
            actor_id,
        )
        return workflow

    async def respond(
        self,
        workflow_id: str,
        actor_id: str,
        outcome: ResponseOutcome,
        notes: str | None = None,
        evidence_photos: list[str] | None = None,
    ) -> WorkflowResult:
        """Submit the responsible party's response (completed or blocked)."""
        workflow = await self._load(workflow_id)
        transition = self.state_machine.respond(
            workflow,
            actor_id,
            outcome,
            self.clock.now(),
            notes=notes,
            photos=evidence_photos,
        )
        return await self._apply_transition(workflow, transition)

    async def approve(
        self, workflow_id: str, actor_id: str, notes: str | None = None
    ) -> WorkflowResult:
        """Approve a submitted response (terminal)."""
        workflow = await self._load(workflow_id)
        transition = self.state_machine.approve(
            workflow, actor_id, self.clock.now(), notes=notes
        )
        return await self._apply_transition(workflow, transition)

    async def return_for_rework(
        self, workflow_id: str, actor_id: str, validator_notes: str | None
    ) -> WorkflowResult:
        """Return a submitted response to the responsible party with notes."""
        workflow = await self._load(workflow_id)
        transition = self.state_machine.return_for_rework(
            workflow, actor_id, validator_notes, self.clock.now()
        )
        return await self._apply_transition(workflow, transition)

    async def upload_evidence(
        self, workflow_id: str, actor_id: str, files: list[EvidenceFile]
    ) -> list[str]:
        """Store evidence images for a pending response; returns opaque references.

        Only the responsible party may upload, and only while a response is
        awaited. References are attached to the record by respond().
        """
        if self.evidence_storage is None:
            raise StoreException("store_images", "Evidence storage is not configured")
        workflow = await self._load(workflow_id)
        self.state_machine.check_evidence_upload(workflow, actor_id, len(files))
        refs = await self.evidence_storage.store_images(files)
        logger.info(
            "Stored %d evidence file(s) for workflow %s by %s",
            len(refs),
            workflow_id,
            actor_id,
        )
        return refs

    # ---- Read operations ----

    def view(self, workflow: WorkflowResult, actor_id: str) -> WorkflowView:
        """Attach the actor's permitted actions and the overdue flag (evaluated now)."""
        return WorkflowView(
            workflow=workflow,
            permitted_actions=self.gate.permitted_actions(workflow, actor_id),
            is_overdue=is_overdue(workflow, self.clock.now()),
        )

    async def get_workflow_view(self, workflow_id: str, actor_id: str) -> WorkflowView:
        """Return one workflow as seen by actor_id."""
        return self.view(await self._load(workflow_id), actor_id)

    async def list_for_deviation(
        self, deviation_id: str, actor_id: str
    ) -> list[WorkflowView]:
        """Return all workflows of a deviation as seen by actor_id."""
        workflows = await self.workflow_repo.list_workflows_by_deviation(deviation_id)
        return [self.view(w, actor_id) for w in workflows]

    async def list_workflows(
        self,
        actor_id: str,
        filters: WorkflowFilter | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[WorkflowView]:
        """Return workflows matching filters as seen by actor_id."""
        workflows = await self.workflow_repo.list_workflows(
            filters or WorkflowFilter(), skip=skip, limit=limit
        )
        return [self.view(w, actor_id) for w in workflows]

    async def list_actionable(
        self, actor_id: str, limit: int = 100
    ) -> list[WorkflowView]:
        """Return workflows on which actor_id can act now (respond or validate).

        Responses awaited from the actor come first, then submissions awaiting
        validation by anyone other than their responsible party.
        """
        views: list[WorkflowView] = []
        seen: set[str] = set()
        for status in (*RESPOND_STATUSES_ORDERED, *VALIDATE_STATUSES_ORDERED):
            if status in RESPOND_STATUSES_ORDERED:
                filters = WorkflowFilter(status=status, responsible_id=actor_id)
            else:
                filters = WorkflowFilter(status=status, exclude_responsible_id=actor_id)
            workflows = await self.workflow_repo.list_workflows(filters, limit=limit)
            for workflow in workflows:
                if workflow.id in seen:
                    continue
                view = self.view(workflow, actor_id)
                if view.permitted_actions:
                    seen.add(workflow.id)
                    views.append(view)
        return views[:limit]

    async def get_history(self, workflow_id: str) -> list[HistoryEntryResult]:
        """Return the audit trail for a workflow, oldest first."""
        await self._load(workflow_id)
        return await self.history_repo.list_history(workflow_id)
