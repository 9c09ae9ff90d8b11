"""Workflow authorization gate: which actions an actor may take on a workflow right now.

Single definition of the responsible-party vs. validator rule. Pure: depends
only on (status, responsible_id, actor_id).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.enums import PermittedAction, WorkflowStatus
from app.domain.exceptions import AuthorizationException

if TYPE_CHECKING:
    from app.application.dtos.workflow import WorkflowResult

RESPOND_STATUSES = frozenset({WorkflowStatus.PENDING, WorkflowStatus.RETURNED})
VALIDATE_STATUSES = frozenset(
    {WorkflowStatus.SUBMITTED_COMPLETED, WorkflowStatus.SUBMITTED_BLOCKED}
)

_NONE: frozenset[PermittedAction] = frozenset()


class WorkflowAuthorizationGate:
    """Centralized permitted-action checks for workflows.

    The responsible party may respond while the workflow awaits a response;
    any other actor may validate while a response awaits validation.
    """

    def is_responsible(self, workflow: WorkflowResult, actor_id: str) -> bool:
        """Return True if actor_id is the workflow's responsible party."""
        return bool(actor_id) and actor_id == workflow.responsible_id

    def permitted_actions(
        self, workflow: WorkflowResult, actor_id: str
    ) -> frozenset[PermittedAction]:
        """Return the actions actor_id may perform at the workflow's current status.

        An empty set means the workflow is read-only to that actor. A blank
        actor_id never receives any action.
        """
        if not actor_id or not actor_id.strip():
            return _NONE
        status = WorkflowStatus(workflow.status)
        if self.is_responsible(workflow, actor_id):
            if status in RESPOND_STATUSES:
                return frozenset({PermittedAction.RESPOND})
            return _NONE
        if status in VALIDATE_STATUSES:
            return frozenset({PermittedAction.VALIDATE})
        return _NONE

    def require(
        self,
        workflow: WorkflowResult,
        actor_id: str,
        action: PermittedAction,
    ) -> None:
        """Raise AuthorizationException if action is not in the actor's permitted set."""
        if action not in self.permitted_actions(workflow, actor_id):
            raise AuthorizationException(
                resource="workflow",
                action=action.value,
                details_extra={
                    "workflow_id": workflow.id,
                    "status": WorkflowStatus(workflow.status).value,
                },
            )
