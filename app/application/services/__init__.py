"""Application services: authorization gate, overdue evaluator, state machine."""

from app.application.services.deadline_evaluator import is_overdue
from app.application.services.workflow_authorization import (
    RESPOND_STATUSES,
    VALIDATE_STATUSES,
    WorkflowAuthorizationGate,
)
from app.application.services.workflow_state_machine import WorkflowStateMachine

__all__ = [
    "RESPOND_STATUSES",
    "VALIDATE_STATUSES",
    "WorkflowAuthorizationGate",
    "WorkflowStateMachine",
    "is_overdue",
]
