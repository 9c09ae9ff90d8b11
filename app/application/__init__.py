"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (record store, history log,
evidence storage, clock).
"""

from app.application.interfaces import (
    IClock,
    IEvidenceStorage,
    IWorkflowHistoryRepository,
    IWorkflowRepository,
)
from app.application.services.deadline_evaluator import is_overdue
from app.application.services.workflow_authorization import WorkflowAuthorizationGate
from app.application.services.workflow_state_machine import WorkflowStateMachine
from app.application.use_cases.workflows import WorkflowService

__all__ = [
    "IClock",
    "IEvidenceStorage",
    "IWorkflowHistoryRepository",
    "IWorkflowRepository",
    "WorkflowAuthorizationGate",
    "WorkflowService",
    "WorkflowStateMachine",
    "is_overdue",
]
