"""Application use cases (orchestration over ports)."""

from app.application.use_cases.workflows import WorkflowService

__all__ = ["WorkflowService"]
